"""
Repositories for products.

Search by title substring and price bounds, plus create/update/delete.
"""
from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from catalog.db import models, schemas


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _with_relations(query):
    return query.options(
        joinedload(models.Product.user),
        selectinload(models.Product.reviews),
    )


def get_product(db: Session, *, product_id: uuid.UUID) -> Optional[models.Product]:
    return _with_relations(db.query(models.Product)).filter(models.Product.id == product_id).first()


def search_products(
    db: Session,
    *,
    title: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> List[models.Product]:
    query = _with_relations(db.query(models.Product))
    if title:
        # Stored titles are lowercase; lowering both sides keeps legacy rows matching too
        pattern = _escape_like(title.strip().lower())
        query = query.filter(models.Product.title.ilike(f"%{pattern}%", escape="\\"))
    if min_price is not None:
        query = query.filter(models.Product.price >= min_price)
    if max_price is not None:
        query = query.filter(models.Product.price <= max_price)
    return query.order_by(models.Product.created_at.desc()).all()


def create_product(db: Session, *, user_id: uuid.UUID, payload: schemas.ProductCreate) -> models.Product:
    product = models.Product(
        title=payload.title.strip().lower(),
        description=payload.description,
        price=payload.price,
        user_id=user_id,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def update_product(db: Session, *, product: models.Product, payload: schemas.ProductUpdate) -> models.Product:
    changed = False
    if payload.title is not None:
        product.title = payload.title.strip().lower()
        changed = True
    if payload.description is not None:
        product.description = payload.description
        changed = True
    if payload.price is not None:
        product.price = payload.price
        changed = True
    if changed:
        db.commit()
        db.refresh(product)
    return product


def delete_product(db: Session, *, product: models.Product) -> None:
    db.delete(product)
    db.commit()
