"""
Products API endpoints.

Public search and lookup; creation and changes are restricted to admins.
"""
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from catalog.api.deps import payload_user_id, require_admin
from catalog.db import models, schemas
from catalog.db.database import get_db
from catalog.db.repositories import products as product_repo
from catalog.utils.jwt_tokens import TokenPayload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


def _dump(model_cls, obj) -> dict:
    return model_cls.model_validate(obj).model_dump(by_alias=True, mode="json")


def _get_or_404(db: Session, product_id: uuid.UUID) -> models.Product:
    product = product_repo.get_product(db, product_id=product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    payload: schemas.ProductCreate,
    db: Session = Depends(get_db),
    admin: TokenPayload = Depends(require_admin),
):
    product = product_repo.create_product(db, user_id=payload_user_id(admin), payload=payload)
    logger.info("Product %s created by user id=%s", product.id, admin.id)
    return {"message": "Product created successfully", "product": _dump(schemas.Product, product)}


@router.get("")
def search_products(
    title: Optional[str] = Query(default=None),
    minprice: Optional[float] = Query(default=None, ge=0),
    maxprice: Optional[float] = Query(default=None, ge=0),
    db: Session = Depends(get_db),
):
    products = product_repo.search_products(db, title=title, min_price=minprice, max_price=maxprice)
    return {
        "message": "Products found successfully",
        "products": [_dump(schemas.ProductDetail, p) for p in products],
    }


@router.get("/{product_id}")
def get_product(product_id: uuid.UUID, db: Session = Depends(get_db)):
    product = _get_or_404(db, product_id)
    return {"message": "Product found successfully", "product": _dump(schemas.ProductDetail, product)}


@router.put("/{product_id}")
def update_product(
    product_id: uuid.UUID,
    payload: schemas.ProductUpdate,
    db: Session = Depends(get_db),
    _admin: TokenPayload = Depends(require_admin),
):
    product = _get_or_404(db, product_id)
    product = product_repo.update_product(db, product=product, payload=payload)
    return {"message": "Product updated successfully", "product": _dump(schemas.Product, product)}


@router.delete("/{product_id}")
def delete_product(
    product_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: TokenPayload = Depends(require_admin),
):
    product = _get_or_404(db, product_id)
    product_repo.delete_product(db, product=product)
    logger.info("Product %s deleted by user id=%s", product_id, admin.id)
    return {"message": "Product deleted successfully"}
