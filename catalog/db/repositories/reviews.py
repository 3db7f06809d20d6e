"""
Repositories for product reviews, including paginated listing.
"""
from __future__ import annotations

import uuid
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from catalog.db import models, schemas


def _with_relations(query):
    return query.options(
        joinedload(models.Review.user),
        joinedload(models.Review.product),
    )


def get_review(db: Session, *, review_id: uuid.UUID) -> Optional[models.Review]:
    return _with_relations(db.query(models.Review)).filter(models.Review.id == review_id).first()


def list_reviews(db: Session, *, skip: int = 0, limit: int = 5) -> Tuple[List[models.Review], int]:
    total = db.query(models.Review).count()
    items = (
        _with_relations(db.query(models.Review))
        .order_by(models.Review.created_at.desc(), models.Review.id.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return items, total


def create_review(
    db: Session,
    *,
    product_id: uuid.UUID,
    user_id: uuid.UUID,
    payload: schemas.ReviewCreate,
) -> models.Review:
    review = models.Review(
        rating=payload.rating,
        comment=payload.comment,
        product_id=product_id,
        user_id=user_id,
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


def update_review(db: Session, *, review: models.Review, payload: schemas.ReviewUpdate) -> models.Review:
    changed = False
    if payload.rating is not None:
        review.rating = payload.rating
        changed = True
    if payload.comment is not None:
        review.comment = payload.comment
        changed = True
    if changed:
        db.commit()
        db.refresh(review)
    return review


def delete_review(db: Session, *, review: models.Review) -> None:
    db.delete(review)
    db.commit()
