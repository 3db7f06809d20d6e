"""
Reviews API endpoints.

Listing is public and paginated; writes require a signed-in member, and
only the author (or an admin, for deletion) may change a review.
"""
import math
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from catalog.api.deps import payload_user_id, require_member
from catalog.db import models, schemas
from catalog.db.database import get_db
from catalog.db.repositories import products as product_repo
from catalog.db.repositories import reviews as review_repo
from catalog.db.repositories import users as user_repo
from catalog.utils.jwt_tokens import TokenPayload

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


def _dump(model_cls, obj) -> dict:
    return model_cls.model_validate(obj).model_dump(by_alias=True, mode="json")


def _get_or_404(db: Session, review_id: uuid.UUID) -> models.Review:
    review = review_repo.get_review(db, review_id=review_id)
    if not review:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return review


@router.post("/{product_id}", status_code=status.HTTP_201_CREATED)
def create_review(
    product_id: uuid.UUID,
    payload: schemas.ReviewCreate,
    db: Session = Depends(get_db),
    token: TokenPayload = Depends(require_member),
):
    if not product_repo.get_product(db, product_id=product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    user_id = payload_user_id(token)
    if not user_repo.get_by_id(db, user_id=user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    review = review_repo.create_review(db, product_id=product_id, user_id=user_id, payload=payload)
    return {"message": "Review created successfully", "review": _dump(schemas.Review, review)}


@router.get("")
def list_reviews(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=5, ge=1, le=100),
    db: Session = Depends(get_db),
):
    items, total = review_repo.list_reviews(db, skip=(page - 1) * limit, limit=limit)
    total_pages = math.ceil(total / limit)
    return {
        "message": "Reviews found successfully",
        "reviews": [_dump(schemas.ReviewDetail, r) for r in items],
        "metadata": {
            "total": total,
            "page": page,
            "totalPages": total_pages,
            "hasNextPage": page < total_pages,
            "hasPrevPage": page > 1,
        },
    }


@router.get("/{review_id}")
def get_review(review_id: uuid.UUID, db: Session = Depends(get_db)):
    review = _get_or_404(db, review_id)
    return {"message": "Review found successfully", "review": _dump(schemas.ReviewDetail, review)}


@router.put("/{review_id}")
def update_review(
    review_id: uuid.UUID,
    payload: schemas.ReviewUpdate,
    db: Session = Depends(get_db),
    token: TokenPayload = Depends(require_member),
):
    review = _get_or_404(db, review_id)
    if review.user_id != payload_user_id(token):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not allowed to update this review")
    review = review_repo.update_review(db, review=review, payload=payload)
    return {"message": "Review updated successfully", "review": _dump(schemas.Review, review)}


@router.delete("/{review_id}")
def delete_review(
    review_id: uuid.UUID,
    db: Session = Depends(get_db),
    token: TokenPayload = Depends(require_member),
):
    review = _get_or_404(db, review_id)
    actor = user_repo.get_by_id(db, user_id=payload_user_id(token))
    is_admin = actor is not None and actor.user_type == models.UserType.ADMIN
    if not is_admin and review.user_id != actor.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not allowed to delete this review")
    review_repo.delete_review(db, review=review)
    return {"message": "Review deleted successfully"}
