import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=3)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = Field(default=None, min_length=3)


class ReviewAuthor(BaseModel):
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class ReviewProduct(BaseModel):
    title: str

    model_config = ConfigDict(from_attributes=True)


class Review(BaseModel):
    id: uuid.UUID
    rating: int
    comment: str
    product_id: uuid.UUID = Field(serialization_alias="productId")
    user_id: uuid.UUID = Field(serialization_alias="userId")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, serialization_alias="updatedAt")

    model_config = ConfigDict(from_attributes=True)


class ReviewDetail(Review):
    user: Optional[ReviewAuthor] = None
    product: Optional[ReviewProduct] = None
