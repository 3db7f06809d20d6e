import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _not_blank(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError("must not be empty")
    return v


class ProductCreate(BaseModel):
    title: str = Field(min_length=3)
    description: str = Field(min_length=10)
    price: float = Field(ge=0)

    check_not_blank = field_validator("title", "description")(_not_blank)


class ProductUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = Field(default=None, min_length=10)
    price: Optional[float] = Field(default=None, ge=0)

    check_not_blank = field_validator("title", "description")(_not_blank)


class Owner(BaseModel):
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class ProductReview(BaseModel):
    id: uuid.UUID
    rating: int
    comment: str
    user_id: uuid.UUID = Field(serialization_alias="userId")
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = ConfigDict(from_attributes=True)


class Product(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    price: float
    user_id: uuid.UUID = Field(serialization_alias="userId")

    model_config = ConfigDict(from_attributes=True)


class ProductDetail(Product):
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, serialization_alias="updatedAt")
    user: Optional[Owner] = None
    reviews: List[ProductReview] = []
