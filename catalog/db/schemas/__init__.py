"""
Domain-split Pydantic schemas with a single import path.
"""

from .users import (
    RegisterRequest,
    LoginRequest,
    UpdateUserRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UserSummary,
)
from .products import (
    ProductCreate,
    ProductUpdate,
    Owner,
    ProductReview,
    Product,
    ProductDetail,
)
from .reviews import (
    ReviewCreate,
    ReviewUpdate,
    ReviewAuthor,
    ReviewProduct,
    Review,
    ReviewDetail,
)

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "UpdateUserRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UserSummary",
    "ProductCreate",
    "ProductUpdate",
    "Owner",
    "ProductReview",
    "Product",
    "ProductDetail",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewAuthor",
    "ReviewProduct",
    "Review",
    "ReviewDetail",
]
