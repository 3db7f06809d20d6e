"""
Domain-split SQLAlchemy models.

Exposes `Base`, `now_utc`, and all ORM classes from a single import path.
"""

from .base import Base, now_utc  # re-export

# Domain models
from .users import User, UserType
from .products import Product
from .reviews import Review

__all__ = [
    # base
    "Base",
    "now_utc",
    # users
    "User",
    "UserType",
    # catalog
    "Product",
    "Review",
]
