import enum
import uuid
from sqlalchemy import Column, String, DateTime, Boolean, Integer, Enum, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class UserType(str, enum.Enum):
    ADMIN = "ADMIN"
    NORMAL_USER = "NORMAL_USER"


class User(Base):
    __tablename__ = 'users'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(320), nullable=False, unique=True, index=True)
    name = Column(String(150), nullable=False)
    # Argon2id hash, never the raw password
    password = Column(Text, nullable=False)
    age = Column(Integer, nullable=True)
    user_type = Column(Enum(UserType, name='user_type'), nullable=False, default=UserType.NORMAL_USER)
    is_account_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(String(64), nullable=True)
    reset_password_code = Column(Text, nullable=True)
    reset_password_expires_at = Column(DateTime(timezone=True), nullable=True)
    profile_pic = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    products = relationship("Product", back_populates="user", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")
