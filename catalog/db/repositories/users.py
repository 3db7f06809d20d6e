"""
Repositories for users.

Lookup by id/email, creation, credential and verification state updates.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from catalog.db import models


def get_by_id(db: Session, *, user_id: uuid.UUID) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_by_email(db: Session, *, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()


def list_users(db: Session) -> List[models.User]:
    return db.query(models.User).order_by(models.User.created_at.asc()).all()


def create_user(
    db: Session,
    *,
    email: str,
    name: str,
    password_hash: str,
    age: Optional[int] = None,
    user_type: Optional[models.UserType] = None,
    verification_token: Optional[str] = None,
) -> models.User:
    user = models.User(
        email=email.strip().lower(),
        name=name,
        password=password_hash,
        age=age,
        user_type=user_type or models.UserType.NORMAL_USER,
        is_account_verified=False,
        verification_token=verification_token,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_profile(
    db: Session,
    *,
    user: models.User,
    name: Optional[str] = None,
    password_hash: Optional[str] = None,
) -> models.User:
    changed = False
    if name:
        user.name = name
        changed = True
    if password_hash:
        user.password = password_hash
        changed = True
    if changed:
        db.commit()
        db.refresh(user)
    return user


def set_verification_token(db: Session, *, user: models.User, token: Optional[str]) -> models.User:
    user.verification_token = token
    db.commit()
    db.refresh(user)
    return user


def mark_verified(db: Session, *, user: models.User) -> models.User:
    user.is_account_verified = True
    user.verification_token = None
    db.commit()
    db.refresh(user)
    return user


def set_reset_code(db: Session, *, user: models.User, code_hash: str, expires_at: datetime) -> models.User:
    user.reset_password_code = code_hash
    user.reset_password_expires_at = expires_at
    db.commit()
    db.refresh(user)
    return user


def complete_password_reset(db: Session, *, user: models.User, password_hash: str) -> models.User:
    user.password = password_hash
    user.reset_password_code = None
    user.reset_password_expires_at = None
    db.commit()
    db.refresh(user)
    return user


def set_profile_pic(db: Session, *, user: models.User, filename: Optional[str]) -> models.User:
    user.profile_pic = filename
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, *, user: models.User) -> None:
    db.delete(user)
    db.commit()
