"""
Account workflows: registration, login, email verification, password reset,
profile management and profile pictures.
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from catalog.db import models, schemas
from catalog.db.repositories import users as user_repo
from catalog.services.mail_service import MailService
from catalog.services.storage_service import LocalFileStorage
from catalog.utils import passwords
from catalog.utils.jwt_tokens import TokenPayload, create_access_token
from catalog.utils.runtime import profile_image_dir, public_domain, reset_code_ttl_minutes

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
VERIFICATION_PENDING = "Verification token has been sent to your email, please verify your email address"
FORGOT_PASSWORD_SENT = "If an account exists for this email, a reset code has been sent"
INVALID_RESET_CODE = "Invalid or expired reset code"


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def user_data(user: models.User) -> Dict[str, Any]:
    return {
        "id": str(user.id),
        "email": user.email,
        "name": user.name,
        "age": user.age,
        "userType": user.user_type.value if user.user_type else None,
        "isAccountVerified": bool(user.is_account_verified),
        "profilePic": user.profile_pic,
    }


class AccountService:
    def __init__(self, db: Session, mail: MailService, storage: Optional[LocalFileStorage] = None):
        self.db = db
        self.mail = mail
        self.storage = storage or LocalFileStorage(profile_image_dir())

    def verification_link(self, user: models.User) -> str:
        return f"{public_domain()}/api/users/verify-email/{user.id}/{user.verification_token}"

    # Registration / login -------------------------------------------------

    async def register(self, payload: schemas.RegisterRequest) -> Dict[str, Any]:
        if user_repo.get_by_email(self.db, email=payload.email):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email, user already exists")

        user = user_repo.create_user(
            self.db,
            email=payload.email,
            name=payload.name,
            password_hash=passwords.hash_password(payload.password),
            age=payload.age,
            verification_token=passwords.generate_verification_token(),
        )
        logger.info("Registered user id=%s", user.id)
        await self.mail.send_verify_mail(user.email, self.verification_link(user))

        return {
            "message": "User registered successfully, please check your email to verify your account",
            "user": {"id": str(user.id), "email": user.email, "name": user.name},
        }

    async def login(self, payload: schemas.LoginRequest) -> Dict[str, Any]:
        user = user_repo.get_by_email(self.db, email=payload.email)
        if not user:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_CREDENTIALS)
        if not passwords.verify_password(payload.password, user.password):
            logger.warning("Failed login attempt for user id=%s", user.id)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

        if not user.is_account_verified:
            user_repo.set_verification_token(self.db, user=user, token=passwords.generate_verification_token())
            await self.mail.send_verify_mail(user.email, self.verification_link(user))
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=VERIFICATION_PENDING)

        access_token = create_access_token(str(user.id), user.email)
        await self.mail.send_login_mail(user.email)
        logger.info("User logged in id=%s", user.id)

        return {
            "message": "Logged in successfully",
            "accessToken": access_token,
            "user": {"id": str(user.id), "email": user.email, "name": user.name, "age": user.age},
        }

    def verify_email(self, user_id: uuid.UUID, token: str) -> Dict[str, Any]:
        user = user_repo.get_by_id(self.db, user_id=user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        if user.verification_token is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="There is no verification token")
        if user.verification_token != token:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid link")

        user_repo.mark_verified(self.db, user=user)
        return {"message": "Your email has been verified, please log in to your account"}

    # Password reset -------------------------------------------------------

    async def forgot_password(self, email: str) -> Dict[str, Any]:
        user = user_repo.get_by_email(self.db, email=email)
        if user:
            code = passwords.generate_reset_code()
            expires_at = datetime.now(timezone.utc) + timedelta(minutes=reset_code_ttl_minutes())
            user_repo.set_reset_code(self.db, user=user, code_hash=passwords.hash_password(code), expires_at=expires_at)
            await self.mail.send_reset_password_mail(user.email, code)
        else:
            logger.info("Password reset requested for unknown email")
        return {"message": FORGOT_PASSWORD_SENT}

    def reset_password(self, email: str, code: str, new_password: str) -> Dict[str, Any]:
        user = user_repo.get_by_email(self.db, email=email)
        if not user or not user.reset_password_code:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_RESET_CODE)

        expires_at = _as_utc(user.reset_password_expires_at)
        if expires_at is None or datetime.now(timezone.utc) > expires_at:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_RESET_CODE)
        if not passwords.verify_password(code, user.reset_password_code):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_RESET_CODE)

        user_repo.complete_password_reset(self.db, user=user, password_hash=passwords.hash_password(new_password))
        logger.info("Password reset completed for user id=%s", user.id)
        return {"message": "Password has been reset successfully, please log in with your new password"}

    # Profile --------------------------------------------------------------

    def _get_user_or_404(self, user_id: uuid.UUID) -> models.User:
        user = user_repo.get_by_id(self.db, user_id=user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    def get_current_user(self, user_id: uuid.UUID) -> Dict[str, Any]:
        user = self._get_user_or_404(user_id)
        return {"message": "User found successfully", "userData": user_data(user)}

    def get_all_users(self) -> Dict[str, Any]:
        users = user_repo.list_users(self.db)
        return {"message": "Users found successfully", "usersData": [user_data(u) for u in users]}

    def update(self, user_id: uuid.UUID, payload: schemas.UpdateUserRequest) -> Dict[str, Any]:
        user = user_repo.get_by_id(self.db, user_id=user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User not found")
        user_repo.update_profile(
            self.db,
            user=user,
            name=payload.name,
            password_hash=passwords.hash_password(payload.password) if payload.password else None,
        )
        return {"message": "User updated successfully"}

    def delete(self, target_id: uuid.UUID, payload: TokenPayload) -> Dict[str, Any]:
        target = self._get_user_or_404(target_id)
        actor = user_repo.get_by_id(self.db, user_id=uuid.UUID(str(payload.id)))
        is_admin = actor is not None and actor.user_type == models.UserType.ADMIN
        if not is_admin and str(target.id) != str(payload.id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not allowed")

        picture = target.profile_pic
        user_repo.delete_user(self.db, user=target)
        if picture:
            self.storage.delete(picture)
        logger.info("User id=%s removed by id=%s", target_id, payload.id)
        return {"message": "User has been removed"}

    # Profile pictures -----------------------------------------------------

    async def update_profile_picture(self, user_id: uuid.UUID, upload: UploadFile) -> Dict[str, Any]:
        user = self._get_user_or_404(user_id)
        if not (upload.content_type or "").startswith("image/"):
            await upload.close()
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only image files are allowed")

        stored = await self.storage.save(upload)
        previous = user.profile_pic
        user_repo.set_profile_pic(self.db, user=user, filename=stored.filename)
        if previous and previous != stored.filename:
            self.storage.delete(previous)

        return {
            "message": "Profile picture updated successfully",
            "filename": stored.filename,
            "imageUrl": f"/images/profile/{stored.filename}",
        }

    def delete_profile_picture(self, user_id: uuid.UUID) -> Dict[str, Any]:
        user = self._get_user_or_404(user_id)
        if not user.profile_pic:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No profile picture found")
        self.storage.delete(user.profile_pic)
        user_repo.set_profile_pic(self.db, user=user, filename=None)
        return {"message": "Profile picture deleted successfully"}

    def profile_picture_path(self, user_id: uuid.UUID) -> Path:
        user = self._get_user_or_404(user_id)
        if not user.profile_pic:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No profile picture found")
        path = self.storage.resolve(user.profile_pic)
        if path is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Profile picture file not found")
        return path
