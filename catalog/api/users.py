"""
Users API endpoints.

Registration, login, email verification, password reset, profile updates
and profile pictures.
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from catalog.api.deps import get_current_payload, payload_user_id, require_admin, require_member
from catalog.db import schemas
from catalog.db.database import get_db
from catalog.services.account_service import AccountService
from catalog.services.mail_service import MailService, get_mail_service
from catalog.utils.jwt_tokens import TokenPayload

router = APIRouter(prefix="/api/users", tags=["users"])


def _path_user_id(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


def get_account_service(
    db: Session = Depends(get_db),
    mail: MailService = Depends(get_mail_service),
) -> AccountService:
    return AccountService(db, mail)


@router.post("/auth/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: schemas.RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
):
    return await accounts.register(payload)


@router.post("/auth/login")
async def login(
    payload: schemas.LoginRequest,
    accounts: AccountService = Depends(get_account_service),
):
    return await accounts.login(payload)


@router.get("/current-user")
def current_user(
    payload: TokenPayload = Depends(get_current_payload),
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.get_current_user(payload_user_id(payload))


@router.get("")
def list_users(
    _admin: TokenPayload = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.get_all_users()


@router.put("")
def update_me(
    payload: schemas.UpdateUserRequest,
    token: TokenPayload = Depends(require_member),
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.update(payload_user_id(token), payload)


# Profile pictures

@router.post("/upload-image")
async def upload_profile_image(
    file: Optional[UploadFile] = File(default=None),
    payload: TokenPayload = Depends(get_current_payload),
    accounts: AccountService = Depends(get_account_service),
):
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    return await accounts.update_profile_picture(payload_user_id(payload), file)


@router.delete("/delete-image")
def delete_profile_image(
    payload: TokenPayload = Depends(get_current_payload),
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.delete_profile_picture(payload_user_id(payload))


@router.get("/profile-image")
def get_profile_image(
    payload: TokenPayload = Depends(get_current_payload),
    accounts: AccountService = Depends(get_account_service),
):
    return FileResponse(accounts.profile_picture_path(payload_user_id(payload)))


# Verification and password reset

@router.get("/verify-email/{user_id}/{verification_token}")
def verify_email(
    user_id: str,
    verification_token: str,
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.verify_email(_path_user_id(user_id), verification_token)


@router.post("/forgot-password")
async def forgot_password(
    payload: schemas.ForgotPasswordRequest,
    accounts: AccountService = Depends(get_account_service),
):
    return await accounts.forgot_password(payload.email)


@router.post("/reset-password")
def reset_password(
    payload: schemas.ResetPasswordRequest,
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.reset_password(payload.email, payload.code, payload.password)


# Declared last so the literal paths above are matched first
@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    token: TokenPayload = Depends(require_member),
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.delete(_path_user_id(user_id), token)
