import re
import uuid
from typing import Annotated, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

_HAS_LETTER = re.compile(r".*[a-zA-Z].*")

# Surrounding whitespace is removed before the length check runs
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2)]
DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3)]


class RegisterRequest(BaseModel):
    # New accounts are always NORMAL_USER; a client-sent role is ignored
    name: Name
    email: EmailStr
    password: str = Field(min_length=6)
    age: Optional[int] = Field(default=None, ge=0, le=120)

    @field_validator("name")
    @classmethod
    def name_has_letter(cls, v: str) -> str:
        if not _HAS_LETTER.match(v):
            raise ValueError("Name must contain at least one letter")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class UpdateUserRequest(BaseModel):
    password: Optional[str] = Field(default=None, min_length=6)
    name: Optional[DisplayName] = None


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    code: str = Field(pattern=r"^\d{6}$")
    password: str = Field(min_length=6)


class UserSummary(BaseModel):
    id: uuid.UUID
    email: str
    name: str

    model_config = ConfigDict(from_attributes=True)
