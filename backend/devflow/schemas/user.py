"""
DevFlow Backend — User, Account & Credential Schemas
======================================================

What:  Validation for user/account creation and credential sign-up/in, plus
       the public user and account shapes.
Who:   `devflow.services.user_service`, `account_service`, `auth_service`.

Security:
    `AccountOut` never carries the password hash, and sign-in failures never
    say which half of the credentials was wrong beyond user/account/password.
"""

import re
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from devflow.schemas.common import PaginatedSearchParams
from devflow.schemas.question import AnswerOut, QuestionOut

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")


# ══════════════════════════════════════════════════════════════════════════
# Input Models
# ══════════════════════════════════════════════════════════════════════════


class UserParams(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    username: str = Field(min_length=3, max_length=30)
    email: EmailStr
    bio: Optional[str] = None
    image: Optional[str] = None
    location: Optional[str] = None
    portfolio: Optional[str] = None
    reputation: int = Field(default=0, ge=0)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not USERNAME_PATTERN.match(v):
            raise ValueError("Username can only contain letters, numbers, and underscores.")
        return v


class AccountParams(BaseModel):
    user_id: uuid.UUID
    name: str = Field(min_length=1)
    image: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=100)
    provider: str = Field(min_length=1)
    provider_account_id: str = Field(min_length=1)


class SignInParams(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)


class SignUpParams(SignInParams):
    name: str = Field(min_length=1, max_length=50)
    username: str = Field(min_length=3, max_length=30)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not USERNAME_PATTERN.match(v):
            raise ValueError("Username can only contain letters, numbers, and underscores.")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not NAME_PATTERN.match(v):
            raise ValueError("Name can only contain letters and spaces.")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter.")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter.")
        if not re.search(r"[0-9]", v):
            raise ValueError("Password must contain at least one number.")
        if not re.search(r"[^a-zA-Z0-9]", v):
            raise ValueError("Password must contain at least one special character.")
        return v


class GetUserParams(BaseModel):
    user_id: uuid.UUID


class GetUserContentParams(PaginatedSearchParams):
    user_id: uuid.UUID


# ══════════════════════════════════════════════════════════════════════════
# Output Models
# ══════════════════════════════════════════════════════════════════════════


class UserOut(BaseModel):
    id: uuid.UUID
    name: str
    username: str
    email: str
    bio: Optional[str] = None
    image: Optional[str] = None
    location: Optional[str] = None
    portfolio: Optional[str] = None
    reputation: int = 0
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    image: Optional[str] = None
    provider: str
    provider_account_id: str
    created_at: datetime

    model_config = {"from_attributes": True}


class UserList(BaseModel):
    users: List[UserOut]
    is_next: bool


class UserProfile(BaseModel):
    user: UserOut
    total_questions: int
    total_answers: int


class UserQuestionList(BaseModel):
    questions: List[QuestionOut]
    is_next: bool


class UserAnswerList(BaseModel):
    answers: List[AnswerOut]
    is_next: bool


class AuthOut(BaseModel):
    """Returned by sign-up and sign-in: who signed in and their session token."""
    user_id: uuid.UUID
    access_token: str
    token_type: str = "bearer"
