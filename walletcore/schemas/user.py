"""User Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr

from walletcore.schemas.wallet import BalanceRead


class RegisterRequest(BaseModel):
    """Schema for registering a new User."""

    email: EmailStr
    password: str
    name: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserRead(BaseModel):
    """Schema for reading User data.

    Excludes sensitive fields like password_hash.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    verified: bool
    created_at: datetime


class RegisterResponse(BaseModel):
    user: UserRead
    token: str


class LoginResponse(BaseModel):
    user: UserRead
    wallet: BalanceRead
    token: str


class ProfileResponse(BaseModel):
    user: UserRead
    wallet: BalanceRead
