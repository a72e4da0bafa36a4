"""Wallet Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from walletcore.schemas.transaction import TransactionRead


class BalanceRead(BaseModel):
    """Schema for reading a wallet balance."""

    model_config = ConfigDict(from_attributes=True)

    balance: int
    currency: str
    updated_at: datetime


class TopupRequest(BaseModel):
    """Request schema for crediting a wallet."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "amount": 500000,
                "reference": "PSK_1a2b3c4d"
            }
        }
    )

    amount: int = Field(..., gt=0, strict=True, description="Amount in minor units")
    reference: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=128,
        description="External payment reference, credited at most once",
    )


class PayRequest(BaseModel):
    """Request schema for paying from a wallet."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "amount": 300000,
                "plan_name": "Pro"
            }
        }
    )

    amount: int = Field(..., gt=0, strict=True, description="Amount in minor units")
    plan_name: Optional[str] = Field(default=None, max_length=128)
    description: Optional[str] = Field(default=None, max_length=255)


class LedgerEntryResponse(BaseModel):
    """A committed credit or debit and the balance it produced."""

    new_balance: int
    transaction: TransactionRead


class PurchaseRead(BaseModel):
    """A completed purchase; ``amount`` is the positive price paid."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    plan_name: Optional[str] = None
    amount: int
    description: str
    purchased_at: datetime


class PurchaseList(BaseModel):
    """Purchase history, newest first."""

    purchases: list[PurchaseRead]


class PurchaseResponse(BaseModel):
    purchase: PurchaseRead
