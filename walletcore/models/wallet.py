"""Wallet record stored in the ledger document."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from walletcore.models.base import utcnow


class Wallet(BaseModel):
    """Per-user prepaid balance in minor currency units.

    Attributes:
        user_id: Owner of the wallet (one wallet per user)
        balance: Spendable balance in minor units, never negative
        currency: ISO currency code, fixed for the wallet's lifetime
        created_at: Record creation timestamp
        updated_at: Timestamp of the last balance change
    """

    model_config = ConfigDict(validate_assignment=True)

    user_id: str
    balance: int = Field(default=0, ge=0)
    currency: str = Field(default="NGN", max_length=3)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
