"""Transaction Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_serializer

from walletcore.models.transaction import TransactionStatus, TransactionType


class TransactionRead(BaseModel):
    """Schema for reading Transaction data.

    Type and status are serialized as their string enum values.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    type: TransactionType
    amount: int
    description: str
    plan_name: Optional[str] = None
    reference: Optional[str] = None
    status: TransactionStatus
    created_at: datetime

    @field_serializer("type", "status")
    def serialize_enum(self, value: TransactionType | TransactionStatus) -> str:
        """Serialize enums as plain string values."""
        return value.value


class TransactionList(BaseModel):
    """Transaction history, newest first."""

    transactions: list[TransactionRead]
