"""Transaction record stored in the ledger document."""

import enum
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from walletcore.models.base import utcnow


class TransactionType(str, enum.Enum):
    """Direction of a money movement.

    Values:
        TOPUP: Credit, positive amount
        PURCHASE: Debit, negative amount
    """

    TOPUP = "topup"
    PURCHASE = "purchase"


class TransactionStatus(str, enum.Enum):
    """Transaction status enum.

    Only COMPLETED is ever written; the field is kept so that a pending
    lifecycle can be introduced later without reshaping stored records.
    """

    COMPLETED = "completed"


class Transaction(BaseModel):
    """Immutable, append-only ledger entry.

    Attributes:
        id: Unique identifier (uuid4 string)
        user_id: Owner of the wallet the entry belongs to
        type: topup or purchase
        amount: Signed minor-unit amount, positive for credits
        description: Human-readable summary
        plan_name: Purchased plan, for purchase entries
        reference: External payment reference, for top-ups
        status: Always COMPLETED
        created_at: Entry timestamp
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    type: TransactionType
    amount: int
    description: str
    plan_name: Optional[str] = None
    reference: Optional[str] = None
    status: TransactionStatus = TransactionStatus.COMPLETED
    created_at: datetime = Field(default_factory=utcnow)
