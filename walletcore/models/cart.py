"""Cart records stored in the ledger document."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from walletcore.models.base import utcnow


class CartItem(BaseModel):
    """Selected plan waiting for checkout.

    Attributes:
        id: Unique identifier (uuid4 string)
        plan_name: Plan being bought, unique within a cart
        price: Price in the wallet's minor units
        alt_price: Price in a secondary display currency, informational only
        description: Human-readable summary
        added_at: Timestamp the item was added
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    plan_name: str
    price: int = Field(gt=0)
    alt_price: Optional[int] = None
    description: str
    added_at: datetime = Field(default_factory=utcnow)


class Cart(BaseModel):
    """At most one open cart per user."""

    user_id: str
    items: list[CartItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def total(self) -> int:
        return sum(item.price for item in self.items)

    def find_plan(self, plan_name: str) -> Optional[CartItem]:
        return next((i for i in self.items if i.plan_name == plan_name), None)
