"""Cart Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from walletcore.schemas.transaction import TransactionRead


class AddItemRequest(BaseModel):
    """Request schema for adding a plan to the cart."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "plan_name": "Pro",
                "price": 300000,
                "alt_price": 2000,
                "description": "Pro API Plan"
            }
        }
    )

    plan_name: str = Field(..., min_length=1, max_length=128)
    price: int = Field(..., gt=0, strict=True, description="Price in minor units")
    alt_price: Optional[int] = Field(
        default=None,
        gt=0,
        strict=True,
        description="Price in a secondary display currency",
    )
    description: Optional[str] = Field(default=None, max_length=255)


class CartItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    plan_name: str
    price: int
    alt_price: Optional[int] = None
    description: str
    added_at: datetime


class CartRead(BaseModel):
    items: list[CartItemRead]
    total: int
    currency: str
    item_count: int


class AddItemResponse(BaseModel):
    item: CartItemRead
    total: int
    item_count: int


class RemoveItemResponse(BaseModel):
    removed_item: CartItemRead
    total: int
    item_count: int


class ClearCartResponse(BaseModel):
    total: int = 0
    item_count: int = 0


class CheckoutResponse(BaseModel):
    purchased_items: list[CartItemRead]
    total_paid: int
    new_balance: int
    transactions: list[TransactionRead]
