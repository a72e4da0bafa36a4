# Pydantic Data Transfer Objects

from walletcore.schemas.cart import (
    AddItemRequest,
    AddItemResponse,
    CartItemRead,
    CartRead,
    CheckoutResponse,
    ClearCartResponse,
    RemoveItemResponse,
)
from walletcore.schemas.transaction import TransactionList, TransactionRead
from walletcore.schemas.user import (
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    UserRead,
)
from walletcore.schemas.wallet import (
    BalanceRead,
    LedgerEntryResponse,
    PayRequest,
    PurchaseList,
    PurchaseRead,
    PurchaseResponse,
    TopupRequest,
)

__all__ = [
    "AddItemRequest",
    "AddItemResponse",
    "BalanceRead",
    "CartItemRead",
    "CartRead",
    "CheckoutResponse",
    "ClearCartResponse",
    "LedgerEntryResponse",
    "LoginRequest",
    "LoginResponse",
    "PayRequest",
    "ProfileResponse",
    "PurchaseList",
    "PurchaseRead",
    "PurchaseResponse",
    "RegisterRequest",
    "RegisterResponse",
    "RemoveItemResponse",
    "TopupRequest",
    "TransactionList",
    "TransactionRead",
    "UserRead",
]
