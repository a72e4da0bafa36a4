"""The single document holding every collection of the ledger."""

from typing import Optional

from pydantic import BaseModel, Field

from walletcore.models.cart import Cart
from walletcore.models.transaction import Transaction
from walletcore.models.user import User
from walletcore.models.wallet import Wallet


class LedgerDocument(BaseModel):
    """Whole persisted state.

    The store reads and rewrites this document wholesale. ``revision`` is
    bumped by the store on each successful commit and is what writers
    compare-and-swap on.
    """

    revision: int = 0
    users: list[User] = Field(default_factory=list)
    wallets: list[Wallet] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    carts: list[Cart] = Field(default_factory=list)

    def find_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def find_user_by_email(self, email: str) -> Optional[User]:
        wanted = email.strip().lower()
        return next((u for u in self.users if u.email.lower() == wanted), None)

    def find_wallet(self, user_id: str) -> Optional[Wallet]:
        return next((w for w in self.wallets if w.user_id == user_id), None)

    def find_cart(self, user_id: str) -> Optional[Cart]:
        return next((c for c in self.carts if c.user_id == user_id), None)

    def transactions_for(self, user_id: str) -> list[Transaction]:
        return [t for t in self.transactions if t.user_id == user_id]

    def has_reference(self, reference: str) -> bool:
        return any(t.reference == reference for t in self.transactions)
