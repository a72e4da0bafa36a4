"""Document record exports.

Every collection of the ledger document is modelled here; the store
serializes ``LedgerDocument`` as a whole.
"""

from walletcore.models.cart import Cart, CartItem
from walletcore.models.document import LedgerDocument
from walletcore.models.transaction import (
    Transaction,
    TransactionStatus,
    TransactionType,
)
from walletcore.models.user import User
from walletcore.models.wallet import Wallet

__all__ = [
    "Cart",
    "CartItem",
    "LedgerDocument",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "User",
    "Wallet",
]
