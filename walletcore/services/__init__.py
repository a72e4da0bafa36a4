# Ledger services

from walletcore.services.account_service import AccountService
from walletcore.services.cart_service import CartService
from walletcore.services.checkout_service import CheckoutResult, CheckoutService
from walletcore.services.transactor import Transactor
from walletcore.services.wallet_service import LedgerEntry, Purchase, WalletBalance, WalletService

__all__ = [
    "AccountService",
    "CartService",
    "CheckoutResult",
    "CheckoutService",
    "LedgerEntry",
    "Purchase",
    "Transactor",
    "WalletBalance",
    "WalletService",
]
