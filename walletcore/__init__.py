"""Wallet ledger core: accounts, prepaid wallets, carts and checkout."""

__version__ = "1.0.0"
