"""Wiring of the store, transactor and services for one process."""

from dataclasses import dataclass
from typing import Optional

from walletcore.core.config import Settings
from walletcore.db.store import DocumentStore, create_store
from walletcore.services.account_service import AccountService
from walletcore.services.cart_service import CartService
from walletcore.services.checkout_service import CheckoutService
from walletcore.services.notifications import Notifier
from walletcore.services.transactor import Transactor
from walletcore.services.wallet_service import WalletService


@dataclass
class Services:
    store: DocumentStore
    transactor: Transactor
    accounts: AccountService
    wallets: WalletService
    carts: CartService
    checkout: CheckoutService
    notifier: Notifier
    settings: Settings

    @property
    def currency(self) -> str:
        return self.settings.DEFAULT_CURRENCY

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: Optional[DocumentStore] = None,
    ) -> "Services":
        store = store or create_store(settings)
        transactor = Transactor(
            store,
            max_retries=settings.COMMIT_MAX_RETRIES,
            retry_backoff=settings.COMMIT_RETRY_BACKOFF,
        )
        return cls(
            store=store,
            transactor=transactor,
            accounts=AccountService(transactor, default_currency=settings.DEFAULT_CURRENCY),
            wallets=WalletService(transactor),
            carts=CartService(transactor),
            checkout=CheckoutService(transactor),
            notifier=Notifier(enabled=settings.NOTIFICATIONS_ENABLED),
            settings=settings,
        )
