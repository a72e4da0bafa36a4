"""Wallet ledger service: balance mutation and transaction records.

The ledger keeps one invariant above all others: for every user,

    wallet.balance == sum(t.amount for t in that user's transactions)

which holds because the balance only ever changes in the same document
mutation that appends the matching Transaction, and both are committed
together by the transactor. Balances never go negative: a debit that
would overdraw is rejected before anything is touched.

The ``apply_*`` functions are the in-document building blocks. They are
shared with checkout, which needs to debit inside its own critical
section, and with registration, which opens the wallet.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from walletcore.core.exceptions import (
    ConflictError,
    DuplicateReferenceError,
    InsufficientFundsError,
    InvalidAmountError,
    NotFoundError,
)
from walletcore.models.base import utcnow
from walletcore.models.document import LedgerDocument
from walletcore.models.transaction import Transaction, TransactionStatus, TransactionType
from walletcore.models.wallet import Wallet
from walletcore.services.transactor import Transactor

logger = logging.getLogger(__name__)

DEFAULT_TOPUP_DESCRIPTION = "Wallet top-up"


@dataclass(frozen=True)
class WalletBalance:
    balance: int
    currency: str
    updated_at: datetime


@dataclass(frozen=True)
class Purchase:
    """A completed purchase as shown in the buyer's purchase history.

    ``amount`` is the positive price paid, not the signed ledger amount.
    """

    id: str
    plan_name: Optional[str]
    amount: int
    description: str
    purchased_at: datetime

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "Purchase":
        return cls(
            id=transaction.id,
            plan_name=transaction.plan_name,
            amount=abs(transaction.amount),
            description=transaction.description,
            purchased_at=transaction.created_at,
        )


@dataclass(frozen=True)
class LedgerEntry:
    """A committed transaction together with the balance it produced."""

    transaction: Transaction
    new_balance: int


def validate_amount(amount: Any) -> int:
    """Return ``amount`` if it is a positive whole number of minor units."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError("Amount must be a whole number of minor units")
    if amount <= 0:
        raise InvalidAmountError("Amount must be greater than zero")
    return amount


def require_wallet(document: LedgerDocument, user_id: str) -> Wallet:
    wallet = document.find_wallet(user_id)
    if wallet is None:
        raise NotFoundError("Wallet", user_id)
    return wallet


def apply_open_wallet(document: LedgerDocument, user_id: str, currency: str) -> Wallet:
    """Create the zero-balance wallet for a new user."""
    if document.find_wallet(user_id) is not None:
        raise ConflictError(f"Wallet for user {user_id} already exists")
    wallet = Wallet(user_id=user_id, balance=0, currency=currency)
    document.wallets.append(wallet)
    return wallet


def apply_credit(
    document: LedgerDocument,
    user_id: str,
    amount: int,
    description: str,
    reference: Optional[str] = None,
) -> Transaction:
    """Increment the balance and append the matching topup entry."""
    validate_amount(amount)
    wallet = require_wallet(document, user_id)
    if reference is not None and document.has_reference(reference):
        raise DuplicateReferenceError(reference)

    now = utcnow()
    transaction = Transaction(
        user_id=user_id,
        type=TransactionType.TOPUP,
        amount=amount,
        description=description,
        reference=reference,
        created_at=now,
    )
    wallet.balance += amount
    wallet.updated_at = now
    document.transactions.append(transaction)
    return transaction


def check_funds(wallet: Wallet, required: int) -> None:
    if wallet.balance < required:
        raise InsufficientFundsError(wallet.user_id, required, wallet.balance)


def apply_debit(
    document: LedgerDocument,
    user_id: str,
    amount: int,
    description: str,
    plan_name: Optional[str] = None,
) -> Transaction:
    """Decrement the balance and append the matching purchase entry."""
    validate_amount(amount)
    wallet = require_wallet(document, user_id)
    check_funds(wallet, amount)

    now = utcnow()
    transaction = Transaction(
        user_id=user_id,
        type=TransactionType.PURCHASE,
        amount=-amount,
        description=description,
        plan_name=plan_name,
        created_at=now,
    )
    wallet.balance -= amount
    wallet.updated_at = now
    document.transactions.append(transaction)
    return transaction


class WalletService:
    """Service for wallet balance operations with ledger guarantees.

    ``credit`` and ``debit`` are serialized per user by the transactor;
    ``get_balance`` and ``list_transactions`` read a fresh snapshot.
    """

    def __init__(self, transactor: Transactor) -> None:
        self.transactor = transactor

    async def credit(
        self,
        user_id: str,
        amount: int,
        description: str = DEFAULT_TOPUP_DESCRIPTION,
        reference: Optional[str] = None,
    ) -> LedgerEntry:
        """Top up a wallet.

        Args:
            user_id: Owner of the wallet
            amount: Positive amount in minor units
            description: Summary stored on the transaction
            reference: External payment reference, credited at most once

        Returns:
            LedgerEntry: The topup transaction and the resulting balance

        Raises:
            InvalidAmountError: If amount is not a positive integer
            NotFoundError: If the user has no wallet
            DuplicateReferenceError: If the reference was already credited
        """
        validate_amount(amount)

        def mutation(document: LedgerDocument) -> LedgerEntry:
            transaction = apply_credit(document, user_id, amount, description, reference)
            return LedgerEntry(transaction, require_wallet(document, user_id).balance)

        entry = await self.transactor.run(user_id, mutation)
        logger.info(
            "Credited %s with %d (reference=%s), balance now %d",
            user_id,
            amount,
            reference,
            entry.new_balance,
        )
        return entry

    async def debit(
        self,
        user_id: str,
        amount: int,
        description: Optional[str] = None,
        plan_name: Optional[str] = None,
    ) -> LedgerEntry:
        """Pay from a wallet.

        Args:
            user_id: Owner of the wallet
            amount: Positive amount in minor units
            description: Summary stored on the transaction
            plan_name: Plan being paid for, if any

        Returns:
            LedgerEntry: The purchase transaction and the resulting balance

        Raises:
            InvalidAmountError: If amount is not a positive integer
            NotFoundError: If the user has no wallet
            InsufficientFundsError: If the balance is lower than amount
        """
        validate_amount(amount)
        if description is None:
            description = f"Purchase: {plan_name}" if plan_name else "Wallet payment"

        def mutation(document: LedgerDocument) -> LedgerEntry:
            transaction = apply_debit(document, user_id, amount, description, plan_name)
            return LedgerEntry(transaction, require_wallet(document, user_id).balance)

        try:
            entry = await self.transactor.run(user_id, mutation)
        except InsufficientFundsError as exc:
            logger.info(
                "Rejected debit of %d for %s: shortfall %d", amount, user_id, exc.shortfall
            )
            raise
        logger.info(
            "Debited %s by %d for %s, balance now %d",
            user_id,
            amount,
            plan_name,
            entry.new_balance,
        )
        return entry

    async def get_balance(self, user_id: str) -> WalletBalance:
        def query(document: LedgerDocument) -> WalletBalance:
            wallet = require_wallet(document, user_id)
            return WalletBalance(wallet.balance, wallet.currency, wallet.updated_at)

        return await self.transactor.read(query)

    async def list_transactions(self, user_id: str) -> list[Transaction]:
        """Return the user's transactions, newest first."""

        def query(document: LedgerDocument) -> list[Transaction]:
            require_wallet(document, user_id)
            history = document.transactions_for(user_id)
            # Reverse first so that equal timestamps keep newest-first order.
            return sorted(reversed(history), key=lambda t: t.created_at, reverse=True)

        return await self.transactor.read(query)

    async def list_purchases(self, user_id: str) -> list[Purchase]:
        """Return the user's completed purchases, newest first."""

        def query(document: LedgerDocument) -> list[Purchase]:
            require_wallet(document, user_id)
            history = [
                t
                for t in document.transactions_for(user_id)
                if t.type == TransactionType.PURCHASE
                and t.status == TransactionStatus.COMPLETED
            ]
            history = sorted(reversed(history), key=lambda t: t.created_at, reverse=True)
            return [Purchase.from_transaction(t) for t in history]

        return await self.transactor.read(query)

    async def get_purchase(self, user_id: str, transaction_id: str) -> Purchase:
        """Return one of the user's purchases.

        Raises:
            NotFoundError: If no purchase with that id belongs to the user
        """

        def query(document: LedgerDocument) -> Purchase:
            for transaction in document.transactions_for(user_id):
                if transaction.id == transaction_id and transaction.type == TransactionType.PURCHASE:
                    return Purchase.from_transaction(transaction)
            raise NotFoundError("Purchase", transaction_id)

        return await self.transactor.read(query)
