"""Fire-and-forget notifications queued after a successful commit.

The ledger never waits on, retries, or fails because of a notification:
if the broker is unreachable the error is logged and the committed
operation still succeeds.
"""

import logging
from typing import Any

from walletcore.models.cart import CartItem
from walletcore.models.transaction import Transaction
from walletcore.models.user import User
from walletcore.worker import (
    audit_log_transaction,
    send_purchase_receipt,
    send_topup_receipt,
)

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def topup_completed(self, user: User, transaction: Transaction) -> None:
        self._queue(
            send_topup_receipt,
            email=user.email,
            name=user.name,
            amount=transaction.amount,
            reference=transaction.reference,
        )
        self.audit(transaction)

    def purchase_completed(
        self,
        user: User,
        items: list[CartItem],
        total: int,
        balance: int,
        transactions: list[Transaction],
    ) -> None:
        self._queue(
            send_purchase_receipt,
            email=user.email,
            name=user.name,
            items=[{"plan_name": i.plan_name, "price": i.price} for i in items],
            total=total,
            balance=balance,
        )
        for transaction in transactions:
            self.audit(transaction)

    def audit(self, transaction: Transaction) -> None:
        self._queue(
            audit_log_transaction,
            transaction_id=transaction.id,
            data=transaction.model_dump(mode="json"),
        )

    def _queue(self, task: Any, **kwargs: Any) -> None:
        if not self.enabled:
            return
        try:
            task.delay(**kwargs)
        except Exception:
            # Committed operations never fail on a notification.
            logger.exception("Failed to queue %s", task.name)
