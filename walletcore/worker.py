"""Background task definitions for out-of-band notifications.

Tasks are queued only after the ledger has committed. Delivery is
logged here; wiring a real mail provider is outside the ledger core.
"""

import logging
from typing import Optional

from celery import Task
from walletcore.core.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="send_topup_receipt", bind=True)
def send_topup_receipt(
    self: Task,
    email: str,
    name: str,
    amount: int,
    reference: Optional[str] = None,
) -> dict:
    """
    Send a wallet top-up receipt.

    Args:
        email: Recipient email address
        name: Recipient display name
        amount: Credited amount in minor units
        reference: External payment reference, if any

    Returns:
        dict: Result with success status and message
    """
    message = (
        f"Sending top-up receipt to {email} ({name}): "
        f"+{amount} reference={reference or '-'}"
    )
    logger.info("[EMAIL TASK %s] %s", self.request.id, message)

    return {
        "success": True,
        "message": message,
        "task_id": self.request.id
    }


@celery_app.task(name="send_purchase_receipt", bind=True)
def send_purchase_receipt(
    self: Task,
    email: str,
    name: str,
    items: list[dict],
    total: int,
    balance: int,
) -> dict:
    """
    Send an order confirmation after checkout.

    Args:
        email: Recipient email address
        name: Recipient display name
        items: Purchased items, each with plan_name and price
        total: Total charged in minor units
        balance: Wallet balance after the purchase

    Returns:
        dict: Result with success status and message
    """
    plans = ", ".join(f"{item['plan_name']} ({item['price']})" for item in items)
    message = (
        f"Sending purchase receipt to {email} ({name}): "
        f"{plans}; total {total}, balance {balance}"
    )
    logger.info("[EMAIL TASK %s] %s", self.request.id, message)

    return {
        "success": True,
        "message": message,
        "task_id": self.request.id
    }


@celery_app.task(name="audit_log_transaction", bind=True)
def audit_log_transaction(
    self: Task,
    transaction_id: str,
    data: dict
) -> dict:
    """
    Write a committed ledger transaction to the audit log.

    Args:
        transaction_id: Id of the transaction
        data: Transaction record as JSON-compatible dict with keys
            user_id, type, amount, description, plan_name,
            reference, status and created_at

    Returns:
        dict: Result with success status and message
    """
    message = f"Audit log for transaction {transaction_id}: {data}"
    logger.info("[AUDIT TASK %s] %s", self.request.id, message)

    return {
        "success": True,
        "message": message,
        "task_id": self.request.id,
        "transaction_id": transaction_id
    }
