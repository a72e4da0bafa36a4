"""Checkout: settle a cart against the wallet in one atomic step.

Checkout is the only operation that mutates both the cart and the
wallet. It runs as a single transactor mutation under the user's key, so
the balance check, the debit, the per-item transactions and the cart
clear are committed together or not at all.
"""

import logging
from dataclasses import dataclass

from walletcore.core.exceptions import EmptyCartError, InsufficientFundsError
from walletcore.models.base import utcnow
from walletcore.models.cart import CartItem
from walletcore.models.document import LedgerDocument
from walletcore.models.transaction import Transaction, TransactionType
from walletcore.services.cart_service import apply_clear
from walletcore.services.transactor import Transactor
from walletcore.services.wallet_service import check_funds, require_wallet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    purchased_items: list[CartItem]
    total_paid: int
    new_balance: int
    transactions: list[Transaction]


def apply_checkout(document: LedgerDocument, user_id: str) -> CheckoutResult:
    """Convert the user's cart into purchase transactions.

    The process follows these steps:
    1. Load the cart, rejecting a missing or empty one
    2. Total the item prices
    3. Load the wallet and check the balance covers the total
    4. Debit the total, recording one purchase transaction per item
    5. Clear the cart

    Steps 1-3 only read, so a rejection leaves the document untouched.
    """
    cart = document.find_cart(user_id)
    if cart is None or not cart.items:
        raise EmptyCartError(user_id)

    total = cart.total
    wallet = require_wallet(document, user_id)
    check_funds(wallet, total)

    now = utcnow()
    purchased_items = list(cart.items)
    transactions = [
        Transaction(
            user_id=user_id,
            type=TransactionType.PURCHASE,
            amount=-item.price,
            description=f"Purchased: {item.plan_name}",
            plan_name=item.plan_name,
            created_at=now,
        )
        for item in purchased_items
    ]
    wallet.balance -= total
    wallet.updated_at = now
    document.transactions.extend(transactions)
    apply_clear(document, user_id)

    return CheckoutResult(
        purchased_items=purchased_items,
        total_paid=total,
        new_balance=wallet.balance,
        transactions=transactions,
    )


class CheckoutService:
    """Settles carts against wallet balances."""

    def __init__(self, transactor: Transactor) -> None:
        self.transactor = transactor

    async def checkout(self, user_id: str) -> CheckoutResult:
        """Buy everything in the user's cart with wallet funds.

        Raises:
            EmptyCartError: If the cart is missing or has no items
            NotFoundError: If the user has no wallet
            InsufficientFundsError: If the balance is lower than the cart total
        """
        try:
            result = await self.transactor.run(
                user_id, lambda document: apply_checkout(document, user_id)
            )
        except InsufficientFundsError as exc:
            logger.info(
                "Rejected checkout for %s: total %d, shortfall %d",
                user_id,
                exc.required,
                exc.shortfall,
            )
            raise
        logger.info(
            "Checkout for %s: %d item(s), paid %d, balance now %d",
            user_id,
            len(result.purchased_items),
            result.total_paid,
            result.new_balance,
        )
        return result
