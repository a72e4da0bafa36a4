"""Cart service.

One open cart per user, holding plan line items. Commands (add, remove,
clear) go through the transactor under the user's key, the same as
wallet mutations, so a cart change can never interleave with a checkout
of the same cart. Queries (get, total) read a snapshot.
"""

import logging
from typing import Any, Optional

from walletcore.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from walletcore.models.base import utcnow
from walletcore.models.cart import Cart, CartItem
from walletcore.models.document import LedgerDocument
from walletcore.services.transactor import Transactor

logger = logging.getLogger(__name__)


def ensure_cart(document: LedgerDocument, user_id: str) -> Cart:
    cart = document.find_cart(user_id)
    if cart is None:
        cart = Cart(user_id=user_id)
        document.carts.append(cart)
    return cart


def apply_clear(document: LedgerDocument, user_id: str) -> Cart:
    cart = ensure_cart(document, user_id)
    cart.items = []
    cart.updated_at = utcnow()
    return cart


class CartService:
    """Use cases for the cart domain."""

    def __init__(self, transactor: Transactor) -> None:
        self.transactor = transactor

    async def get(self, user_id: str) -> Cart:
        """Return the user's cart, creating an empty one on first access."""
        cart = await self.transactor.read(lambda document: document.find_cart(user_id))
        if cart is not None:
            return cart
        cart = await self.transactor.run(user_id, lambda document: ensure_cart(document, user_id))
        logger.info("Created cart for %s", user_id)
        return cart

    async def add_item(
        self,
        user_id: str,
        plan_name: str,
        price: int,
        alt_price: Optional[int] = None,
        description: Optional[str] = None,
    ) -> CartItem:
        """Add a plan to the cart.

        Raises:
            InvalidInputError: If plan_name is blank or price is not a positive integer
            ConflictError: If the plan is already in the cart
        """
        plan_name = _validate_plan(plan_name)
        _validate_price(price, "price")
        if alt_price is not None:
            _validate_price(alt_price, "alt_price")

        def mutation(document: LedgerDocument) -> CartItem:
            cart = ensure_cart(document, user_id)
            if cart.find_plan(plan_name) is not None:
                raise ConflictError(f"{plan_name} is already in the cart")
            item = CartItem(
                plan_name=plan_name,
                price=price,
                alt_price=alt_price,
                description=description or f"{plan_name} API Plan",
            )
            cart.items.append(item)
            cart.updated_at = utcnow()
            return item

        item = await self.transactor.run(user_id, mutation)
        logger.info("Added %s (%d) to cart of %s", plan_name, price, user_id)
        return item

    async def remove_item(self, user_id: str, item_id: str) -> CartItem:
        """Remove one item by id and return it.

        Raises:
            NotFoundError: If the user has no cart or the item is not in it
        """

        def mutation(document: LedgerDocument) -> CartItem:
            cart = document.find_cart(user_id)
            if cart is None:
                raise NotFoundError("Cart", user_id)
            for index, item in enumerate(cart.items):
                if item.id == item_id:
                    break
            else:
                raise NotFoundError("Cart item", item_id)
            removed = cart.items.pop(index)
            cart.updated_at = utcnow()
            return removed

        removed = await self.transactor.run(user_id, mutation)
        logger.info("Removed %s from cart of %s", removed.plan_name, user_id)
        return removed

    async def clear(self, user_id: str) -> Cart:
        """Empty the cart. Clearing an empty or missing cart is not an error."""
        cart = await self.transactor.run(user_id, lambda document: apply_clear(document, user_id))
        logger.info("Cleared cart of %s", user_id)
        return cart

    async def total(self, user_id: str) -> int:
        def query(document: LedgerDocument) -> int:
            cart = document.find_cart(user_id)
            return cart.total if cart is not None else 0

        return await self.transactor.read(query)


def _validate_plan(plan_name: Any) -> str:
    if not isinstance(plan_name, str) or not plan_name.strip():
        raise InvalidInputError("Plan name is required")
    return plan_name.strip()


def _validate_price(price: Any, field: str) -> None:
    if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
        raise InvalidInputError(f"{field} must be a positive whole number of minor units")
