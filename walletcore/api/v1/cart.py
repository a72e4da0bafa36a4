"""Cart and checkout API endpoints."""

from fastapi import APIRouter

from walletcore.api.deps import CurrentUserId, ServicesDep
from walletcore.models.cart import Cart
from walletcore.schemas.cart import (
    AddItemRequest,
    AddItemResponse,
    CartItemRead,
    CartRead,
    CheckoutResponse,
    ClearCartResponse,
    RemoveItemResponse,
)
from walletcore.schemas.transaction import TransactionRead

router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_view(cart: Cart, currency: str) -> CartRead:
    return CartRead(
        items=[CartItemRead.model_validate(item) for item in cart.items],
        total=cart.total,
        currency=currency,
        item_count=len(cart.items),
    )


@router.get("", response_model=CartRead)
async def get_cart(user_id: CurrentUserId, services: ServicesDep):
    cart = await services.carts.get(user_id)
    return _cart_view(cart, services.currency)


@router.post("/items", response_model=AddItemResponse)
async def add_item(request: AddItemRequest, user_id: CurrentUserId, services: ServicesDep):
    """
    Add a plan to the cart.

    A plan can only be in the cart once; adding it again fails with
    Conflict and leaves the cart unchanged.
    """
    item = await services.carts.add_item(
        user_id,
        request.plan_name,
        request.price,
        alt_price=request.alt_price,
        description=request.description,
    )
    cart = await services.carts.get(user_id)
    return AddItemResponse(
        item=CartItemRead.model_validate(item),
        total=cart.total,
        item_count=len(cart.items),
    )


@router.delete("/items/{item_id}", response_model=RemoveItemResponse)
async def remove_item(item_id: str, user_id: CurrentUserId, services: ServicesDep):
    removed = await services.carts.remove_item(user_id, item_id)
    cart = await services.carts.get(user_id)
    return RemoveItemResponse(
        removed_item=CartItemRead.model_validate(removed),
        total=cart.total,
        item_count=len(cart.items),
    )


@router.delete("", response_model=ClearCartResponse)
async def clear_cart(user_id: CurrentUserId, services: ServicesDep):
    await services.carts.clear(user_id)
    return ClearCartResponse(total=0, item_count=0)


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(user_id: CurrentUserId, services: ServicesDep):
    """
    Buy everything in the cart with wallet funds.

    One purchase transaction is recorded per item and the cart is
    emptied in the same commit. On EmptyCart or InsufficientFunds
    neither the cart nor the wallet changes.
    """
    result = await services.checkout.checkout(user_id)

    # Committed at this point; notifications are queued out of band
    user = await services.accounts.get_user(user_id)
    services.notifier.purchase_completed(
        user,
        result.purchased_items,
        result.total_paid,
        result.new_balance,
        result.transactions,
    )

    return CheckoutResponse(
        purchased_items=[CartItemRead.model_validate(i) for i in result.purchased_items],
        total_paid=result.total_paid,
        new_balance=result.new_balance,
        transactions=[TransactionRead.model_validate(t) for t in result.transactions],
    )
