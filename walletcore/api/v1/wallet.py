"""Wallet API endpoints."""

from fastapi import APIRouter

from walletcore.api.deps import CurrentUserId, ServicesDep
from walletcore.schemas.transaction import TransactionList, TransactionRead
from walletcore.schemas.wallet import (
    BalanceRead,
    LedgerEntryResponse,
    PayRequest,
    PurchaseList,
    PurchaseRead,
    PurchaseResponse,
    TopupRequest,
)

router = APIRouter(prefix="/wallet", tags=["wallet"])


@router.get("/balance", response_model=BalanceRead)
async def get_balance(user_id: CurrentUserId, services: ServicesDep):
    balance = await services.wallets.get_balance(user_id)
    return BalanceRead.model_validate(balance)


@router.post("/topup", response_model=LedgerEntryResponse)
async def topup(request: TopupRequest, user_id: CurrentUserId, services: ServicesDep):
    """
    Credit the caller's wallet, typically after a payment provider success.

    - **amount**: positive amount in minor units
    - **reference**: payment reference; a reference is only ever credited once

    Returns the topup transaction and the new balance.
    """
    entry = await services.wallets.credit(user_id, request.amount, reference=request.reference)

    # Committed at this point; notifications are queued out of band
    user = await services.accounts.get_user(user_id)
    services.notifier.topup_completed(user, entry.transaction)

    return LedgerEntryResponse(
        new_balance=entry.new_balance,
        transaction=TransactionRead.model_validate(entry.transaction),
    )


@router.post("/pay", response_model=LedgerEntryResponse)
async def pay(request: PayRequest, user_id: CurrentUserId, services: ServicesDep):
    """
    Pay from the caller's wallet.

    Fails with InsufficientFunds, carrying required, available and
    shortfall, when the balance is too low. Nothing is debited then.
    """
    entry = await services.wallets.debit(
        user_id,
        request.amount,
        description=request.description,
        plan_name=request.plan_name,
    )
    services.notifier.audit(entry.transaction)
    return LedgerEntryResponse(
        new_balance=entry.new_balance,
        transaction=TransactionRead.model_validate(entry.transaction),
    )


@router.get("/transactions", response_model=TransactionList)
async def list_transactions(user_id: CurrentUserId, services: ServicesDep):
    transactions = await services.wallets.list_transactions(user_id)
    return TransactionList(
        transactions=[TransactionRead.model_validate(t) for t in transactions]
    )


@router.get("/purchases", response_model=PurchaseList)
async def list_purchases(user_id: CurrentUserId, services: ServicesDep):
    purchases = await services.wallets.list_purchases(user_id)
    return PurchaseList(purchases=[PurchaseRead.model_validate(p) for p in purchases])


@router.get("/purchases/{transaction_id}", response_model=PurchaseResponse)
async def get_purchase(transaction_id: str, user_id: CurrentUserId, services: ServicesDep):
    """
    Fetch one of the caller's purchases.

    Another user's transaction id is reported as NotFound, the same as an
    unknown id.
    """
    purchase = await services.wallets.get_purchase(user_id, transaction_id)
    return PurchaseResponse(purchase=PurchaseRead.model_validate(purchase))
