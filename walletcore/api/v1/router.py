"""API v1 router aggregation."""

from fastapi import APIRouter

from walletcore.api.v1 import auth, cart, wallet

api_router = APIRouter()

# Include all v1 routers
api_router.include_router(auth.router)
api_router.include_router(wallet.router)
api_router.include_router(cart.router)
