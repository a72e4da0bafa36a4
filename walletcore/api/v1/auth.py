"""Registration and login endpoints."""

from fastapi import APIRouter

from walletcore.api.deps import CurrentUserId, ServicesDep
from walletcore.core.exceptions import AuthenticationError
from walletcore.core.security import create_access_token
from walletcore.schemas.user import (
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    UserRead,
)
from walletcore.schemas.wallet import BalanceRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(request: RegisterRequest, services: ServicesDep):
    """
    Register a new user and open their wallet with a zero balance.

    - **email**: unique, compared case-insensitively
    - **password**: at least 6 characters
    - **name**: display name
    """
    user, _ = await services.accounts.register(request.email, request.password, request.name)
    token = create_access_token(user.id, user.email, user.name, settings=services.settings)
    return RegisterResponse(user=UserRead.model_validate(user), token=token)


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, services: ServicesDep):
    user = await services.accounts.authenticate(request.email, request.password)
    if user is None:
        raise AuthenticationError("Invalid credentials")
    _, balance = await services.accounts.get_profile(user.id)
    return LoginResponse(
        user=UserRead.model_validate(user),
        wallet=BalanceRead.model_validate(balance),
        token=create_access_token(user.id, user.email, user.name, settings=services.settings),
    )


@router.get("/me", response_model=ProfileResponse)
async def me(user_id: CurrentUserId, services: ServicesDep):
    user, balance = await services.accounts.get_profile(user_id)
    return ProfileResponse(
        user=UserRead.model_validate(user),
        wallet=BalanceRead.model_validate(balance),
    )
