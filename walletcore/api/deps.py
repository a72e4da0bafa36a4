"""API dependency injection.

Provides FastAPI dependencies for the service container and for the
identity of the caller. Handlers only ever see the resolved user id;
they never re-derive it from the request.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from walletcore.core.exceptions import AuthenticationError
from walletcore.core.security import decode_access_token
from walletcore.services.container import Services

bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    """Dependency that provides the process-wide service container.

    Usage:
        @router.get("/balance")
        async def get_balance(services: ServicesDep):
            ...
    """
    return request.app.state.services


async def get_current_user_id(
    services: Services = Depends(get_services),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Resolve the bearer token to a user id, verified with the app's key."""
    if credentials is None:
        raise AuthenticationError("Access token required")
    return decode_access_token(credentials.credentials, settings=services.settings)


# Type aliases for cleaner dependency injection syntax
ServicesDep = Annotated[Services, Depends(get_services)]
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
