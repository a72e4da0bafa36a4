"""Account registration and lookup.

Registration creates the User and its zero-balance Wallet in the same
commit, so there is never a user without a wallet.
"""

import logging
from typing import Optional

from walletcore.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from walletcore.core.security import hash_password, verify_password
from walletcore.models.document import LedgerDocument
from walletcore.models.user import User
from walletcore.models.wallet import Wallet
from walletcore.services.transactor import Transactor
from walletcore.services.wallet_service import WalletBalance, apply_open_wallet

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AccountService:
    def __init__(self, transactor: Transactor, default_currency: str = "NGN") -> None:
        self.transactor = transactor
        self.default_currency = default_currency

    async def register(self, email: str, password: str, name: str) -> tuple[User, Wallet]:
        """Create a user and their wallet.

        Raises:
            InvalidInputError: If a field is blank or the password is too short
            ConflictError: If the email is already registered (case-insensitive)
        """
        email = (email or "").strip().lower()
        name = (name or "").strip()
        if not email or not password or not name:
            raise InvalidInputError("Email, password and name are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidInputError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        password_hash = hash_password(password)

        def mutation(document: LedgerDocument) -> tuple[User, Wallet]:
            if document.find_user_by_email(email) is not None:
                raise ConflictError("Email already registered")
            user = User(email=email, name=name, password_hash=password_hash)
            document.users.append(user)
            wallet = apply_open_wallet(document, user.id, self.default_currency)
            return user, wallet

        user, wallet = await self.transactor.run(f"email:{email}", mutation)
        logger.info("Registered user %s (%s)", user.id, email)
        return user, wallet

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        user = await self.transactor.read(
            lambda document: document.find_user_by_email(email or "")
        )
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", email)
            return None
        return user

    async def get_user(self, user_id: str) -> User:
        user = await self.transactor.read(lambda document: document.find_user(user_id))
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def get_profile(self, user_id: str) -> tuple[User, WalletBalance]:
        def query(document: LedgerDocument) -> tuple[User, WalletBalance]:
            user = document.find_user(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            wallet = document.find_wallet(user_id)
            if wallet is None:
                raise NotFoundError("Wallet", user_id)
            return user, WalletBalance(wallet.balance, wallet.currency, wallet.updated_at)

        return await self.transactor.read(query)
