"""User record stored in the ledger document."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from walletcore.models.base import utcnow


class User(BaseModel):
    """Registered account.

    Attributes:
        id: Unique identifier (uuid4 string), never changes
        email: Lower-cased email address, unique across users
        name: Display name
        password_hash: Bcrypt hash, opaque to the ledger
        verified: Whether the email address has been confirmed
        created_at: Registration timestamp
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    email: str
    name: str
    password_hash: str
    verified: bool = False
    created_at: datetime = Field(default_factory=utcnow)
