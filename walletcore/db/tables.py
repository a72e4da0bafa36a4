"""SQLAlchemy ORM table backing the SQL document store."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from walletcore.db.base import Base


class DocumentRow(Base):
    """One whole ledger document per row.

    Attributes:
        name: Document name (primary key), one per deployment by default
        revision: Optimistic locking revision, bumped on every commit
        body: JSON body holding users, wallets, transactions and carts
        updated_at: Last commit timestamp
    """

    __tablename__ = "ledger_documents"

    name: Mapped[str] = mapped_column(
        String(64),
        primary_key=True
    )
    revision: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0
    )
    body: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )
