"""Declarative base for SQLAlchemy ORM tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM tables."""
