"""Custom exception classes for the application.

Provides a hierarchy of exceptions for consistent error handling
across the application with appropriate HTTP status codes. Every
exception carries a stable machine-readable ``kind`` that clients can
switch on, plus a human-readable message.
"""

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    """

    kind: str = "Internal"

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    def details(self) -> dict[str, Any]:
        """Extra machine-readable fields rendered next to the message."""
        return {}


class NotFoundError(AppException):
    """Resource not found exception.

    Raised when a referenced user, wallet, cart or cart item does not exist.
    """

    kind = "NotFound"

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(
            message=f"{resource} with id {identifier} not found",
            status_code=404,
        )
        self.resource = resource
        self.identifier = identifier


class ConflictError(AppException):
    """Resource conflict exception.

    Raised when there's a conflict such as a duplicate plan in a cart
    or an email address that is already registered.
    """

    kind = "Conflict"

    def __init__(self, message: str) -> None:
        super().__init__(message=message, status_code=409)


class DuplicateReferenceError(ConflictError):
    """A top-up reference has already been credited."""

    kind = "DuplicateReference"

    def __init__(self, reference: str) -> None:
        super().__init__(f"Reference {reference} has already been credited")
        self.reference = reference


class ValidationError(AppException):
    """Input validation failed exception.

    Raised when input data fails validation rules.
    """

    kind = "InvalidInput"

    def __init__(self, message: str) -> None:
        super().__init__(message=message, status_code=422)


class InvalidInputError(ValidationError):
    """Request fields are missing or malformed."""


class InvalidAmountError(ValidationError):
    """Amount is not a positive whole number of minor units."""

    kind = "InvalidAmount"


class EmptyCartError(AppException):
    """Checkout was attempted on a cart with no items."""

    kind = "EmptyCart"

    def __init__(self, user_id: str) -> None:
        super().__init__(message="Cart is empty", status_code=400)
        self.user_id = user_id


class InsufficientFundsError(AppException):
    """Insufficient wallet balance exception.

    Raised when a debit or checkout cannot be completed because the
    wallet balance is lower than the amount required. The shortfall is
    exposed so that a client can prompt the user to top up.
    """

    kind = "InsufficientFunds"

    def __init__(
        self,
        user_id: str,
        required: int,
        available: int,
    ) -> None:
        super().__init__(
            message=(
                f"Insufficient wallet balance: "
                f"required {required}, available {available}"
            ),
            status_code=400,
        )
        self.user_id = user_id
        self.required = required
        self.available = available

    @property
    def shortfall(self) -> int:
        return self.required - self.available

    def details(self) -> dict[str, Any]:
        return {
            "required": self.required,
            "available": self.available,
            "shortfall": self.shortfall,
        }


class ConcurrencyError(AppException):
    """Concurrent modification detected exception.

    Raised when the document store detects that the document was
    committed by another writer between our read and our write.
    The transactor retries on this error before surfacing it.
    """

    kind = "Concurrency"

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(
            message=(
                f"{resource} {identifier} was modified by another transaction. "
                "Please retry."
            ),
            status_code=409,
        )
        self.resource = resource
        self.identifier = identifier


class StoreError(AppException):
    """The document store could not be read or written.

    The operation that hit this error did not complete and left no
    visible change behind.
    """

    kind = "StoreUnavailable"

    def __init__(self, message: str = "Storage is unavailable") -> None:
        super().__init__(
            message=f"{message}; the operation did not complete",
            status_code=503,
        )


class AuthenticationError(AppException):
    """Missing, invalid or expired identity token."""

    kind = "Unauthorized"

    def __init__(self, message: str = "Could not validate credentials") -> None:
        super().__init__(message=message, status_code=401)
