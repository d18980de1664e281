"""
Car Store Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and a uniform response envelope.
How:   Each exception class carries a message and optional context dict.
       Exception handlers (registered in main.py) catch these and render
       the `{message, success, error}` envelope with the right status code.
Who:   Raised by validators and services; caught by the registered handlers.

Exception Hierarchy:
    CarStoreError (base)
    ├── ValidationError              → 400 Bad Request (per-field details)
    │   └── InsufficientStockError   → 400 Bad Request
    ├── NotFoundError                → 404 Not Found
    └── DatabaseError                → 500 Internal Server Error

    Anything outside this hierarchy is rendered as a 500 by the catch-all
    handler.
"""

from typing import Any, Dict, Optional


class CarStoreError(Exception):
    """
    Base exception for all Car Store application errors.

    Attributes:
        message:  User-facing error description (returned in the envelope)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def name(self) -> str:
        return type(self).__name__


class ValidationError(CarStoreError):
    """
    Raised when client input fails validation.

    What:    The client sent data that can be corrected.
    HTTP:    400 Bad Request

    `errors` maps each offending field path to its detail:
        {
            "brand": {"message": "String should have at least 1 character",
                      "ruleName": "string_too_short"},
            "price": {"message": "Input should be greater than or equal to 0",
                      "ruleName": "greater_than_equal"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = errors or {}


class InsufficientStockError(ValidationError):
    """
    Raised when an order asks for more cars than are in stock.

    HTTP:    400 Bad Request
    """

    def __init__(self, car_id: str, requested: int):
        message = "Insufficient stock for the requested quantity"
        super().__init__(
            message=message,
            errors={
                "quantity": {"message": message, "ruleName": "insufficient_stock"},
            },
            context={"car_id": car_id, "requested": requested},
        )


class NotFoundError(CarStoreError):
    """
    Raised when a requested resource does not exist.

    What:    The client asked for something that isn't in the store.
    When:    Unknown id, an id that cannot be parsed, or an empty search.
    HTTP:    404 Not Found

    The services translate SQLAlchemy's `None` into this exception so the
    handlers never have to guess whether a failure meant "absent".
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource.capitalize()} not found"
            if resource_id:
                message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(CarStoreError):
    """
    Raised when database operations fail unexpectedly.

    What:    A query, insert, update or delete failed inside the store.
    HTTP:    500 Internal Server Error

    The message is operation-specific ("Car could not be created!"); the
    driver error is kept in `context` and chained as `__cause__` for the
    server-side log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
