"""
Car Store Backend — Payload Validation
========================================

What:  Turns untyped request bodies into typed schema instances.
How:   Runs the declarative pydantic rules in app.schemas and converts every
       failure into app.exceptions.ValidationError, whose `errors` map is
       keyed by the dotted field path.
Who:   Called by the route handlers before any store access.

These functions are pure: no I/O, no store access. Any JSON value is
accepted as input; shapes that are not objects simply fail validation.
"""

from typing import Any, Dict, Iterable, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError
from app.schemas.car import CarCreate, CarUpdate
from app.schemas.order import OrderCreate

ModelT = TypeVar("ModelT", bound=BaseModel)

# Fields every update must carry, even when the rest is partial
UPDATE_REQUIRED_FIELDS = ("price", "quantity")


def field_errors(errors: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, str]]:
    """
    Collapse pydantic error dicts into {path: {message, ruleName}}.

    The first error reported for a path wins. Errors with an empty location
    (the body itself had the wrong shape) are keyed as "body".
    """
    details: Dict[str, Dict[str, str]] = {}
    for error in errors:
        path = ".".join(str(part) for part in error.get("loc", ())) or "body"
        details.setdefault(path, {"message": error["msg"], "ruleName": error["type"]})
    return details


def validate_payload(schema: Type[ModelT], payload: Any) -> ModelT:
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(errors=field_errors(exc.errors())) from exc


def validate_car(payload: Any) -> CarCreate:
    """Validate a Car creation payload."""
    return validate_payload(CarCreate, payload)


def validate_car_update(payload: Any) -> CarUpdate:
    """
    Validate a Car update payload.

    Raises:
        ValidationError: empty payload; price or quantity absent or null;
                         or any per-field rule violation
    """
    if not isinstance(payload, dict):
        return validate_payload(CarUpdate, payload)

    if not payload:
        raise ValidationError(message="At least one field must be provided for update")

    missing = [name for name in UPDATE_REQUIRED_FIELDS if payload.get(name) is None]
    if missing:
        raise ValidationError(
            message="Price and quantity must be provided",
            errors={
                name: {"message": f"{name.capitalize()} is required", "ruleName": "missing"}
                for name in missing
            },
        )

    return validate_payload(CarUpdate, payload)


def validate_order(payload: Any) -> OrderCreate:
    """Validate an Order creation payload."""
    return validate_payload(OrderCreate, payload)
