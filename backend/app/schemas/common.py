"""
Car Store Backend — Response Envelope Schemas
===============================================

What:  The uniform wrapper every /api endpoint returns.
Why:   Clients parse one shape for success and failure alike.

Success:
    {"message": "Car created successfully", "success": true, "data": {...}}

Failure:
    {
        "message": "Validation failed",
        "success": false,
        "error": {
            "name": "ValidationError",
            "message": "Validation failed",
            "errors": {"price": {"message": "...", "ruleName": "greater_than_equal"}}
        }
    }
"""

from typing import Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base for API models: camelCase on the wire, snake_case in Python.

    populate_by_name lets clients send either spelling and lets
    from_attributes read ORM objects by attribute name.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""

    message: str = Field(description="Human-readable outcome")
    success: bool = Field(default=True)
    data: Optional[T] = Field(default=None, description="Endpoint payload")


class FieldError(CamelModel):
    message: str
    rule_name: str


class ErrorInfo(BaseModel):
    name: str = Field(description="Error class, e.g. ValidationError")
    message: str
    stack: Optional[str] = Field(default=None, description="Only present in debug mode")
    errors: Optional[Dict[str, FieldError]] = Field(
        default=None,
        description="Per-field details keyed by dotted field path",
    )


class ErrorResponse(BaseModel):
    """Failure envelope."""

    message: str
    success: bool = Field(default=False)
    error: ErrorInfo


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and store status.
    Who:   Returned by GET /health for monitoring and load balancer checks.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
