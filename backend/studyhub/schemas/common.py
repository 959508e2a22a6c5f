"""
StudyHub Backend - Shared Response Schemas
============================================

What:  The response envelope every endpoint returns, the error body the
       global handlers produce, and the health check payload.

Envelope:
    Success: {"success": true, "message": "...", "data": ...}
    Error:   {"success": false, "error": "not_found", "message": "...",
              "request_id": "a1b2c3d4"}

Field names on the wire are camelCase (the web client was written against
that shape); Python code uses snake_case and the alias generator bridges
the two.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON, built from ORM rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    success: bool = Field(default=True)
    message: Optional[str] = Field(default=None)
    data: Optional[T] = Field(default=None)


class ErrorResponse(BaseModel):
    success: bool = Field(default=False)
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Field-level context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    Health check response.

    database is probed with SELECT 1; the gateway and image host are only
    reported as configured/unconfigured (probing them would cost API quota).
    """

    status: str = Field(description="healthy, degraded or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    payment_gateway: str = Field(description="configured or unconfigured")
    image_host: str = Field(description="configured or unconfigured")
    uptime_seconds: float
