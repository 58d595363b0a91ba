"""
Commute Match Backend — Shared Response Schemas
================================================

What:  The `{success, result, message}` envelope every endpoint returns,
       plus the health-check payload.
Who:   Used by every route module and by the global exception handlers.

Envelope examples:
    201 {"success": true,  "result": {...journey...}, "message": "Journey created successfully"}
    404 {"success": false, "result": null,            "message": "Journey not found"}
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform response envelope for successes and failures."""

    success: bool = Field(description="True on 2xx responses")
    result: Optional[T] = Field(default=None, description="Payload, null on failure")
    message: str = Field(description="Human-readable outcome")


def ok(result: T, message: str) -> ApiResponse[T]:
    return ApiResponse(success=True, result=result, message=message)


def failure(message: str) -> dict:
    """Plain-dict error envelope for JSONResponse bodies."""
    return {"success": False, "result": None, "message": message}


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
