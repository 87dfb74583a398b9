"""
Competence Gateway - Response Schemas
=====================================

What:  Pydantic models for the responses the gateway itself produces.
       Resource bodies are passed through from the downstream API unchanged
       and are not modelled here.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """
    Confirmation returned by update and delete endpoints.

    count is set only by bulk deletes (connectors removed by foreign key).
    """
    message: str = Field(description="Human-readable outcome")
    count: Optional[int] = Field(default=None, description="Number of items affected")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "The JSON object in the request was omitted or is invalid.",
            "details": {"field": "name", "resource": "customer"},
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class CircuitStatus(BaseModel):
    """Circuit breaker state guarding the competence API."""
    state: str = Field(description="closed, open, half_open")
    failure_count: int = Field(description="Consecutive transport failures")
    failure_threshold: int = Field(description="Failures that open the circuit")
    retry_in_seconds: float = Field(description="Seconds until calls are let through again")
    times_opened: int = Field(description="Times the circuit opened since startup")


class HealthResponse(BaseModel):
    """Health check response showing gateway and downstream status."""
    status: str = Field(description="Overall status: healthy, degraded")
    version: str = Field(description="Application version")
    downstream: str = Field(description="Competence API: reachable, unreachable, circuit_open")
    uptime_seconds: float = Field(description="Seconds since service started")
    circuit: CircuitStatus = Field(description="Downstream circuit breaker state")
