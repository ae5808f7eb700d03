"""
User Service - Pydantic Request/Response Schemas
================================================

What:  The API contract for the /api/users and /health endpoints.
How:   FastAPI serializes responses through these models and publishes them in
       the OpenAPI document.

`UserCreate` only describes the SHAPE of a create request. Field rules
(non-empty, maximum lengths) are checked separately by
`user_api.services.validation` so that a malformed body and a rule violation
produce different errors.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(BaseModel):
    """
    Body of POST /api/users.

    Absent fields default to "" and are then rejected by the validator as
    missing. A non-string value (number, null, object) is a shape error.
    """
    id: str = Field(default="", description="Client-chosen unique identifier (1-50 chars)")
    name: str = Field(default="", description="Display name (1-100 chars)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """A stored user as returned by the API."""
    id: str = Field(description="Unique user identifier")
    name: str = Field(description="Display name")

    model_config = {"from_attributes": True}


class UserCreatedResponse(BaseModel):
    """Returned by POST /api/users with HTTP 201."""
    user: UserResponse


class UserListResponse(BaseModel):
    """
    Returned by GET /api/users.

    `users` is always present; an empty table serializes as [] (never null).
    """
    users: List[UserResponse] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error body shared by every endpoint."""
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """
    Returned by GET /health.

    healthy   -> HTTP 200, `error` omitted
    unhealthy -> HTTP 503, `error` explains which dependency failed
    """
    status: str = Field(description="healthy or unhealthy")
    error: Optional[str] = Field(default=None, description="Why the service is unhealthy")
