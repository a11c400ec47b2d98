"""
API Request and Response Models

Pydantic models for API input/output validation.
"""

from datetime import datetime, timezone
from typing import Annotated, List, Optional

from pydantic import BeforeValidator, Field, field_validator

from .common import CamelModel, NonEmptyStr
from .evidence import EvidenceType
from .incident import Incident, IncidentStatus


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


# Empty or whitespace-only text is stored as null
BlankAsNone = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


class LoginRequest(CamelModel):
    """Credentials exchanged for a bearer token"""

    badge_id: NonEmptyStr
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    token: str


class SessionResponse(CamelModel):
    """Identity claims of the verified bearer token"""

    user_id: str
    badge_id: str
    is_admin: bool


class UserCreateRequest(CamelModel):
    """Signup payload"""

    badge_id: NonEmptyStr
    name: NonEmptyStr
    password: str = Field(..., min_length=6, description="Plaintext, hashed before storage")


class IncidentCreateRequest(CamelModel):
    """New incident. The owner defaults to the authenticated user."""

    occurred_at: datetime = Field(..., description="When the incident happened (ISO 8601)")
    location: NonEmptyStr
    crime_type: NonEmptyStr
    description: NonEmptyStr
    status: IncidentStatus = Field(default=IncidentStatus.OPEN)
    closing_reason: BlankAsNone = None
    reported_by_id: Optional[str] = Field(
        None, description="Owning user; only admins may report on behalf of someone else"
    )


class IncidentUpdateRequest(CamelModel):
    """Partial incident update. Only fields present in the body are applied."""

    occurred_at: Optional[datetime] = None
    location: Optional[NonEmptyStr] = None
    crime_type: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    status: Optional[IncidentStatus] = None
    closing_reason: BlankAsNone = None

    @field_validator("occurred_at", "location", "crime_type", "description", "status", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class PaginationInfo(CamelModel):
    current_page: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)
    total_count: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)


class IncidentListResponse(CamelModel):
    """One page of incidents"""

    incidents: List[Incident] = Field(default_factory=list)
    pagination: PaginationInfo


class EvidenceCreateRequest(CamelModel):
    """Evidence reference to attach to an incident"""

    description: NonEmptyStr
    type: EvidenceType
    storage_reference: NonEmptyStr


class HealthResponse(CamelModel):
    """Health check response"""

    status: str = Field(default="healthy")
    service: str = Field(default="crime-records-service")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    database_available: bool = Field(default=True)
    signing_configured: bool = Field(default=True)


__all__ = [
    "LoginRequest",
    "LoginResponse",
    "SessionResponse",
    "UserCreateRequest",
    "IncidentCreateRequest",
    "IncidentUpdateRequest",
    "PaginationInfo",
    "IncidentListResponse",
    "EvidenceCreateRequest",
    "HealthResponse",
]
