"""Data models for the Crime Records Service"""

from .evidence import Evidence, EvidenceType
from .incident import Incident, IncidentListQuery, IncidentStatus, SortOrder
from .user import User, UserSummary
from .requests import (
    LoginRequest,
    LoginResponse,
    SessionResponse,
    UserCreateRequest,
    IncidentCreateRequest,
    IncidentUpdateRequest,
    IncidentListResponse,
    PaginationInfo,
    EvidenceCreateRequest,
    HealthResponse,
)

__all__ = [
    "Evidence",
    "EvidenceType",
    "Incident",
    "IncidentListQuery",
    "IncidentStatus",
    "SortOrder",
    "User",
    "UserSummary",
    "LoginRequest",
    "LoginResponse",
    "SessionResponse",
    "UserCreateRequest",
    "IncidentCreateRequest",
    "IncidentUpdateRequest",
    "IncidentListResponse",
    "PaginationInfo",
    "EvidenceCreateRequest",
    "HealthResponse",
]
