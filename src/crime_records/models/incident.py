"""
Incident Data Models

Core domain models for incident records and incident list queries.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import Field

from .common import CamelModel, UtcDateTime
from .user import UserSummary


class IncidentStatus(str, Enum):
    """Incident lifecycle status. Any status may move to any other."""
    OPEN = "Open"
    UNDER_INVESTIGATION = "Under Investigation"
    CLOSED = "Closed"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Public sort key -> IncidentDB column attribute
SORTABLE_FIELDS = {
    "reportedAt": "reported_at",
    "occurredAt": "occurred_at",
    "status": "status",
    "crimeType": "crime_type",
    "location": "location",
    "caseNumber": "case_number",
}

DEFAULT_SORT_FIELD = "reportedAt"


class Incident(CamelModel):
    """Incident record with its owner summary"""

    id: str = Field(..., description="Internal incident identifier")
    case_number: str = Field(..., description="System-generated public case number")
    reported_at: UtcDateTime
    occurred_at: UtcDateTime
    location: str
    crime_type: str
    description: str
    status: IncidentStatus = Field(default=IncidentStatus.OPEN)
    closing_reason: Optional[str] = Field(None, description="Only set while status is Closed")
    reported_by_id: str
    reported_by: UserSummary
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_db(cls, incident_db) -> "Incident":
        """Create API model from an IncidentDB row loaded with its owner"""
        return cls(
            id=incident_db.id,
            case_number=incident_db.case_number,
            reported_at=incident_db.reported_at,
            occurred_at=incident_db.occurred_at,
            location=incident_db.location,
            crime_type=incident_db.crime_type,
            description=incident_db.description,
            status=IncidentStatus(incident_db.status),
            closing_reason=incident_db.closing_reason,
            reported_by_id=incident_db.reported_by_id,
            reported_by=UserSummary.from_db(incident_db.reported_by),
            created_at=incident_db.created_at,
            updated_at=incident_db.updated_at,
        )


def _parse_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class IncidentListQuery:
    """Normalised incident list parameters.

    Built from raw query-string values: out-of-range paging is clamped and
    unknown status, sort field or sort order values are ignored rather than
    rejected.
    """

    page: int = 1
    limit: int = 10
    status: Optional[IncidentStatus] = None
    search_query: Optional[str] = None
    sort_by: str = DEFAULT_SORT_FIELD
    sort_order: SortOrder = SortOrder.DESC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(
        cls,
        page: Optional[str] = None,
        limit: Optional[str] = None,
        status: Optional[str] = None,
        search_query: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        default_limit: int = 10,
        max_limit: int = 50,
    ) -> "IncidentListQuery":
        page_number = max(1, _parse_int(page, 1))
        page_size = max(1, min(max_limit, _parse_int(limit, default_limit)))

        valid_statuses = {s.value for s in IncidentStatus}
        status_filter = IncidentStatus(status) if status in valid_statuses else None

        search = search_query.strip() if search_query else None

        # Field and order are only honoured as a pair
        valid_orders = {o.value for o in SortOrder}
        field = sort_by or DEFAULT_SORT_FIELD
        order = sort_order or SortOrder.DESC.value
        if field not in SORTABLE_FIELDS or order not in valid_orders:
            field, order = DEFAULT_SORT_FIELD, SortOrder.DESC.value

        return cls(
            page=page_number,
            limit=page_size,
            status=status_filter,
            search_query=search or None,
            sort_by=field,
            sort_order=SortOrder(order),
        )
