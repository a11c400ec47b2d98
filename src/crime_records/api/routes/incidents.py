"""
Incident API Routes

RESTful endpoints for incident records.
"""

import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from crime_records.api.context import RequestContext, get_request_context
from crime_records.config.settings import settings
from crime_records.core.incident_manager import IncidentManager, get_incident_manager
from crime_records.infrastructure.database.client import get_db
from crime_records.models import (
    Incident,
    IncidentCreateRequest,
    IncidentListQuery,
    IncidentListResponse,
    IncidentUpdateRequest,
    PaginationInfo,
)

router = APIRouter(prefix="/api/incidents", tags=["incidents"])


@router.get(
    "",
    response_model=IncidentListResponse,
    summary="List Incidents",
    description="""
Retrieve a paginated, filtered and sorted list of incidents.

**Query Parameters**:
- page: Page number, 1-indexed (default: 1; smaller values are raised to 1)
- limit: Items per page, clamped to 1..50 (default: 10)
- status: Open, Under Investigation or Closed (other values are ignored)
- searchQuery: Case-insensitive substring matched against caseNumber, crimeType, location and description
- sortBy: reportedAt, occurredAt, status, crimeType, location or caseNumber
- sortOrder: asc or desc

An unrecognised sortBy or sortOrder falls back to reportedAt descending.

**Response Structure**:
- incidents: Array of incidents with reportedBy summary
- pagination: currentPage, totalPages, totalCount, limit

**Consistency**: The page and totalCount are read from the same snapshot.

**Authorization**: Requires a valid bearer token
    """,
    responses={
        200: {"description": "Incident page returned"},
        401: {"description": "Missing or invalid bearer token"}
    }
)
async def list_incidents(
    page: Optional[str] = Query(None, description="Page number (1-indexed)"),
    limit: Optional[str] = Query(None, description="Items per page (max 50)"),
    status: Optional[str] = Query(None, description="Filter by status"),
    search_query: Optional[str] = Query(None, alias="searchQuery", description="Free-text search"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="Sort field"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    identity: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    manager: IncidentManager = Depends(get_incident_manager),
) -> IncidentListResponse:
    """List incidents with pagination, filtering and sorting"""
    query = IncidentListQuery.from_params(
        page=page,
        limit=limit,
        status=status,
        search_query=search_query,
        sort_by=sort_by,
        sort_order=sort_order,
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )

    incidents, total_count = await manager.list_incidents(db, query)

    return IncidentListResponse(
        incidents=incidents,
        pagination=PaginationInfo(
            current_page=query.page,
            total_pages=math.ceil(total_count / query.limit),
            total_count=total_count,
            limit=query.limit,
        ),
    )


@router.post(
    "",
    response_model=Incident,
    status_code=201,
    summary="Report Incident",
    description="""
Create a new incident owned by the authenticated user.

**Workflow**:
1. Validates occurredAt (ISO 8601 datetime) and that location, crimeType and description are non-empty
2. Resolves the owner: the caller, or reportedById when an administrator reports for someone else
3. Generates a unique case number (CR-YYYYMMDD-XXXXXXXX), distinct from the incident id
4. Stores the incident with status Open unless another status is given
5. Returns the incident with the reportedBy summary

**Request Example**:
```json
{
  "occurredAt": "2025-04-19T21:30:00Z",
  "location": "RTC Bus Stand Complex, Guntur",
  "crimeType": "Pickpocketing",
  "description": "Wallet taken from passenger boarding the 9:40 bus"
}
```

**closingReason**: Only kept when status is Closed.

**Authorization**: Requires a valid bearer token
    """,
    responses={
        201: {"description": "Incident created"},
        400: {"description": "Validation failed or reporting user unknown"},
        401: {"description": "Missing or invalid bearer token"},
        403: {"description": "Non-admin reporting for another user"},
        409: {"description": "Case number collision"}
    }
)
async def create_incident(
    request: IncidentCreateRequest,
    identity: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    manager: IncidentManager = Depends(get_incident_manager),
) -> Incident:
    """Create an incident"""
    return await manager.create_incident(db, request, identity)


@router.get(
    "/{incident_id}",
    response_model=Incident,
    summary="Get Incident",
    description="Retrieve one incident with its reportedBy summary.",
    responses={
        200: {"description": "Incident returned"},
        401: {"description": "Missing or invalid bearer token"},
        404: {"description": "Incident not found"}
    }
)
async def get_incident(
    incident_id: str,
    identity: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    manager: IncidentManager = Depends(get_incident_manager),
) -> Incident:
    incident = await manager.get_incident(db, incident_id)

    if not incident:
        raise HTTPException(status_code=404, detail=f"Incident with ID {incident_id} not found.")

    return incident


@router.patch(
    "/{incident_id}",
    response_model=Incident,
    summary="Update Incident",
    description="""
Partially update an incident. Any subset of occurredAt, location, crimeType,
description, status and closingReason may be sent.

**Behavior**:
- Only fields present in the body are changed
- An empty closingReason is stored as null
- If the resulting status is not Closed, closingReason is cleared regardless of the body
- Status may move between any two values
- A body with no updatable fields is rejected

**Authorization**: Requires a valid bearer token; caller must be the reporting officer or an administrator
    """,
    responses={
        200: {"description": "Incident updated"},
        400: {"description": "Validation failed or no fields to update"},
        401: {"description": "Missing or invalid bearer token"},
        403: {"description": "Caller is neither owner nor admin"},
        404: {"description": "Incident not found"}
    }
)
async def update_incident(
    incident_id: str,
    request: IncidentUpdateRequest,
    identity: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    manager: IncidentManager = Depends(get_incident_manager),
) -> Incident:
    """Update an incident"""
    return await manager.update_incident(db, incident_id, request, identity)


@router.delete(
    "/{incident_id}",
    status_code=204,
    summary="Delete Incident",
    description="""
Permanently delete an incident together with all of its evidence records.

**Destructive Operation**: This cannot be undone. Deleting an already deleted
incident returns 404.

**Authorization**: Requires a valid bearer token; caller must be the reporting officer or an administrator
    """,
    responses={
        204: {"description": "Incident and its evidence deleted"},
        401: {"description": "Missing or invalid bearer token"},
        403: {"description": "Caller is neither owner nor admin"},
        404: {"description": "Incident not found"}
    }
)
async def delete_incident(
    incident_id: str,
    identity: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    manager: IncidentManager = Depends(get_incident_manager),
):
    """Delete incident"""
    await manager.delete_incident(db, incident_id, identity)
    return Response(status_code=204)
