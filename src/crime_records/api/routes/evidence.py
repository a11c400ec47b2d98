"""
Evidence API Routes

RESTful endpoints for evidence records nested under an incident.
"""

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from crime_records.api.context import RequestContext, get_request_context
from crime_records.core.evidence_manager import EvidenceManager, get_evidence_manager
from crime_records.infrastructure.database.client import get_db
from crime_records.models import Evidence, EvidenceCreateRequest

router = APIRouter(prefix="/api/incidents/{incident_id}/evidence", tags=["evidence"])


@router.get(
    "",
    response_model=List[Evidence],
    summary="List Incident Evidence",
    description="""
Retrieve every evidence record attached to an incident, oldest first, each with
an addedBy summary.

**Authorization**: Requires a valid bearer token
    """,
    responses={
        200: {"description": "Evidence list returned"},
        401: {"description": "Missing or invalid bearer token"},
        404: {"description": "Incident not found"}
    }
)
async def list_evidence(
    incident_id: str,
    identity: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    manager: EvidenceManager = Depends(get_evidence_manager),
) -> List[Evidence]:
    """List evidence for an incident"""
    return await manager.list_for_incident(db, incident_id)


@router.post(
    "",
    response_model=Evidence,
    status_code=201,
    summary="Add Evidence",
    description="""
Attach an evidence record to an incident. Only a reference to where the item
is kept is stored; no file content is uploaded.

**Request Example**:
```json
{
  "description": "CCTV still of the suspect leaving the shop",
  "type": "Photo",
  "storageReference": "evidence-locker/2025/04/cctv-0419-1.jpg"
}
```

**Evidence Types**: Photo, Document, Physical Item, Statement, Video, Audio, Other

**Authorization**: Requires a valid bearer token; the caller is recorded as the adder
    """,
    responses={
        201: {"description": "Evidence added"},
        400: {"description": "Validation failed"},
        401: {"description": "Missing or invalid bearer token"},
        404: {"description": "Incident not found"}
    }
)
async def add_evidence(
    incident_id: str,
    request: EvidenceCreateRequest,
    identity: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    manager: EvidenceManager = Depends(get_evidence_manager),
) -> Evidence:
    """Add evidence to an incident"""
    return await manager.add_evidence(db, incident_id, request, identity)


@router.delete(
    "/{evidence_id}",
    status_code=204,
    summary="Delete Evidence",
    description="""
Permanently delete one evidence record.

**Checks, in order**:
1. Evidence must exist (404)
2. Evidence must belong to the incident in the path (400)
3. Caller must be the officer who added it or an administrator (403)

**Authorization**: Requires a valid bearer token
    """,
    responses={
        204: {"description": "Evidence deleted"},
        400: {"description": "Evidence belongs to a different incident"},
        401: {"description": "Missing or invalid bearer token"},
        403: {"description": "Caller is neither adder nor admin"},
        404: {"description": "Evidence not found"}
    }
)
async def delete_evidence(
    incident_id: str,
    evidence_id: str,
    identity: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    manager: EvidenceManager = Depends(get_evidence_manager),
):
    """Delete evidence"""
    await manager.delete_evidence(db, incident_id, evidence_id, identity)
    return Response(status_code=204)
