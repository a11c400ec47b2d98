"""
Evidence Data Models

Core domain models for evidence references attached to incidents.
"""

from enum import Enum

from pydantic import ConfigDict, Field

from .common import CamelModel, UtcDateTime
from .user import UserSummary


class EvidenceType(str, Enum):
    """Evidence type classification"""
    PHOTO = "Photo"
    DOCUMENT = "Document"
    PHYSICAL_ITEM = "Physical Item"
    STATEMENT = "Statement"
    VIDEO = "Video"
    AUDIO = "Audio"
    OTHER = "Other"


class Evidence(CamelModel):
    """Evidence record and the officer who added it"""

    id: str = Field(..., description="Unique evidence identifier")
    description: str = Field(..., description="What the evidence is")
    type: EvidenceType = Field(..., description="Evidence classification")
    storage_reference: str = Field(
        ..., description="Where the item is kept: file path, URL or locker id, depending on type"
    )
    incident_id: str = Field(..., description="Owning incident")
    added_by_id: str = Field(..., description="User who added the evidence")
    added_by: UserSummary
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_db(cls, evidence_db) -> "Evidence":
        """Create API model from an EvidenceDB row loaded with its adder"""
        return cls(
            id=evidence_db.id,
            description=evidence_db.description,
            type=EvidenceType(evidence_db.type),
            storage_reference=evidence_db.storage_reference,
            incident_id=evidence_db.incident_id,
            added_by_id=evidence_db.added_by_id,
            added_by=UserSummary.from_db(evidence_db.added_by),
            created_at=evidence_db.created_at,
            updated_at=evidence_db.updated_at,
        )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "description": "CCTV still of the suspect leaving the shop",
                "type": "Photo",
                "storageReference": "evidence-locker/2025/04/cctv-0419-1.jpg",
                "incidentId": "8d2f64a4-2b1e-4d0c-9f0c-3f7a9b1c2d3e",
                "addedById": "0b9a7c1e-5d4f-4a3b-8c2d-1e0f9a8b7c6d",
                "addedBy": {"id": "0b9a7c1e-5d4f-4a3b-8c2d-1e0f9a8b7c6d", "name": "R. Rao", "badgeId": "OFFICER123"},
                "createdAt": "2025-04-20T11:10:34Z",
                "updatedAt": "2025-04-20T11:10:34Z"
            }
        }
    )
