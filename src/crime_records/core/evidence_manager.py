"""
Evidence Manager

Core business logic for evidence records scoped to a parent incident.
"""

import logging
from typing import List
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from crime_records.api.context import RequestContext
from crime_records.core.exceptions import NotFound, ValidationFailed, translate_integrity_error
from crime_records.core.policy import ensure_can_modify
from crime_records.infrastructure.database.models import EvidenceDB, IncidentDB
from crime_records.models.evidence import Evidence
from crime_records.models.requests import EvidenceCreateRequest

logger = logging.getLogger(__name__)


class EvidenceManager:
    """Business logic for evidence management"""

    async def _ensure_incident(self, db: AsyncSession, incident_id: str) -> None:
        stmt = select(IncidentDB.id).where(IncidentDB.id == incident_id)
        result = await db.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise NotFound(f"Incident with ID {incident_id} not found.")

    async def _load(self, db: AsyncSession, evidence_id: str):
        stmt = (
            select(EvidenceDB)
            .options(joinedload(EvidenceDB.added_by))
            .where(EvidenceDB.id == evidence_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_incident(self, db: AsyncSession, incident_id: str) -> List[Evidence]:
        """
        List all evidence of an incident, oldest first

        Raises:
            NotFound: If the incident does not exist
        """
        await self._ensure_incident(db, incident_id)

        stmt = (
            select(EvidenceDB)
            .options(joinedload(EvidenceDB.added_by))
            .where(EvidenceDB.incident_id == incident_id)
            .order_by(EvidenceDB.created_at.asc(), EvidenceDB.id)
        )
        result = await db.execute(stmt)
        return [Evidence.from_db(e) for e in result.scalars().all()]

    async def add_evidence(
        self,
        db: AsyncSession,
        incident_id: str,
        request: EvidenceCreateRequest,
        actor: RequestContext,
    ) -> Evidence:
        """
        Attach an evidence record to an incident

        Args:
            db: Database session
            incident_id: Parent incident
            request: Validated evidence fields
            actor: Verified identity of the caller, recorded as the adder

        Returns:
            Created evidence with adder summary

        Raises:
            NotFound: If the incident does not exist
        """
        await self._ensure_incident(db, incident_id)

        evidence_db = EvidenceDB(
            id=str(uuid4()),
            description=request.description,
            type=request.type.value,
            storage_reference=request.storage_reference,
            incident_id=incident_id,
            added_by_id=actor.user_id,
        )
        db.add(evidence_db)
        try:
            await db.commit()
        except IntegrityError as e:
            # Incident deleted concurrently, or the adder's account is gone
            await db.rollback()
            raise translate_integrity_error(e, "Evidence already exists.") from e

        logger.info(f"User {actor.user_id} added evidence {evidence_db.id} to incident {incident_id}")
        return Evidence.from_db(await self._load(db, evidence_db.id))

    async def delete_evidence(
        self,
        db: AsyncSession,
        incident_id: str,
        evidence_id: str,
        actor: RequestContext,
    ) -> None:
        """
        Delete one evidence record

        Raises:
            NotFound: Evidence does not exist
            ValidationFailed: Evidence belongs to a different incident
            Forbidden: Actor is neither admin nor the original adder
        """
        evidence_db = await db.get(EvidenceDB, evidence_id)
        if not evidence_db:
            raise NotFound(f"Evidence with ID {evidence_id} not found.")

        if evidence_db.incident_id != incident_id:
            raise ValidationFailed(f"Evidence {evidence_id} does not belong to incident {incident_id}.")

        ensure_can_modify(actor, evidence_db.added_by_id, f"evidence {evidence_id}")

        result = await db.execute(delete(EvidenceDB).where(EvidenceDB.id == evidence_id))
        if result.rowcount == 0:
            await db.rollback()
            raise NotFound(f"Evidence with ID {evidence_id} not found.")
        await db.commit()

        logger.info(f"User {actor.user_id} deleted evidence {evidence_id} (admin={actor.is_admin})")


def get_evidence_manager() -> EvidenceManager:
    """Dependency for getting EvidenceManager instance"""
    return EvidenceManager()
