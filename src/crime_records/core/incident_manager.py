"""
Incident Manager

Core business logic for incident records: creation, lookup, paginated
listing and owner/admin-guarded mutation.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import uuid4

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from crime_records.api.context import RequestContext
from crime_records.core.exceptions import (
    Forbidden,
    NotFound,
    ValidationFailed,
    translate_integrity_error,
)
from crime_records.core.policy import can_modify, ensure_can_modify
from crime_records.infrastructure.database.client import begin_snapshot
from crime_records.infrastructure.database.models import EvidenceDB, IncidentDB, UserDB, utcnow
from crime_records.models.incident import (
    SORTABLE_FIELDS,
    Incident,
    IncidentListQuery,
    IncidentStatus,
    SortOrder,
)
from crime_records.models.requests import IncidentCreateRequest, IncidentUpdateRequest

logger = logging.getLogger(__name__)


def to_utc_naive(value: datetime) -> datetime:
    """Normalise a datetime to naive UTC; naive input is taken to be UTC already"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def generate_case_number(now: Optional[datetime] = None) -> str:
    """Public case number, e.g. CR-20250419-4F1A9C2B"""
    stamp = (now or utcnow()).strftime("%Y%m%d")
    return f"CR-{stamp}-{uuid4().hex[:8].upper()}"


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class IncidentManager:
    """Business logic for incident management"""

    async def _load(self, db: AsyncSession, incident_id: str) -> Optional[IncidentDB]:
        stmt = (
            select(IncidentDB)
            .options(joinedload(IncidentDB.reported_by))
            .where(IncidentDB.id == incident_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_incident(
        self,
        db: AsyncSession,
        request: IncidentCreateRequest,
        actor: RequestContext,
    ) -> Incident:
        """
        Create an incident owned by the actor (or, for admins, another user)

        Args:
            db: Database session
            request: Validated incident fields
            actor: Verified identity of the caller

        Returns:
            Created incident with owner summary

        Raises:
            Forbidden: Non-admin reporting on behalf of someone else
            ValidationFailed: Owning user does not exist
            Conflict: Case number collision
        """
        owner_id = request.reported_by_id or actor.user_id
        if not can_modify(actor, owner_id):
            logger.warning(
                f"User {actor.user_id} tried to report an incident on behalf of {owner_id}"
            )
            raise Forbidden("Forbidden: Only administrators may report incidents for another user.")

        owner = await db.get(UserDB, owner_id)
        if owner is None:
            raise ValidationFailed(
                f"Reporting user with ID {owner_id} not found or invalid.",
                errors={"reportedById": ["Reporting user not found."]},
            )

        status = request.status
        incident_db = IncidentDB(
            id=str(uuid4()),
            case_number=generate_case_number(),
            reported_at=utcnow(),
            occurred_at=to_utc_naive(request.occurred_at),
            location=request.location,
            crime_type=request.crime_type,
            description=request.description,
            status=status.value,
            closing_reason=request.closing_reason if status == IncidentStatus.CLOSED else None,
            reported_by_id=owner_id,
        )
        db.add(incident_db)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise translate_integrity_error(e, "An incident with this case number already exists.") from e

        logger.info(f"Created incident {incident_db.id} ({incident_db.case_number}) for user {owner_id}")
        return Incident.from_db(await self._load(db, incident_db.id))

    async def get_incident(self, db: AsyncSession, incident_id: str) -> Optional[Incident]:
        """
        Get incident with owner summary

        Returns:
            Incident or None
        """
        incident_db = await self._load(db, incident_id)
        if not incident_db:
            return None
        return Incident.from_db(incident_db)

    async def list_incidents(
        self,
        db: AsyncSession,
        query: IncidentListQuery,
    ) -> Tuple[List[Incident], int]:
        """
        List incidents with filtering, sorting and pagination

        The page and the total count are read inside one snapshot so the
        pagination metadata always describes the returned rows.

        Args:
            db: Database session (must not have started a transaction yet)
            query: Normalised list parameters

        Returns:
            Tuple of (incidents, total_count)
        """
        await begin_snapshot(db)

        conditions = []
        if query.status:
            conditions.append(IncidentDB.status == query.status.value)

        if query.search_query:
            pattern = f"%{_escape_like(query.search_query)}%"
            conditions.append(
                or_(
                    IncidentDB.case_number.ilike(pattern, escape="\\"),
                    IncidentDB.crime_type.ilike(pattern, escape="\\"),
                    IncidentDB.location.ilike(pattern, escape="\\"),
                    IncidentDB.description.ilike(pattern, escape="\\"),
                )
            )

        count_stmt = select(func.count()).select_from(IncidentDB).where(*conditions)
        total_count = (await db.execute(count_stmt)).scalar_one()

        sort_column = getattr(IncidentDB, SORTABLE_FIELDS[query.sort_by])
        ordering = sort_column.asc() if query.sort_order == SortOrder.ASC else sort_column.desc()

        stmt = (
            select(IncidentDB)
            .options(joinedload(IncidentDB.reported_by))
            .where(*conditions)
            .order_by(ordering, IncidentDB.id)
            .offset(query.offset)
            .limit(query.limit)
        )
        result = await db.execute(stmt)
        incidents = [Incident.from_db(i) for i in result.scalars().all()]

        # End the read-only snapshot
        await db.commit()
        return incidents, total_count

    async def update_incident(
        self,
        db: AsyncSession,
        incident_id: str,
        patch: IncidentUpdateRequest,
        actor: RequestContext,
    ) -> Incident:
        """
        Apply a partial update

        Whatever the patch says, closingReason ends up null unless the
        resulting status is Closed.

        Raises:
            NotFound: Incident does not exist
            Forbidden: Actor is neither admin nor owner
            ValidationFailed: Patch carries no fields
        """
        incident_db = await self._load(db, incident_id)
        if not incident_db:
            raise NotFound(f"Incident {incident_id} not found.")

        ensure_can_modify(actor, incident_db.reported_by_id, f"incident {incident_id}")

        changes = patch.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationFailed("No valid fields provided for update.")

        for field, value in changes.items():
            if field == "occurred_at":
                value = to_utc_naive(value)
            elif field == "status":
                value = IncidentStatus(value).value
            setattr(incident_db, field, value)

        if incident_db.status != IncidentStatus.CLOSED.value:
            incident_db.closing_reason = None

        await db.commit()

        logger.info(
            f"User {actor.user_id} updated incident {incident_id} "
            f"(fields: {', '.join(sorted(changes))}, admin={actor.is_admin})"
        )
        return Incident.from_db(await self._load(db, incident_id))

    async def delete_incident(self, db: AsyncSession, incident_id: str, actor: RequestContext) -> None:
        """
        Delete an incident and all of its evidence

        Raises:
            NotFound: Incident does not exist (including when already deleted)
            Forbidden: Actor is neither admin nor owner
        """
        incident_db = await db.get(IncidentDB, incident_id)
        if not incident_db:
            raise NotFound(f"Incident {incident_id} not found.")

        ensure_can_modify(actor, incident_db.reported_by_id, f"incident {incident_id}")

        await db.execute(delete(EvidenceDB).where(EvidenceDB.incident_id == incident_id))
        result = await db.execute(delete(IncidentDB).where(IncidentDB.id == incident_id))
        if result.rowcount == 0:
            # Removed by a concurrent request after the lookup above
            await db.rollback()
            raise NotFound(f"Incident {incident_id} not found.")
        await db.commit()

        logger.info(f"User {actor.user_id} deleted incident {incident_id} (admin={actor.is_admin})")


def get_incident_manager() -> IncidentManager:
    """Dependency for getting IncidentManager instance"""
    return IncidentManager()
