"""
Authorization Policy

One rule for every mutation of an existing record: the actor must be an
administrator or the user who created the record.
"""

import logging

from crime_records.api.context import RequestContext
from crime_records.core.exceptions import Forbidden

logger = logging.getLogger(__name__)


def can_modify(actor: RequestContext, owner_id: str) -> bool:
    """Return True if ``actor`` may update or delete a record owned by ``owner_id``"""
    return actor.is_admin or owner_id == actor.user_id


def ensure_can_modify(actor: RequestContext, owner_id: str, resource: str) -> None:
    """
    Enforce the ownership rule

    Args:
        actor: Verified identity of the caller
        owner_id: reportedById / addedById of the record
        resource: Human-readable description used in logs

    Raises:
        Forbidden: If the actor is neither admin nor owner
    """
    if not can_modify(actor, owner_id):
        logger.warning(
            f"Authorization failed: user {actor.user_id} ({actor.badge_id}) "
            f"tried to modify {resource} owned by {owner_id}"
        )
        raise Forbidden()
