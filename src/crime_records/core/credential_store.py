"""
Credential Store

User accounts and password verification. Passwords are bcrypt-hashed before
storage; plaintext is never persisted or logged.
"""

import logging
from functools import lru_cache
from typing import List, Optional
from uuid import uuid4

import bcrypt
from sqlalchemy import select
from starlette.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from crime_records.config.settings import settings
from crime_records.core.exceptions import Conflict, ValidationFailed, translate_integrity_error
from crime_records.infrastructure.database.models import UserDB
from crime_records.models.user import User

logger = logging.getLogger(__name__)

# bcrypt only considers the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


# Compared against when a badge id is unknown so that a failed login costs
# the same bcrypt work whether or not the account exists.
@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    return bcrypt.hashpw(b"unused-placeholder-password", bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def hash_password(plaintext: str) -> str:
    """
    Salted bcrypt hash of a password

    Raises:
        ValidationFailed: If the password exceeds bcrypt's input limit
    """
    encoded = plaintext.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationFailed(errors={"password": [f"Password must be at most {MAX_PASSWORD_BYTES} bytes long."]})
    return bcrypt.hashpw(
        encoded, bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    ).decode("utf-8")


def verify_password(plaintext: str, hashed: str) -> bool:
    """Check a plaintext password against a bcrypt hash. Never raises on mismatch."""
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _verify_against_dummy(plaintext: str) -> bool:
    return verify_password(plaintext, _dummy_hash(settings.bcrypt_rounds))


class CredentialStore:
    """Business logic for user accounts"""

    async def create_user(self, db: AsyncSession, badge_id: str, name: str, password: str) -> User:
        """
        Register a new user

        Args:
            db: Database session
            badge_id: Unique login identifier
            name: Display name
            password: Plaintext password (validated by the request schema)

        Returns:
            The created user, without password

        Raises:
            Conflict: If the badge id is already registered
        """
        existing = await self.find_by_badge_id(db, badge_id)
        if existing:
            raise Conflict(f"User with badge ID {badge_id} already exists.")

        user_db = UserDB(
            id=str(uuid4()),
            badge_id=badge_id,
            name=name,
            password=await run_in_threadpool(hash_password, password),
            is_admin=False,
        )
        db.add(user_db)
        try:
            await db.commit()
        except IntegrityError as e:
            # Concurrent signup with the same badge id won the race
            await db.rollback()
            raise translate_integrity_error(e, f"User with badge ID {badge_id} already exists.") from e

        logger.info(f"Created user {user_db.id} (badge {badge_id})")
        return User.from_db(user_db)

    async def find_by_badge_id(self, db: AsyncSession, badge_id: str) -> Optional[UserDB]:
        """Full user row including the password hash. Internal use only."""
        stmt = select(UserDB).where(UserDB.badge_id == badge_id)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user(self, db: AsyncSession, user_id: str) -> Optional[UserDB]:
        return await db.get(UserDB, user_id)

    async def list_users(self, db: AsyncSession) -> List[User]:
        """All users, newest first"""
        stmt = select(UserDB).order_by(UserDB.created_at.desc(), UserDB.id)
        result = await db.execute(stmt)
        return [User.from_db(u) for u in result.scalars().all()]

    async def authenticate(self, db: AsyncSession, badge_id: str, password: str) -> Optional[UserDB]:
        """
        Return the user if the credentials match, else None

        An unknown badge id still pays for one bcrypt comparison. bcrypt runs in
        the threadpool, never on the event loop.
        """
        user_db = await self.find_by_badge_id(db, badge_id)
        if user_db is None:
            await run_in_threadpool(_verify_against_dummy, password)
            return None
        if not await run_in_threadpool(verify_password, password, user_db.password):
            return None
        return user_db


def get_credential_store() -> CredentialStore:
    """Dependency for getting CredentialStore instance"""
    return CredentialStore()
