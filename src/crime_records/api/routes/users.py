"""
User API Routes

Signup and user listing. Password hashes are never returned.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crime_records.core.credential_store import CredentialStore, get_credential_store
from crime_records.infrastructure.database.client import get_db
from crime_records.models import User, UserCreateRequest

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post(
    "",
    response_model=User,
    status_code=201,
    summary="Create User",
    description="""
Register a new officer account.

**Workflow**:
1. Validates badgeId and name (non-empty after trimming) and password (at least 6 characters)
2. Rejects a badge ID that is already registered
3. Hashes the password with bcrypt and stores the user as a non-admin
4. Returns the user without the password

**Request Example**:
```json
{
  "badgeId": "OFFICER123",
  "name": "R. Rao",
  "password": "correct-horse"
}
```

**Authorization**: None required (public endpoint)
    """,
    responses={
        201: {"description": "User created"},
        400: {"description": "Validation failed"},
        409: {"description": "Badge ID already registered"}
    }
)
async def create_user(
    request: UserCreateRequest,
    db: AsyncSession = Depends(get_db),
    store: CredentialStore = Depends(get_credential_store),
) -> User:
    """Create a user"""
    return await store.create_user(db, request.badge_id, request.name, request.password)


@router.get(
    "",
    response_model=List[User],
    summary="List Users",
    description="All registered users, newest first, without passwords.",
    responses={200: {"description": "Users returned"}}
)
async def list_users(
    db: AsyncSession = Depends(get_db),
    store: CredentialStore = Depends(get_credential_store),
) -> List[User]:
    return await store.list_users(db)
