"""
Authentication API Routes

Login (credentials for bearer token) and verified session lookup.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crime_records.api.context import RequestContext, get_request_context
from crime_records.core.credential_store import CredentialStore, get_credential_store
from crime_records.core.exceptions import AuthenticationFailed, ConfigurationFault
from crime_records.core.token_service import TokenClaims, TokenService, get_token_service
from crime_records.infrastructure.database.client import get_db
from crime_records.models import LoginRequest, LoginResponse, SessionResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log In",
    description="""
Exchange badge ID and password for a signed bearer token.

**Workflow**:
1. Validates that badgeId and password are present
2. Looks up the user by badge ID and checks the bcrypt hash
3. Signs an HS256 token carrying userId, badgeId and isAdmin, valid for one hour
4. Returns the token

**Request Example**:
```json
{
  "badgeId": "OFFICER123",
  "password": "correct-horse"
}
```

**Response Example**:
```json
{
  "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."
}
```

**Token Use**: Send as `Authorization: Bearer <token>` on every protected request.
Tokens cannot be revoked server-side; logging out discards the token on the client.

**Authorization**: None required (public endpoint)
    """,
    responses={
        200: {"description": "Credentials accepted, token issued"},
        400: {"description": "Missing badgeId or password"},
        401: {"description": "Invalid credentials"},
        500: {"description": "Signing secret not configured"}
    }
)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    store: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
) -> LoginResponse:
    """Issue a bearer token for valid credentials"""
    user = await store.authenticate(db, request.badge_id, request.password)
    if user is None:
        logger.warning(f"Failed login for badge {request.badge_id}")
        raise AuthenticationFailed("Invalid credentials.")

    try:
        token = tokens.issue(
            TokenClaims(user_id=user.id, badge_id=user.badge_id, is_admin=bool(user.is_admin))
        )
    except ConfigurationFault as e:
        raise ConfigurationFault("Authentication configuration error.") from e

    logger.info(f"User {user.id} (badge {user.badge_id}) logged in, admin={bool(user.is_admin)}")
    return LoginResponse(token=token)


@router.get(
    "/me",
    response_model=SessionResponse,
    summary="Current Session",
    description="""
Return the identity claims of the presented bearer token after full server-side
verification. Clients restoring a session should call this instead of trusting
a locally decoded token.

**Authorization**: Requires a valid bearer token
    """,
    responses={
        200: {"description": "Token valid, claims returned"},
        401: {"description": "Missing, expired or invalid token"}
    }
)
async def current_session(
    identity: RequestContext = Depends(get_request_context),
) -> SessionResponse:
    """Verified claims of the caller"""
    return SessionResponse(
        user_id=identity.user_id,
        badge_id=identity.badge_id,
        is_admin=identity.is_admin,
    )
