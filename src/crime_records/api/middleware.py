"""Bearer token access gate for protected API paths."""

import logging
from fnmatch import fnmatchcase
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from crime_records.api.context import RequestContext
from crime_records.core.exceptions import AuthenticationFailed, AuthenticationRequired, ConfigurationFault
from crime_records.core.token_service import TokenService, token_service

logger = logging.getLogger(__name__)

# Maximum length for bearer tokens (reject megabyte-sized headers before decoding)
_MAX_TOKEN_LENGTH = 4096


def path_is_protected(path: str, patterns: Iterable[str]) -> bool:
    """True if ``path`` matches any pattern; a trailing ``*`` matches any suffix."""
    return any(fnmatchcase(path, pattern) for pattern in patterns)


def extract_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header[7:].strip()
    return token or None


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Starlette middleware verifying bearer tokens on protected paths.

    Every matching request is verified afresh; on success the claims are
    attached as ``request.state.identity`` (a RequestContext). Failures are
    answered here and never reach the route handler.
    """

    def __init__(self, app, protected_paths: Iterable[str], tokens: Optional[TokenService] = None):
        super().__init__(app)
        self.protected_paths = list(protected_paths)
        self.tokens = tokens or token_service

    async def dispatch(self, request: Request, call_next):
        request.state.identity = None

        # CORS preflight carries no credentials
        if request.method == "OPTIONS" or not path_is_protected(request.url.path, self.protected_paths):
            return await call_next(request)

        token = extract_bearer_token(request.headers.get("authorization"))
        if token is None:
            return self._reject(AuthenticationRequired())

        if len(token) > _MAX_TOKEN_LENGTH:
            logger.warning("Rejected oversized bearer token (%d bytes)", len(token))
            return self._reject(AuthenticationFailed("Invalid token (verification failed)."))

        try:
            claims = self.tokens.verify_claims(token)
        except ConfigurationFault as e:
            return self._reject(e)
        except AuthenticationFailed as e:
            # Unverified peek, for the log line only
            claimed = self.tokens.peek_claims(token) or {}
            logger.warning(
                f"Token rejected for {request.method} {request.url.path}: {e.message} "
                f"(claimed badge: {claimed.get('badgeId', 'unknown')})"
            )
            return self._reject(e)

        request.state.identity = RequestContext(
            user_id=claims.user_id,
            badge_id=claims.badge_id,
            is_admin=claims.is_admin,
        )
        logger.debug(f"Verified token for user {claims.user_id} (admin={claims.is_admin})")
        return await call_next(request)

    @staticmethod
    def _reject(error) -> JSONResponse:
        return JSONResponse({"message": error.message}, status_code=error.status_code)
