"""
Token Service

Signs and verifies the HS256 bearer tokens carrying caller identity.

Two tiers of decoding are offered on purpose:

- ``verify_claims`` checks signature, algorithm and expiry. It is the only
  way to obtain claims that authorization decisions may rely on.
- ``peek_claims`` decodes the payload without any verification. The result
  is untrusted and must only be used for display or diagnostics.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from crime_records.config.settings import settings
from crime_records.core.exceptions import AuthenticationFailed, ConfigurationFault

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(hours=1)


class TokenExpired(AuthenticationFailed):
    default_message = "Token has expired."


class TokenSignatureInvalid(AuthenticationFailed):
    default_message = "Invalid token (verification failed)."


class TokenMalformed(AuthenticationFailed):
    default_message = "Malformed token."


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried inside a bearer token"""

    user_id: str
    badge_id: str
    is_admin: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {"userId": self.user_id, "badgeId": self.badge_id, "isAdmin": self.is_admin}

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenClaims":
        user_id = payload.get("userId")
        badge_id = payload.get("badgeId")
        is_admin = payload.get("isAdmin", False)
        if not isinstance(user_id, str) or not user_id:
            raise TokenMalformed()
        if not isinstance(badge_id, str) or not badge_id:
            raise TokenMalformed()
        if not isinstance(is_admin, bool):
            raise TokenMalformed()
        return cls(user_id=user_id, badge_id=badge_id, is_admin=is_admin)


class TokenService:
    """Issue and verify bearer tokens with a pinned symmetric algorithm"""

    def __init__(self, secret: Optional[str] = None):
        # None means "read JWT_SECRET from settings at call time"
        self._secret = secret

    @property
    def secret(self) -> str:
        secret = self._secret if self._secret is not None else settings.jwt_secret
        if not secret:
            logger.error("JWT_SECRET is not configured")
            raise ConfigurationFault()
        return secret

    def issue(self, claims: TokenClaims, now: Optional[datetime] = None) -> str:
        """
        Sign a token for ``claims`` valid for one hour

        Raises:
            ConfigurationFault: If no signing secret is configured
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = claims.to_payload()
        payload["iat"] = int(issued_at.timestamp())
        payload["exp"] = int((issued_at + TOKEN_LIFETIME).timestamp())
        return jwt.encode(payload, self.secret, algorithm=TOKEN_ALGORITHM)

    def verify_claims(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the trusted claims

        Raises:
            TokenExpired: Token is past its ``exp``
            TokenSignatureInvalid: Wrong secret or a different algorithm
            TokenMalformed: Not a JWT, or required claims missing/mistyped
            ConfigurationFault: If no signing secret is configured
        """
        secret = self.secret
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[TOKEN_ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired() from e
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            raise TokenSignatureInvalid() from e
        except jwt.DecodeError as e:
            raise TokenMalformed() from e
        except jwt.InvalidTokenError as e:
            # Missing exp/iat, iat in the future, and similar claim failures
            raise TokenSignatureInvalid() from e
        return TokenClaims.from_payload(payload)

    @staticmethod
    def peek_claims(token: str) -> Optional[Dict[str, Any]]:
        """Decode the payload WITHOUT verification. Never use for authorization."""
        try:
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            return None


# Global token service bound to settings.jwt_secret
token_service = TokenService()


def get_token_service() -> TokenService:
    """Dependency for getting the TokenService instance"""
    return token_service
