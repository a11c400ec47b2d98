"""
Request Context

Verified caller identity, populated once per request by the access gate and
passed explicitly to the business layer.
"""

from dataclasses import dataclass

from fastapi import Request

from crime_records.core.exceptions import AuthenticationRequired


@dataclass(frozen=True)
class RequestContext:
    """Identity claims of a request whose bearer token has been verified"""

    user_id: str
    badge_id: str
    is_admin: bool = False


def get_request_context(request: Request) -> RequestContext:
    """Dependency returning the identity set by AccessGateMiddleware.

    Raises:
        AuthenticationRequired: If the route is not covered by the gate or
            the gate did not authenticate the request
    """
    identity = getattr(request.state, "identity", None)
    if not isinstance(identity, RequestContext):
        raise AuthenticationRequired()
    return identity
