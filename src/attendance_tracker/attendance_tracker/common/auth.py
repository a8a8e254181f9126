from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, Optional

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..users.model import AuthenticatedPrincipal

if TYPE_CHECKING:
    from ..container import Container


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("No authorization token")
    return token.strip()


def auth_required(container: "Container", role: Optional[Role] = None):
    """Resolve the bearer token into `g.principal`; enforce `role` when given."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            principal = container.auth_service.principal_from_token(bearer_token())
            if role is not None:
                container.auth_service.authorize(principal, role)
            g.principal = principal
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_principal() -> AuthenticatedPrincipal:
    return g.principal
