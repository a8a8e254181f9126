from __future__ import annotations

from datetime import timedelta

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.constants import DEFAULT_TOKEN_TTL_DAYS
from ..core.exceptions import AuthenticationError


class TokenService:
    """Signed, time-limited bearer tokens carrying only the user id.

    The issue time is embedded in the signature; age is checked on verify.
    """

    _SALT = "attendance-tracker.auth"

    def __init__(self, secret_key: str, *, ttl: timedelta = timedelta(days=DEFAULT_TOKEN_TTL_DAYS)):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self._SALT)
        self._ttl = ttl

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def sign(self, user_id: int) -> str:
        return self._serializer.dumps({"uid": int(user_id)})

    def verify(self, token: str) -> int:
        """Return the user id inside a valid token, else raise AuthenticationError."""

        if not token:
            raise AuthenticationError("No authorization token")
        try:
            claims = self._serializer.loads(token, max_age=self._ttl.total_seconds())
        except SignatureExpired:
            raise AuthenticationError("Token expired")
        except BadSignature:
            raise AuthenticationError("Invalid token")

        if not isinstance(claims, dict) or not isinstance(claims.get("uid"), int):
            raise AuthenticationError("Invalid token")
        return claims["uid"]
