import logging
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import UUID

from jose import jwt

from src.domain.entities import Actor, Role
from src.ports.auth import AuthenticationError
from src.rules.models import AuthRules

logger = logging.getLogger(__name__)


class JWTIdentityGate:
    """
    Verifies bearer tokens issued by the identity provider.

    The subject claim is the user id. The role is read from a nested claim
    (by default ``user_metadata.role``); a missing role falls back to the
    configured default, an unrecognised one is rejected.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        role_claim_path: Sequence[str] = ("user_metadata", "role"),
        default_role: str = "viewer",
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._role_claim_path = tuple(role_claim_path)
        self._default_role = Role(default_role)

    @classmethod
    def from_rules(cls, rules: AuthRules, secret: str) -> "JWTIdentityGate":
        return cls(
            secret=secret,
            algorithm=rules.jwt_algorithm,
            role_claim_path=rules.role_claim_path,
            default_role=rules.default_role,
        )

    def verify(self, token: str) -> Actor:
        try:
            payload = cast(
                dict[str, Any], jwt.decode(token, self._secret, algorithms=[self._algorithm])
            )
        except jwt.JWTError as e:
            logger.warning("Rejected bearer token: %s", e)
            raise AuthenticationError("Invalid or expired token") from e

        subject = payload.get("sub")
        try:
            user_id = UUID(str(subject))
        except ValueError as e:
            logger.warning("Rejected bearer token with subject %r", subject)
            raise AuthenticationError("Invalid token subject") from e

        email = payload.get("email")
        return Actor(
            id=user_id,
            email=email if isinstance(email, str) else "",
            role=self._role_from(payload),
        )

    def _role_from(self, payload: dict[str, Any]) -> Role:
        value: Any = payload
        for key in self._role_claim_path:
            value = value.get(key) if isinstance(value, dict) else None
        if value is None:
            return self._default_role
        try:
            return Role(value)
        except ValueError as e:
            logger.warning("Rejected bearer token with unknown role %r", value)
            raise AuthenticationError("Unknown role") from e


def issue_token(
    user_id: UUID,
    secret: str,
    role: Role | str | None = None,
    email: str | None = None,
    algorithm: str = "HS256",
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    """
    Create a signed token in the identity provider's shape.

    Used by local tooling and tests; production tokens come from the provider.

    Args:
        user_id: Subject claim
        role: Stored under user_metadata.role when given
        now_utc: Current UTC time (for testing/determinism). Defaults to datetime.now(UTC).
    """
    current_time = now_utc if now_utc is not None else datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "exp": current_time + (expires_delta or timedelta(minutes=15)),
    }
    if email is not None:
        claims["email"] = email
    if role is not None:
        claims["user_metadata"] = {"role": Role(role).value}
    encoded: str = jwt.encode(claims, secret, algorithm=algorithm)
    return encoded
