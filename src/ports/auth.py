from typing import Protocol

from src.domain.entities import Actor


class AuthenticationError(Exception):
    """Missing, malformed, expired or otherwise unverifiable credential."""


class IdentityPort(Protocol):
    def verify(self, token: str) -> Actor:
        """
        Verify a bearer token and return the caller's identity.
        Raises AuthenticationError if the token cannot be trusted.
        """
        ...
