"""Caller identity resolution."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class CallerContext:
    """Identity of the caller for a single request."""

    user_id: str | None = None
    email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """Return True when the caller presented a valid token."""
        return self.user_id is not None


ANONYMOUS = CallerContext()


class TokenVerifier(Protocol):
    """Interface for validating bearer tokens."""

    def verify(self, token: str) -> CallerContext:
        """Return the caller for a token, or the anonymous caller."""


def parse_bearer_token(header: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header or not header.startswith("Bearer "):
        return None
    token = header.removeprefix("Bearer ").strip()
    return token or None
