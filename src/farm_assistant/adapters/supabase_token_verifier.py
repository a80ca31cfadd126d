"""Bearer token verification through Supabase Auth."""

import logging
from dataclasses import dataclass

from supabase import Client

from farm_assistant.services.auth import ANONYMOUS, CallerContext, TokenVerifier

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseTokenVerifier(TokenVerifier):
    """Resolve access tokens to callers using Supabase Auth."""

    client: Client

    def verify(self, token: str) -> CallerContext:
        """Return the caller for a token, or anonymous when it is invalid."""
        try:
            response = self.client.auth.get_user(token)
        except Exception:
            _logger.warning("Token verification failed", exc_info=True)
            return ANONYMOUS
        user = getattr(response, "user", None)
        if user is None:
            return ANONYMOUS
        return CallerContext(user_id=str(user.id), email=user.email)
