# 📄 File: app/shared/config/supabase.py
#
# 🧭 Purpose (Layman Explanation):
# Connects to Supabase, the service that knows who our users are, so we can check that
# the login token sent with each request is genuine.
#
# 🧪 Purpose (Technical Summary):
# Lazily created Supabase client (anon key) used only for bearer token verification via
# auth.get_user(jwt). The blocking SDK call runs in a worker thread.
#
# 🔗 Dependencies:
# - supabase (create_client, ClientOptions)
# - app.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - app.shared.core.dependencies (get_current_principal)
# - app.main lifespan (cleanup)

import asyncio
import logging
from typing import Any, Dict, Optional

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from app.shared.core.exceptions import AuthenticationError

from .settings import get_settings

logger = logging.getLogger(__name__)


class SupabaseManager:
    """Holds the lazily created Supabase client; token checks are its only use."""

    def __init__(self):
        self._client: Optional[Client] = None
        self.settings = get_settings()

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self) -> Client:
        if not self.settings.SUPABASE_URL or not self.settings.SUPABASE_ANON_KEY:
            logger.error("Supabase URL or anon key is not configured")
            raise AuthenticationError("Identity provider is not configured")

        client_options = ClientOptions(
            headers={"User-Agent": f"PlantCareApp/{self.settings.APP_VERSION}"},
            auto_refresh_token=False,
            persist_session=False,
        )
        client = create_client(
            self.settings.SUPABASE_URL,
            self.settings.SUPABASE_ANON_KEY,
            options=client_options
        )
        logger.info(f"Identity client ready for {self.settings.SUPABASE_URL}")
        return client

    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Resolve a bearer token into the identity it was issued for.

        Args:
            token: Raw JWT from the Authorization header

        Returns:
            Dict with ``user_id`` and ``email``

        Raises:
            AuthenticationError: If the token is rejected or the provider fails
        """
        try:
            response = await asyncio.to_thread(self.client.auth.get_user, token)
        except AuthenticationError:
            raise
        except Exception as e:
            logger.warning(f"Token verification failed: {e}")
            raise AuthenticationError("Invalid or expired token") from e

        user = getattr(response, "user", None)
        if user is None or not getattr(user, "id", None):
            raise AuthenticationError("Invalid or expired token")

        return {"user_id": str(user.id), "email": getattr(user, "email", None) or ""}

    def close(self) -> None:
        self._client = None
        logger.info("Identity client released")


_supabase_manager: Optional[SupabaseManager] = None


def get_supabase_manager() -> SupabaseManager:
    global _supabase_manager
    if _supabase_manager is None:
        _supabase_manager = SupabaseManager()
    return _supabase_manager


async def cleanup_supabase() -> None:
    """Drop the shared client; the next request recreates it."""
    global _supabase_manager
    if _supabase_manager is not None:
        _supabase_manager.close()
        _supabase_manager = None
