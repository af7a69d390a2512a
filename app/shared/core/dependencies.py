"""
Common FastAPI dependencies for Plant Care Application.
Provides the authenticated principal that every service operation receives explicitly.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.shared.utils.logging import set_user_context

from ..config.supabase import get_supabase_manager
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Identity of the caller, resolved from the bearer token."""

    user_id: str
    email: str = ""


async def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Principal:
    """
    Verify the bearer token with the identity provider.

    Args:
        request: FastAPI request object
        credentials: Parsed Authorization header

    Returns:
        Principal: Authenticated caller

    Raises:
        AuthenticationError: If the token is missing or rejected
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")

    identity = await get_supabase_manager().verify_token(credentials.credentials)
    principal = Principal(user_id=identity["user_id"], email=identity["email"])

    # Read by the request logging filter
    request.state.user_id = principal.user_id
    set_user_context(principal.user_id)

    logger.debug(f"Authenticated principal: {principal.user_id}")
    return principal
