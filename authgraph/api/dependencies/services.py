"""
Service dependencies.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from authgraph.core.config import settings
from authgraph.rbac.service import AuthManager
from .database import get_db


async def get_auth_manager(db: AsyncSession = Depends(get_db)) -> AuthManager:
    """Get AuthManager bound to the request session."""
    return AuthManager(db, **settings.get_authz_config())
