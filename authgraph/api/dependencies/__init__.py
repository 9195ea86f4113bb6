"""
FastAPI dependencies.
"""

from .database import get_db
from .services import get_auth_manager
from .permissions import (
    get_current_user_id,
    parse_role_list,
    require_access,
    require_any_role,
    require_permission,
)

__all__ = [
    "get_db",
    "get_auth_manager",
    "get_current_user_id",
    "parse_role_list",
    "require_access",
    "require_any_role",
    "require_permission",
]
