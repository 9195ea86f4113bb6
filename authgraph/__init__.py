"""
authgraph - hierarchical role/permission authorization.

Users are directly assigned named auth items (roles or permissions).
Roles may contain child items; a user has access to an item if it is
assigned directly or reachable through assigned roles.

Usage:
    from authgraph import AuthManager

    auth = AuthManager(db)
    await auth.add_users_to_roles(user.id, ["admin"])
    await auth.check_access(user.id, "editDoc")
"""

from .exceptions import (
    AuthorizationError,
    CycleDetected,
    DuplicateName,
    InvalidName,
    ItemInUse,
    MissingRequiredParam,
    MissingRolesParam,
    MissingUsersParam,
    NotARole,
    NotFound,
)
from .models import AuthItem, AuthItemType, User
from .rbac import AccessCache, AuthGraph, access_cache, resolve
from .rbac.service import AuthManager, Subject

__version__ = "0.1.0"

__all__ = [
    "AuthManager",
    "Subject",
    "AuthItem",
    "AuthItemType",
    "User",
    "AuthGraph",
    "resolve",
    "AccessCache",
    "access_cache",
    "AuthorizationError",
    "CycleDetected",
    "DuplicateName",
    "InvalidName",
    "ItemInUse",
    "MissingRequiredParam",
    "MissingRolesParam",
    "MissingUsersParam",
    "NotARole",
    "NotFound",
]
