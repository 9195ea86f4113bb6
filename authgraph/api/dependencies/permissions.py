"""
Permission checking dependencies.

Authentication is handled upstream; the caller's user id arrives in the
header named by AUTHZ_USER_ID_HEADER (default X-User-ID).

Usage:
```python
@router.get("/documents")
async def list_documents(
    user_id: UUID = Depends(require_access("readDoc")),
):
    ...

@router.get("/admin")
async def admin_area(
    user_id: UUID = Depends(require_any_role("admin, support")),
):
    ...
```
"""

from typing import Callable, Iterable
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status

from authgraph.core.config import settings
from authgraph.rbac.service import AuthManager
from .services import get_auth_manager


def parse_role_list(roles: str | Iterable[str]) -> list[str]:
    """
    Normalize roles given as a list or a comma-separated string.

    "admin, editor" -> ["admin", "editor"]; blank entries are dropped.
    """
    if isinstance(roles, str):
        roles = roles.split(",")
    return [r.strip() for r in roles if r and r.strip()]


async def get_current_user_id(request: Request) -> UUID:
    """Caller id from the identity header; 401 if missing or malformed."""
    raw = request.headers.get(settings.authz.user_id_header)
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    try:
        return UUID(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id",
        )


def require_access(item_name: str) -> Callable:
    """Dependency factory: caller must reach item_name through the role graph."""

    async def check_access(
        user_id: UUID = Depends(get_current_user_id),
        auth: AuthManager = Depends(get_auth_manager),
    ) -> UUID:
        if not await auth.check_access(user_id, item_name):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {item_name}",
            )
        return user_id

    return check_access


def require_any_role(roles: str | Iterable[str]) -> Callable:
    """Dependency factory: caller must be directly assigned at least one role."""
    required = parse_role_list(roles)

    async def check_role(
        user_id: UUID = Depends(get_current_user_id),
        auth: AuthManager = Depends(get_auth_manager),
    ) -> UUID:
        if not await auth.user_is_in_role(user_id, required):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden (no acceptable role)",
            )
        return user_id

    return check_role


def require_permission(permissions: str | Iterable[str]) -> Callable:
    """Dependency factory: caller must be directly assigned at least one permission."""
    required = parse_role_list(permissions)

    async def check_permission(
        user_id: UUID = Depends(get_current_user_id),
        auth: AuthManager = Depends(get_auth_manager),
    ) -> UUID:
        if not await auth.user_has_permission(user_id, required):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden (missing permission)",
            )
        return user_id

    return check_permission
