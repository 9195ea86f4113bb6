"""
Read-only authorization routes.
"""

from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status

from authgraph.api.dependencies.permissions import get_current_user_id
from authgraph.api.dependencies.services import get_auth_manager
from authgraph.rbac.service import AuthManager
from authgraph.schemas.authz import (
    AccessResponse,
    AuthItemResponse,
    UserItemsResponse,
    UserSummary,
)

router = APIRouter()


@router.get("/items", response_model=list[AuthItemResponse])
async def list_auth_items(auth: AuthManager = Depends(get_auth_manager)):
    """All auth items, ordered by name."""
    return [AuthItemResponse.from_item(item) for item in await auth.get_all_roles()]


@router.get("/items/{name}/users", response_model=list[UserSummary])
async def list_users_with_item(
    name: str,
    auth: AuthManager = Depends(get_auth_manager),
):
    """Users directly assigned an auth item."""
    users = await auth.get_users_in_role(name)
    return [UserSummary.model_validate(u) for u in users]


@router.get("/me/items", response_model=UserItemsResponse)
async def get_my_items(
    user_id: UUID = Depends(get_current_user_id),
    auth: AuthManager = Depends(get_auth_manager),
):
    """Caller's direct assignments."""
    items = await auth.get_roles_for_user(user_id)
    if items is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return UserItemsResponse(user_id=user_id, items=sorted(items))


@router.get("/me/access/{name}", response_model=AccessResponse)
async def check_my_access(
    name: str,
    user_id: UUID = Depends(get_current_user_id),
    auth: AuthManager = Depends(get_auth_manager),
):
    """Whether the caller reaches an auth item through the role graph."""
    return AccessResponse(item=name, allowed=await auth.check_access(user_id, name))


@router.get("/users/{user_id}/items", response_model=UserItemsResponse)
async def get_user_items(
    user_id: UUID,
    auth: AuthManager = Depends(get_auth_manager),
):
    """A user's direct assignments."""
    items = await auth.get_roles_for_user(user_id)
    if items is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return UserItemsResponse(user_id=user_id, items=sorted(items))
