"""
AuthItem Store.

Holds the canonical set of roles and permissions and their child edges.
The store is strict: bad input raises. Lenient behavior lives in
AuthManager.
"""

from typing import Any

import structlog
from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError

from authgraph.exceptions import DuplicateName, InvalidName, ItemInUse, NotARole, NotFound
from authgraph.models.auth_item import AuthItem, AuthItemChild, AuthItemType
from authgraph.models.user import UserAssignment
from authgraph.rbac.resolver import AuthGraph

from .base import BaseRepository

logger = structlog.get_logger()


def clean_name(name: Any) -> str:
    """Return the trimmed name, or raise InvalidName if it is blank or not a string."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidName(name)
    return name.strip()


class AuthItemRepository(BaseRepository[AuthItem]):
    """Persistence for auth items and their children."""

    model = AuthItem

    async def find_by_name(self, name: str) -> AuthItem | None:
        return await self.get_one(name=name)

    async def get_all(self) -> list[AuthItem]:
        """All auth items, ordered by name."""
        return await self.all(order_by="name")

    async def is_assigned(self, name: str) -> bool:
        """True if any user holds name directly."""
        stmt = select(exists().where(UserAssignment.item_name == name))
        return bool(await self.db.scalar(stmt))

    async def create(self, name: Any, type: AuthItemType) -> AuthItem:
        """
        Create a role or permission.

        Raises:
            InvalidName: name is blank after trimming
            DuplicateName: an item with this name exists
        """
        name = clean_name(name)
        if await self.find_by_name(name) is not None:
            raise DuplicateName(name)

        item = AuthItem(name=name, type=type, children=[])
        self.db.add(item)
        try:
            await self.db.flush()
        except IntegrityError as e:
            # Lost a race with another process; the unique index decides
            raise DuplicateName(name) from e

        logger.info("auth_item.created", name=name, type=type.value)
        return item

    async def delete(self, name: str) -> None:
        """
        Delete an auth item.

        Child edges pointing at name from other roles are left in place.

        Assignments are checked first, so a name held by a user raises
        ItemInUse even when no item row exists for it.

        Raises:
            ItemInUse: a user is directly assigned name
            NotFound: no such item
        """
        if await self.is_assigned(name):
            raise ItemInUse(name)
        item = await self.find_by_name(name)
        if item is None:
            raise NotFound(name)

        await self.db.delete(item)
        await self.db.flush()
        logger.info("auth_item.deleted", name=name)

    async def add_child(self, parent_name: str, child_name: Any) -> AuthItem:
        """
        Add child_name to the parent's children (idempotent).

        The child is not required to exist.

        Raises:
            InvalidName: child_name is blank
            NotFound: parent does not exist
            NotARole: parent is a permission
        """
        child_name = clean_name(child_name)
        parent = await self.find_by_name(parent_name)
        if parent is None:
            raise NotFound(parent_name)
        if not parent.is_role:
            raise NotARole(parent_name)

        if child_name not in parent.child_names:
            parent.children.append(AuthItemChild(child_name=child_name))
            await self.db.flush()
            logger.info("auth_item.child_added", parent=parent_name, child=child_name)
        return parent

    async def remove_child(self, parent_name: str, child_name: str) -> AuthItem:
        """
        Remove child_name from the parent's children; no-op if absent.

        Raises:
            NotFound: parent does not exist
        """
        parent = await self.find_by_name(parent_name)
        if parent is None:
            raise NotFound(parent_name)

        for edge in list(parent.children):
            if edge.child_name == child_name:
                parent.children.remove(edge)
                await self.db.flush()
                logger.info("auth_item.child_removed", parent=parent_name, child=child_name)
                break
        return parent

    async def load_graph(self) -> AuthGraph:
        """Snapshot of every item and its children."""
        return AuthGraph.from_items(await self.all())
