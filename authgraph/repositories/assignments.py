"""
Assignment Store.

Holds, per user, the set of directly assigned auth item names.
"""

from typing import Any, Iterable
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from authgraph.exceptions import InvalidName, MissingRolesParam, MissingUsersParam
from authgraph.models.auth_item import AuthItemType
from authgraph.models.user import User, UserAssignment

from .auth_items import AuthItemRepository, clean_name
from .base import BaseRepository

logger = structlog.get_logger()


def as_list(value: Any) -> list:
    """Wrap a single id/name in a list; pass other iterables through."""
    if value is None:
        return []
    if isinstance(value, (str, UUID)):
        return [value]
    return list(value)


def clean_names(names: Iterable[Any]) -> list[str]:
    """Trim names, dropping blank and non-string entries, keeping order."""
    cleaned: list[str] = []
    for name in names:
        try:
            name = clean_name(name)
        except InvalidName:
            continue
        if name not in cleaned:
            cleaned.append(name)
    return cleaned


class AssignmentRepository(BaseRepository[User]):
    """Direct user -> auth item assignments."""

    model = User

    def __init__(self, db: AsyncSession, auth_items: AuthItemRepository | None = None):
        super().__init__(db)
        self.auth_items = auth_items or AuthItemRepository(db)

    async def get_user(self, user_id: UUID | str) -> User | None:
        return await self.get_by_id(user_id)

    async def get_assigned(self, user_id: UUID | str) -> set[str] | None:
        """
        Directly assigned names for a user.

        Returns None when the user does not exist, an empty set when the
        user exists with no assignments.
        """
        user = await self.get_user(user_id)
        if user is None:
            return None
        return user.auth_items

    def _validate_batch(self, user_ids: Any, role_names: Any) -> tuple[list, list[str]]:
        if not user_ids:
            raise MissingUsersParam()
        if not role_names:
            raise MissingRolesParam()
        return as_list(user_ids), clean_names(as_list(role_names))

    async def add_to_roles(self, user_ids: Any, role_names: Any) -> list[User]:
        """
        Add every user to every role, creating missing roles first.

        Unknown user ids are skipped. Re-applying is a no-op.

        Raises:
            MissingUsersParam / MissingRolesParam: argument empty or None
        """
        user_ids, names = self._validate_batch(user_ids, role_names)
        if not names:
            return []

        existing = {item.name for item in await self.auth_items.get_all()}
        for name in names:
            if name not in existing:
                await self.auth_items.create(name, AuthItemType.ROLE)

        users = await self.get_by_ids(user_ids)
        if len(users) < len(set(map(str, user_ids))):
            logger.debug("assignment.unknown_users_skipped", requested=len(user_ids), found=len(users))

        for user in users:
            held = user.auth_items
            for name in names:
                if name not in held:
                    user.assignments.append(UserAssignment(item_name=name))
        await self.db.flush()

        logger.info(
            "assignment.added",
            users=[str(u.id) for u in users],
            roles=names,
        )
        return users

    async def remove_from_roles(self, user_ids: Any, role_names: Any) -> list[User]:
        """
        Remove every role from every user; absent memberships are ignored.

        Raises:
            MissingUsersParam / MissingRolesParam: argument empty or None
        """
        user_ids, names = self._validate_batch(user_ids, role_names)
        if not names:
            return []

        users = await self.get_by_ids(user_ids)
        for user in users:
            for assignment in list(user.assignments):
                if assignment.item_name in names:
                    user.assignments.remove(assignment)
        await self.db.flush()

        logger.info(
            "assignment.removed",
            users=[str(u.id) for u in users],
            roles=names,
        )
        return users

    async def get_users_with_item(self, name: str) -> list[User]:
        """Users holding name directly (not through a role)."""
        stmt = (
            select(User)
            .join(UserAssignment, UserAssignment.user_id == User.id)
            .where(UserAssignment.item_name == name)
            .order_by(User.username)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().unique().all())
