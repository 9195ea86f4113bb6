"""
AuthManager - the public authorization API.

Usage:
    auth = AuthManager(db)

    await auth.create_role("admin")
    await auth.create_permission("editDoc")
    await auth.add_item_child("admin", "editDoc")
    await auth.add_users_to_roles(user.id, ["admin"])

    await auth.check_access(user.id, "editDoc")     # True (through admin)
    await auth.user_is_in_role(user.id, "editDoc")  # False (direct only)

Validation modes:
    Lenient (default) keeps the historical behavior: blank names on
    create_* and delete_auth_item, and missing items on delete/add-child,
    are ignored and return None/False. Strict mode raises InvalidName /
    NotFound instead. ItemInUse, DuplicateName, CycleDetected and missing
    batch arguments always raise.

Concurrency:
    Every mutation runs under one write lock per event loop, so two
    concurrent create_role("x") calls give exactly one DuplicateName.
    Access checks resolve against a graph snapshot taken in one query.
"""

import asyncio
import weakref
from dataclasses import dataclass
from typing import Any, Iterable, Protocol
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from authgraph.core.config import settings
from authgraph.exceptions import CycleDetected, InvalidName, NotFound
from authgraph.models.auth_item import AuthItem, AuthItemType
from authgraph.models.user import User
from authgraph.repositories.assignments import AssignmentRepository, as_list
from authgraph.repositories.auth_items import AuthItemRepository, clean_name

from .cache import AccessCache, access_cache
from .resolver import would_create_cycle

logger = structlog.get_logger()

_write_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = (
    weakref.WeakKeyDictionary()
)


def write_lock() -> asyncio.Lock:
    """Process-wide mutation lock for the running event loop."""
    loop = asyncio.get_running_loop()
    lock = _write_locks.get(loop)
    if lock is None:
        lock = _write_locks[loop] = asyncio.Lock()
    return lock


class Assignee(Protocol):
    """Anything with an id and a loaded set of direct auth item names."""

    id: Any

    @property
    def auth_items(self) -> Iterable[str] | None: ...


@dataclass(frozen=True)
class Subject:
    """A user resolved at the API boundary."""
    id: Any
    items: frozenset[str]


UserRef = Assignee | UUID | str | None


class AuthManager:
    """
    Role/permission graph operations for one database session.

    Args:
        db: Async session used by both stores
        strict: Raise on blank names / missing items instead of ignoring them
        allow_cycles: Accept child edges that close a cycle
        invalidate_on_write: Drop cached access sets from mutation paths
        cache: Access cache (defaults to the process-wide instance)
    """

    def __init__(
        self,
        db: AsyncSession,
        strict: bool | None = None,
        allow_cycles: bool | None = None,
        invalidate_on_write: bool | None = None,
        cache: AccessCache | None = None,
    ):
        self.db = db
        self.auth_items = AuthItemRepository(db)
        self.assignments = AssignmentRepository(db, self.auth_items)
        self.cache = cache if cache is not None else access_cache

        authz = settings.authz
        self.strict = authz.strict if strict is None else strict
        self.allow_cycles = authz.allow_cycles if allow_cycles is None else allow_cycles
        self.invalidate_on_write = (
            authz.invalidate_on_write if invalidate_on_write is None else invalidate_on_write
        )

    # ============================================================
    # BOUNDARY
    # ============================================================

    async def resolve_subject(self, user: UserRef) -> Subject | None:
        """Turn a user id or user-like object into a Subject, or None if unknown."""
        if user is None:
            return None

        if isinstance(user, (str, UUID)):
            record = await self.assignments.get_user(user)
            if record is None:
                return None
            return Subject(id=record.id, items=frozenset(record.auth_items))

        items = getattr(user, "auth_items", None)
        if items is None:
            return None
        return Subject(id=getattr(user, "id", None), items=frozenset(items))

    def _ignore(self, exc: Exception, operation: str) -> None:
        """Re-raise in strict mode; log and swallow in lenient mode."""
        if self.strict:
            raise exc
        logger.warning("authz.ignored", operation=operation, reason=str(exc))

    def _invalidate_users(self, users: Iterable[User]) -> None:
        if self.invalidate_on_write:
            for user in users:
                self.cache.invalidate(user.id)

    def _invalidate_all(self) -> None:
        if self.invalidate_on_write:
            self.cache.clear()

    # ============================================================
    # ACCESS CHECKS
    # ============================================================

    async def get_permissions_for_user(self, user: UserRef) -> frozenset[str]:
        """Every auth item name the user holds, directly or through roles."""
        subject = await self.resolve_subject(user)
        if subject is None:
            return frozenset()
        return await self.cache.get_or_compute(
            subject.id,
            subject.items,
            self.auth_items.load_graph,
        )

    async def check_access(self, user: UserRef, item_name: str) -> bool:
        """True if item_name is in the resolved closure of the user's items."""
        subject = await self.resolve_subject(user)
        if subject is None:
            return False
        # Direct grants need no graph
        if item_name in subject.items:
            return True
        closure = await self.cache.get_or_compute(
            subject.id,
            subject.items,
            self.auth_items.load_graph,
        )
        return item_name in closure

    async def user_is_in_role(self, user: UserRef, roles: str | Iterable[str]) -> bool:
        """
        True if the user is directly assigned any of roles.

        The role hierarchy is not consulted; use check_access for that.
        """
        subject = await self.resolve_subject(user)
        if subject is None:
            return False
        return any(role in subject.items for role in as_list(roles))

    async def user_has_permission(
        self,
        user: UserRef,
        permissions: str | Iterable[str],
    ) -> bool:
        """True if the user is directly assigned any of permissions."""
        return await self.user_is_in_role(user, permissions)

    # ============================================================
    # QUERIES
    # ============================================================

    async def get_roles_for_user(self, user_id: UUID | str) -> set[str] | None:
        """Direct assignments of a user, or None if the user does not exist."""
        return await self.assignments.get_assigned(user_id)

    async def get_all_roles(self) -> list[AuthItem]:
        """All auth items ordered by name."""
        return await self.auth_items.get_all()

    async def get_users_in_role(self, name: str) -> list[User]:
        """Users holding name directly."""
        return await self.assignments.get_users_with_item(name)

    # ============================================================
    # AUTH ITEM MUTATIONS
    # ============================================================

    async def _create(self, name: Any, type: AuthItemType) -> AuthItem | None:
        async with write_lock():
            try:
                return await self.auth_items.create(name, type)
            except InvalidName as e:
                self._ignore(e, f"create_{type.value}")
                return None

    async def create_role(self, name: Any) -> AuthItem | None:
        """
        Create a role; surrounding whitespace is trimmed.

        Returns None for a blank name in lenient mode.

        Raises:
            DuplicateName: the name is taken
            InvalidName: blank name, strict mode only
        """
        return await self._create(name, AuthItemType.ROLE)

    async def create_permission(self, name: Any) -> AuthItem | None:
        """Create a permission; same contract as create_role."""
        return await self._create(name, AuthItemType.PERMISSION)

    async def delete_auth_item(self, name: str) -> bool:
        """
        Delete an auth item.

        Child edges naming it in other roles are left dangling.

        Returns:
            True if an item was removed

        Raises:
            ItemInUse: a user is directly assigned name
            InvalidName / NotFound: strict mode only
        """
        async with write_lock():
            try:
                await self.auth_items.delete(clean_name(name))
            except (InvalidName, NotFound) as e:
                self._ignore(e, "delete_auth_item")
                return False

        self._invalidate_all()
        return True

    async def add_item_child(self, parent: str, child: str) -> bool:
        """
        Add child to parent's children.

        Returns:
            True if the edge exists afterwards

        Raises:
            CycleDetected: the edge would let parent reach itself
            NotARole: parent is a permission
            InvalidName / NotFound: strict mode only
        """
        async with write_lock():
            graph = await self.auth_items.load_graph()
            if parent not in graph:
                self._ignore(NotFound(parent), "add_item_child")
                return False
            if not self.allow_cycles and isinstance(child, str) and would_create_cycle(
                graph, parent, child.strip()
            ):
                raise CycleDetected(parent, child.strip())
            try:
                await self.auth_items.add_child(parent, child)
            except InvalidName as e:
                self._ignore(e, "add_item_child")
                return False

        self._invalidate_all()
        return True

    async def remove_item_child(self, parent: str, child: str) -> bool:
        """Remove child from parent's children; False if parent is missing (lenient)."""
        async with write_lock():
            try:
                await self.auth_items.remove_child(parent, child)
            except NotFound as e:
                self._ignore(e, "remove_item_child")
                return False

        self._invalidate_all()
        return True

    # ============================================================
    # ASSIGNMENTS
    # ============================================================

    async def add_users_to_roles(self, users: Any, roles: Any) -> list[User]:
        """
        Directly assign roles to users, creating missing roles.

        Raises:
            MissingUsersParam / MissingRolesParam
        """
        async with write_lock():
            updated = await self.assignments.add_to_roles(users, roles)
        self._invalidate_users(updated)
        return updated

    async def remove_users_from_roles(self, users: Any, roles: Any) -> list[User]:
        """
        Remove direct role assignments from users.

        Raises:
            MissingUsersParam / MissingRolesParam
        """
        async with write_lock():
            updated = await self.assignments.remove_from_roles(users, roles)
        self._invalidate_users(updated)
        return updated
