"""
Tests for the auth item store.
"""

import pytest

from authgraph.exceptions import DuplicateName, InvalidName, ItemInUse, NotARole, NotFound
from authgraph.models.auth_item import AuthItemType
from authgraph.models.user import UserAssignment
from authgraph.repositories.assignments import AssignmentRepository
from authgraph.repositories.auth_items import AuthItemRepository, clean_name


@pytest.fixture
def repo(db) -> AuthItemRepository:
    return AuthItemRepository(db)


def test_clean_name():
    assert clean_name("  admin ") == "admin"
    for bad in ("", "   ", None, 42):
        with pytest.raises(InvalidName):
            clean_name(bad)


@pytest.mark.asyncio
async def test_create_returns_item_without_children(repo):
    item = await repo.create(" admin ", AuthItemType.ROLE)

    assert item.name == "admin"
    assert item.type == AuthItemType.ROLE
    assert item.child_names == set()
    assert (await repo.find_by_name("admin")) is item


@pytest.mark.asyncio
async def test_create_blank_name_raises(repo):
    with pytest.raises(InvalidName):
        await repo.create("  ", AuthItemType.ROLE)
    assert await repo.count() == 0


@pytest.mark.asyncio
async def test_create_duplicate_raises(repo):
    await repo.create("admin", AuthItemType.ROLE)

    with pytest.raises(DuplicateName):
        await repo.create("admin ", AuthItemType.PERMISSION)
    assert await repo.count() == 1


@pytest.mark.asyncio
async def test_get_all_ordered_by_name(repo):
    for name in ("sales", "admin", "editor"):
        await repo.create(name, AuthItemType.ROLE)

    assert [i.name for i in await repo.get_all()] == ["admin", "editor", "sales"]


@pytest.mark.asyncio
async def test_delete_missing_raises(repo):
    with pytest.raises(NotFound):
        await repo.delete("ghost")


@pytest.mark.asyncio
async def test_delete_in_use_raises(db, repo, users):
    await repo.create("admin", AuthItemType.ROLE)
    await AssignmentRepository(db, repo).add_to_roles(users["eve"].id, "admin")

    with pytest.raises(ItemInUse):
        await repo.delete("admin")
    assert await repo.find_by_name("admin") is not None


@pytest.mark.asyncio
async def test_delete_held_name_without_item_raises_in_use(db, repo, users):
    """A dangling assignment still blocks the delete."""
    db.add(UserAssignment(user_id=users["eve"].id, item_name="ghost"))
    await db.flush()

    with pytest.raises(ItemInUse):
        await repo.delete("ghost")


@pytest.mark.asyncio
async def test_add_child_is_idempotent(repo):
    await repo.create("admin", AuthItemType.ROLE)

    await repo.add_child("admin", "editDoc")
    parent = await repo.add_child("admin", "editDoc")

    assert parent.child_names == {"editDoc"}
    assert len(parent.children) == 1


@pytest.mark.asyncio
async def test_add_child_missing_parent_raises(repo):
    with pytest.raises(NotFound):
        await repo.add_child("ghost", "editDoc")


@pytest.mark.asyncio
async def test_add_child_to_permission_raises(repo):
    await repo.create("editDoc", AuthItemType.PERMISSION)
    with pytest.raises(NotARole):
        await repo.add_child("editDoc", "other")


@pytest.mark.asyncio
async def test_remove_child(repo):
    await repo.create("admin", AuthItemType.ROLE)
    await repo.add_child("admin", "editDoc")
    await repo.add_child("admin", "readDoc")

    parent = await repo.remove_child("admin", "editDoc")
    await repo.remove_child("admin", "notThere")

    assert parent.child_names == {"readDoc"}


@pytest.mark.asyncio
async def test_delete_leaves_dangling_child_edges(repo):
    await repo.create("admin", AuthItemType.ROLE)
    await repo.create("editDoc", AuthItemType.PERMISSION)
    await repo.add_child("admin", "editDoc")

    await repo.delete("editDoc")

    graph = await repo.load_graph()
    assert "editDoc" not in graph
    assert graph.children_of("admin") == {"editDoc"}


@pytest.mark.asyncio
async def test_load_graph(repo):
    await repo.create("admin", AuthItemType.ROLE)
    await repo.create("management", AuthItemType.ROLE)
    await repo.create("test", AuthItemType.PERMISSION)
    await repo.add_child("admin", "management")
    await repo.add_child("management", "test")

    graph = await repo.load_graph()

    assert len(graph) == 3
    assert graph.children_of("admin") == {"management"}
    assert graph.get("test").type == AuthItemType.PERMISSION
