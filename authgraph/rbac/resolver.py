"""
Graph Resolver.

Expands a user's directly assigned auth item names into the full set of
names reachable through role children.

The traversal is iterative with an explicit work queue and a visited
set, so:
- diamond-shaped graphs expand each shared descendant once
- cyclic graphs terminate
- stack depth does not grow with the depth of the role hierarchy

Usage:
    graph = await auth_items.load_graph()
    names = resolve({"admin"}, graph)
    # frozenset({"admin", "management", "test"})
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from authgraph.models.auth_item import AuthItem, AuthItemType


@dataclass(frozen=True)
class GraphNode:
    """Immutable view of one auth item."""
    name: str
    type: AuthItemType
    children: frozenset[str] = frozenset()

    @property
    def is_role(self) -> bool:
        return self.type == AuthItemType.ROLE


@dataclass(frozen=True)
class AuthGraph:
    """
    Snapshot of every auth item and its child edges.

    Built once per resolution from a single query, so a traversal never
    observes a half-applied mutation.
    """
    nodes: Mapping[str, GraphNode] = field(default_factory=dict)

    @classmethod
    def from_items(cls, items: Iterable[AuthItem]) -> "AuthGraph":
        return cls(nodes={
            item.name: GraphNode(
                name=item.name,
                type=item.type,
                children=frozenset(item.child_names),
            )
            for item in items
        })

    @classmethod
    def from_edges(
        cls,
        roles: Mapping[str, Iterable[str]],
        permissions: Iterable[str] = (),
    ) -> "AuthGraph":
        """Build a graph from plain data, e.g. {"admin": ["editor"]}."""
        nodes = {
            name: GraphNode(name, AuthItemType.ROLE, frozenset(children))
            for name, children in roles.items()
        }
        for name in permissions:
            nodes.setdefault(name, GraphNode(name, AuthItemType.PERMISSION))
        return cls(nodes=nodes)

    def get(self, name: str) -> GraphNode | None:
        return self.nodes.get(name)

    def children_of(self, name: str) -> frozenset[str]:
        """Children to expand for name; empty for permissions and dangling names."""
        node = self.nodes.get(name)
        if node is None or not node.is_role:
            return frozenset()
        return node.children

    def __contains__(self, name: object) -> bool:
        return name in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)


def resolve(assigned_names: Iterable[str], graph: AuthGraph) -> frozenset[str]:
    """
    Return every auth item name reachable from assigned_names.

    The result includes the input names themselves. Names with no
    matching item are kept as leaves. Never raises for cyclic or
    dangling data.
    """
    visited: set[str] = set()
    queue = deque(assigned_names)

    while queue:
        name = queue.popleft()
        if name in visited:
            continue
        visited.add(name)
        for child in graph.children_of(name):
            if child not in visited:
                queue.append(child)

    return frozenset(visited)


def would_create_cycle(graph: AuthGraph, parent: str, child: str) -> bool:
    """True if adding the edge parent -> child lets parent reach itself."""
    if parent == child:
        return True
    return parent in resolve((child,), graph)
