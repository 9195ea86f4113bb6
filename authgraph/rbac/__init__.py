"""
Role/permission graph: resolver, access cache and the AuthManager API.

Import AuthManager from authgraph.rbac.service (or the package root);
this module only re-exports the dependency-free pieces so the
repositories can import the resolver without a cycle.
"""

from .resolver import AuthGraph, GraphNode, resolve, would_create_cycle
from .cache import AccessCache, access_cache

__all__ = [
    "AuthGraph",
    "GraphNode",
    "resolve",
    "would_create_cycle",
    "AccessCache",
    "access_cache",
]
