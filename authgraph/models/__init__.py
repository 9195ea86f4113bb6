"""
Database models.
"""

from .base import Base, TimestampMixin, UUIDMixin, StandardMixin
from .auth_item import AuthItem, AuthItemChild, AuthItemType
from .user import User, UserAssignment

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "StandardMixin",
    "AuthItem",
    "AuthItemChild",
    "AuthItemType",
    "User",
    "UserAssignment",
]
