"""
Data access layer.
"""

from .base import BaseRepository
from .auth_items import AuthItemRepository, clean_name
from .assignments import AssignmentRepository

__all__ = [
    "BaseRepository",
    "AuthItemRepository",
    "AssignmentRepository",
    "clean_name",
]
