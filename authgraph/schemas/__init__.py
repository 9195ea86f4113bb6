"""
API schemas.
"""

from .authz import AccessResponse, AuthItemResponse, UserItemsResponse, UserSummary

__all__ = [
    "AccessResponse",
    "AuthItemResponse",
    "UserItemsResponse",
    "UserSummary",
]
