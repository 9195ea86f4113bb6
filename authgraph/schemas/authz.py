"""
Authorization schemas.
"""

from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator

from authgraph.models.auth_item import AuthItem, AuthItemType


class AuthItemResponse(BaseModel):
    """Auth item response schema."""
    model_config = ConfigDict(from_attributes=True)

    name: str
    type: AuthItemType
    children: list[str] = Field(default_factory=list)

    @field_validator("children", mode="before")
    @classmethod
    def child_names(cls, v):
        # ORM rows -> sorted names
        return sorted(getattr(c, "child_name", c) for c in v or [])

    @classmethod
    def from_item(cls, item: AuthItem) -> "AuthItemResponse":
        return cls.model_validate(item)


class UserItemsResponse(BaseModel):
    """Direct assignments of one user."""
    user_id: UUID
    items: list[str]


class UserSummary(BaseModel):
    """Minimal user representation."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str


class AccessResponse(BaseModel):
    """Result of an access check."""
    item: str
    allowed: bool
