"""
Auth item models - roles, permissions and their child edges.

A role may list child auth items by name. Child names are deliberately
not foreign keys: an edge may point at an item that does not exist (yet,
or any more), and the resolver treats such names as leaves.

Usage:
    role = AuthItem(name="admin", type=AuthItemType.ROLE)
    role.children.append(AuthItemChild(child_name="editDoc"))
"""

import enum
from uuid import UUID
from sqlalchemy import Enum, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, StandardMixin


class AuthItemType(str, enum.Enum):
    """Kind of auth item."""
    ROLE = "role"
    PERMISSION = "permission"


class AuthItem(Base, StandardMixin):
    """
    Role or permission, uniquely identified by name.

    Only roles carry children; permissions are terminal.
    """

    __tablename__ = "auth_items"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    type: Mapped[AuthItemType] = mapped_column(
        Enum(AuthItemType, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
    )

    children: Mapped[list["AuthItemChild"]] = relationship(
        "AuthItemChild",
        back_populates="parent",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def is_role(self) -> bool:
        return self.type == AuthItemType.ROLE

    @property
    def child_names(self) -> set[str]:
        """Names of the direct children of this item."""
        return {c.child_name for c in self.children}

    def __repr__(self) -> str:
        return f"<AuthItem {self.type.value}:{self.name}>"


class AuthItemChild(Base):
    """Edge from a role to a child auth item name."""

    __tablename__ = "auth_item_children"
    __table_args__ = (
        UniqueConstraint("parent_id", "child_name", name="uq_auth_item_child"),
    )

    parent_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("auth_items.id", ondelete="CASCADE"),
        primary_key=True,
    )
    child_name: Mapped[str] = mapped_column(String(255), primary_key=True, index=True)

    parent: Mapped["AuthItem"] = relationship("AuthItem", back_populates="children")

    def __repr__(self) -> str:
        return f"<AuthItemChild {self.child_name}>"
