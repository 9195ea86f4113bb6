"""
User and direct assignment models.

The user entity is owned by the surrounding application; this package
only needs an id to hang direct assignments on.
"""

from uuid import UUID
from sqlalchemy import ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, StandardMixin


class User(Base, StandardMixin):
    """User with a set of directly assigned auth item names."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    assignments: Mapped[list["UserAssignment"]] = relationship(
        "UserAssignment",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def auth_items(self) -> set[str]:
        """Directly assigned auth item names (not the resolved closure)."""
        return {a.item_name for a in self.assignments}

    def __repr__(self) -> str:
        return f"<User {self.username}>"


class UserAssignment(Base):
    """
    Direct grant of an auth item to a user.

    item_name is not a foreign key: assignment and item creation are not
    transactional with each other.
    """

    __tablename__ = "user_assignments"
    __table_args__ = (
        UniqueConstraint("user_id", "item_name", name="uq_user_assignment"),
    )

    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    item_name: Mapped[str] = mapped_column(String(255), primary_key=True, index=True)

    user: Mapped["User"] = relationship("User", back_populates="assignments")

    def __repr__(self) -> str:
        return f"<UserAssignment user={self.user_id} item={self.item_name}>"
