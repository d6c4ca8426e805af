"""
Category Entity Model

Registry of catalog categories. Rows are created on first use when the
classifier resolves a slug that does not exist yet, or by an administrator.

SAMPLE CATEGORY RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 3                                                         │
│ name             │ "Game"                                                    │
│ slug             │ "game"                                                    │
│ type             │ "game"                                                    │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.shared.models.base import Base, TimestampMixin


class Category(Base, TimestampMixin):
    """Catalog category with a unique slug."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    slug: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )

    # Free-form grouping, e.g. "game", "tool", "video"
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="general")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Category(id={self.id}, slug={self.slug})>"
