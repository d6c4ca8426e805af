"""
ContentActivity Entity Model

Append-only log of plays and likes by signed-in users. Rows disappear with
their item or their user.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, Integer, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.shared.models.base import Base
from src.shared.models.enums import ActivityType


if TYPE_CHECKING:
    from src.shared.models.content_item import ContentItem


class ContentActivity(Base):
    """One interaction of a user with a content item."""

    __tablename__ = "content_activity"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    item_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("content_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    activity_type: Mapped[ActivityType] = mapped_column(SQLEnum(ActivityType), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    item: Mapped["ContentItem"] = relationship("ContentItem", back_populates="activities")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<ContentActivity(user_id={self.user_id}, item_id={self.item_id}, type={self.activity_type})>"
