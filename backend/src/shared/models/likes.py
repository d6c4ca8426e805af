"""
Like Record Models

Junction tables recording which user liked which item. The composite
primary key is the only thing that prevents a like (and its XP award)
from being counted twice, so the ledger always inserts first and treats
an IntegrityError as "already liked".

SAMPLE CONTENT_LIKE RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ user_id          │ 17                                                        │
│ item_id          │ 100                                                       │
│ created_at       │ 2024-01-15T10:30:00Z                                      │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.shared.models.base import Base


if TYPE_CHECKING:
    from src.shared.models.community_image import CommunityImage
    from src.shared.models.content_item import ContentItem


class ContentLike(Base):
    """A user's like on a content item. (user_id, item_id) is unique."""

    __tablename__ = "content_likes"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    item_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("content_items.id", ondelete="CASCADE"),
        primary_key=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    item: Mapped["ContentItem"] = relationship("ContentItem", back_populates="like_records")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<ContentLike(user_id={self.user_id}, item_id={self.item_id})>"


class ImageLike(Base):
    """A user's like on a community image. (user_id, image_id) is unique."""

    __tablename__ = "image_likes"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    image_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("community_images.id", ondelete="CASCADE"),
        primary_key=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    image: Mapped["CommunityImage"] = relationship("CommunityImage", back_populates="like_records")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<ImageLike(user_id={self.user_id}, image_id={self.image_id})>"
