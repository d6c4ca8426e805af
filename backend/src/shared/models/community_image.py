"""
CommunityImage Entity Model

An uploaded image in the community image marketplace. Follows the same
status/visible rules as ContentItem: uploads start PENDING and are public
only once APPROVED and not hidden.

SAMPLE COMMUNITY_IMAGE RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 12                                                        │
│ title            │ "Saturn at dusk"                                          │
│ slug             │ "saturn-at-dusk-c"                                        │
│ image_path       │ "/community-images/9b1c.../original.webp"                 │
│ thumbnail_path   │ "/community-images/9b1c.../thumb.webp"                    │
│ width x height   │ 1920 x 1080                                               │
│ orientation      │ LANDSCAPE                                                 │
│ dominant_color   │ "#1d2a44"                                                 │
│ status           │ PENDING                                                   │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Enum as SQLEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.shared.models.base import Base, TimestampMixin
from src.shared.models.enums import ModerationStatus, Orientation


if TYPE_CHECKING:
    from src.shared.models.likes import ImageLike
    from src.shared.models.user import User


class CommunityImage(Base, TimestampMixin):
    """CommunityImage model."""

    __tablename__ = "community_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    uploader_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # DESCRIPTION
    # ═══════════════════════════════════════════════════════════════════════════

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="general")
    creator_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    slug: Mapped[Optional[str]] = mapped_column(
        String(100),
        unique=True,
        nullable=True,
        index=True,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # FILE METADATA
    # ═══════════════════════════════════════════════════════════════════════════

    image_path: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail_path: Mapped[str] = mapped_column(Text, nullable=False)
    width: Mapped[int] = mapped_column(Integer, nullable=False)
    height: Mapped[int] = mapped_column(Integer, nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)

    orientation: Mapped[Orientation] = mapped_column(
        SQLEnum(Orientation),
        nullable=False,
    )

    dominant_color: Mapped[str] = mapped_column(String(7), nullable=False, default="#808080")

    # ═══════════════════════════════════════════════════════════════════════════
    # MODERATION
    # ═══════════════════════════════════════════════════════════════════════════

    status: Mapped[ModerationStatus] = mapped_column(
        SQLEnum(ModerationStatus),
        nullable=False,
        default=ModerationStatus.PENDING,
        index=True,
    )

    visible: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=True)

    # ═══════════════════════════════════════════════════════════════════════════
    # COUNTERS
    # ═══════════════════════════════════════════════════════════════════════════

    likes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    downloads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # ═══════════════════════════════════════════════════════════════════════════
    # RELATIONSHIPS
    # ═══════════════════════════════════════════════════════════════════════════

    uploader: Mapped["User"] = relationship("User", back_populates="images")

    like_records: Mapped[list["ImageLike"]] = relationship(
        "ImageLike",
        back_populates="image",
        cascade="all, delete-orphan",
    )

    @property
    def is_public(self) -> bool:
        """Approved and not hidden."""
        return self.status == ModerationStatus.APPROVED and self.visible is not False

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<CommunityImage(id={self.id}, slug={self.slug}, status={self.status})>"
