"""
ContentItem Entity Model

A published tool, game, video or external link in the community catalog.

Exactly one of `file_url` (a path into the content root) or `external_link`
is meaningful for a given item. Public read paths only ever return rows with
status = APPROVED and visible not false; the two flags are independent.

Lifecycle:
==========
1. Moderation router inserts the row (status APPROVED or PENDING by size)
2. Slug is assigned from title + base-36 id right after the insert
3. Administrators move PENDING → APPROVED / REJECTED and toggle flags
4. Deletion removes the backing file tree first, then the row

SAMPLE CONTENT_ITEM RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 100                                                       │
│ title            │ "My Cool Tool!"                                           │
│ slug             │ "my-cool-tool-2s"                                         │
│ content_type     │ BUNDLE                                                    │
│ category         │ "tool"                                                    │
│ file_url         │ "/uploads/community-apps/3f2a.../index.html"              │
│ status           │ APPROVED                                                  │
│ import_method    │ REPOSITORY                                                │
│ source_identity  │ "https://github.com/octo/cool-tool"                       │
│ bundle_size      │ 524288                                                    │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.shared.models.base import Base, TimestampMixin
from src.shared.models.enums import ContentType, ImportMethod, ModerationStatus


if TYPE_CHECKING:
    from src.shared.models.activity import ContentActivity
    from src.shared.models.category import Category
    from src.shared.models.likes import ContentLike
    from src.shared.models.user import User


class ContentItem(Base, TimestampMixin):
    """
    ContentItem model.

    Attributes:
        id: Integer identifier, encoded in the slug
        user_id: Owner
        content_type: BUNDLE, VIDEO or LINK
        category: Denormalized category slug
        category_id: Foreign key into the category registry
        file_url: Published URL of the entry document or video file
        external_link: Target of a LINK item
        status: Moderation state
        visible / featured / rank_order: Administrator-controlled presentation
        source_identity: Normalized remote reference or archive fingerprint
    """

    __tablename__ = "content_items"

    # ═══════════════════════════════════════════════════════════════════════════
    # PRIMARY KEY & OWNER
    # ═══════════════════════════════════════════════════════════════════════════

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
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

    content_type: Mapped[ContentType] = mapped_column(
        SQLEnum(ContentType),
        nullable=False,
        default=ContentType.BUNDLE,
    )

    category: Mapped[str] = mapped_column(String(100), nullable=False, default="general")

    category_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # PUBLISHED ASSETS
    # ═══════════════════════════════════════════════════════════════════════════

    file_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    external_link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    thumbnail_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    bundle_size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # ═══════════════════════════════════════════════════════════════════════════
    # MODERATION
    # ═══════════════════════════════════════════════════════════════════════════

    status: Mapped[ModerationStatus] = mapped_column(
        SQLEnum(ModerationStatus),
        nullable=False,
        default=ModerationStatus.PENDING,
        index=True,
    )

    # NULL is treated as visible
    visible: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=True)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rank_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # ═══════════════════════════════════════════════════════════════════════════
    # COUNTERS
    # ═══════════════════════════════════════════════════════════════════════════

    play_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    likes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    trending_score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    # ═══════════════════════════════════════════════════════════════════════════
    # IDENTITY & PROVENANCE
    # ═══════════════════════════════════════════════════════════════════════════

    slug: Mapped[Optional[str]] = mapped_column(
        String(100),
        unique=True,
        nullable=True,
        index=True,
    )

    import_method: Mapped[Optional[ImportMethod]] = mapped_column(
        SQLEnum(ImportMethod),
        nullable=True,
    )

    source_identity: Mapped[Optional[str]] = mapped_column(
        String(512),
        unique=True,
        nullable=True,
        index=True,
    )

    agreement_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    agreement_timestamp: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # RELATIONSHIPS
    # ═══════════════════════════════════════════════════════════════════════════

    owner: Mapped["User"] = relationship("User", back_populates="content_items")

    category_ref: Mapped[Optional["Category"]] = relationship("Category")

    like_records: Mapped[list["ContentLike"]] = relationship(
        "ContentLike",
        back_populates="item",
        cascade="all, delete-orphan",
    )

    activities: Mapped[list["ContentActivity"]] = relationship(
        "ContentActivity",
        back_populates="item",
        cascade="all, delete-orphan",
    )

    @property
    def is_public(self) -> bool:
        """Approved and not hidden."""
        return self.status == ModerationStatus.APPROVED and self.visible is not False

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<ContentItem(id={self.id}, slug={self.slug}, status={self.status})>"
