"""
User Entity Model

Represents a community member. Credentials live with the identity provider;
this row only carries the profile, capability flags and gamification state.

Model Hierarchy:
================
    User
       ├── content_items (ContentItem[])   - Submitted tools, games, videos, links
       ├── images (CommunityImage[])       - Uploaded community images
       ├── content_likes (ContentLike[])   - Likes given to content items
       ├── image_likes (ImageLike[])       - Likes given to images
       └── activities (ContentActivity[])  - Play/like history

SAMPLE USER RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 17                                                        │
│ email            │ "maker@example.com"                                       │
│ name             │ "Maker"                                                   │
│ is_admin         │ false                                                     │
│ xp_points        │ 1055                                                      │
│ level            │ 2                                                         │
│ total_uploads    │ 21                                                        │
│ total_likes      │ 1                                                         │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.shared.models.base import Base, TimestampMixin


if TYPE_CHECKING:
    from src.shared.models.activity import ContentActivity
    from src.shared.models.community_image import CommunityImage
    from src.shared.models.content_item import ContentItem
    from src.shared.models.likes import ContentLike, ImageLike


class User(Base, TimestampMixin):
    """
    User model.

    Gamification fields are only ever changed by single-row atomic UPDATEs
    in UserRepository; `level` is recomputed from `xp_points` each time.

    Attributes:
        id: Integer identifier
        email: Unique email address
        name: Display name
        is_admin: Administrator capability
        is_suspended: Suspended accounts cannot act
        xp_points: Accumulated experience points
        level: floor(xp_points / XP_PER_LEVEL) + 1
        total_uploads: Approved uploads credited to this user
        total_likes: Likes received from other users
    """

    __tablename__ = "users"

    # ═══════════════════════════════════════════════════════════════════════════
    # PRIMARY KEY
    # ═══════════════════════════════════════════════════════════════════════════

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ═══════════════════════════════════════════════════════════════════════════
    # PROFILE
    # ═══════════════════════════════════════════════════════════════════════════

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # ═══════════════════════════════════════════════════════════════════════════
    # CAPABILITIES
    # ═══════════════════════════════════════════════════════════════════════════

    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_suspended: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # ═══════════════════════════════════════════════════════════════════════════
    # GAMIFICATION
    # ═══════════════════════════════════════════════════════════════════════════

    xp_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    level: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    total_uploads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_likes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # ═══════════════════════════════════════════════════════════════════════════
    # RELATIONSHIPS
    # ═══════════════════════════════════════════════════════════════════════════

    content_items: Mapped[list["ContentItem"]] = relationship(
        "ContentItem",
        back_populates="owner",
        cascade="all, delete-orphan",
    )

    images: Mapped[list["CommunityImage"]] = relationship(
        "CommunityImage",
        back_populates="uploader",
        cascade="all, delete-orphan",
    )

    content_likes: Mapped[list["ContentLike"]] = relationship(
        "ContentLike",
        cascade="all, delete-orphan",
    )

    image_likes: Mapped[list["ImageLike"]] = relationship(
        "ImageLike",
        cascade="all, delete-orphan",
    )

    activities: Mapped[list["ContentActivity"]] = relationship(
        "ContentActivity",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<User(id={self.id}, email={self.email}, level={self.level})>"
