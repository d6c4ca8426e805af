"""
AppSource Entity Model

Curated registry of remote sources that users can discover and import in
one click. Entries are not catalog items; importing one runs the normal
ingestion pipeline and creates a ContentItem.

SAMPLE APP_SOURCE RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 4                                                         │
│ title            │ "2048"                                                    │
│ source_url       │ "https://github.com/gabrielecirulli/2048"                 │
│ source_type      │ REPOSITORY                                                │
│ keywords         │ ["puzzle", "game", "numbers"]                             │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from typing import Optional

from sqlalchemy import Enum as SQLEnum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.shared.models.base import Base, TimestampMixin
from src.shared.models.enums import SourceType


class AppSource(Base, TimestampMixin):
    """Discovery registry entry."""

    __tablename__ = "app_sources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source_url: Mapped[str] = mapped_column(Text, nullable=False)

    source_type: Mapped[SourceType] = mapped_column(SQLEnum(SourceType), nullable=False)

    # Lowercased search terms
    keywords: Mapped[list[str]] = mapped_column(nullable=False, default=list)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<AppSource(id={self.id}, title={self.title}, type={self.source_type})>"
