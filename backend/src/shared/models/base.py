"""
Base Model Classes

The declarative base and the timestamp mixin shared by every Playhub model.

Model Hierarchy:
================
    Base                    ← SQLAlchemy declarative base
       │
       └── TimestampMixin   ← Automatic created_at/updated_at

Usage:
======
    from src.shared.models.base import Base, TimestampMixin

    class Category(Base, TimestampMixin):
        __tablename__ = "categories"
        id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
        slug: Mapped[str] = mapped_column(String(100), unique=True)
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Python dict and list annotations map to the portable JSON type so the
    same models run on PostgreSQL and on SQLite in tests.
    """

    type_annotation_map = {
        dict[str, Any]: JSON,
        list[str]: JSON,
    }


class TimestampMixin:
    """
    Mixin that adds automatic timestamp tracking to models.

    - created_at: Set by the database on INSERT
    - updated_at: Set on INSERT, refreshed by SQLAlchemy on UPDATE
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
