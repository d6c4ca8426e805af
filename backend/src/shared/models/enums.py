"""
Enums used across the application.
"""

from enum import Enum


class ModerationStatus(str, Enum):
    """
    Moderation state of a content item or community image.

    PENDING → APPROVED and PENDING → REJECTED are the only transitions.
    Both end states are terminal for status; visibility is tracked separately.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ContentType(str, Enum):
    """What a content item points at."""

    BUNDLE = "bundle"
    VIDEO = "video"
    LINK = "link"


class ImportMethod(str, Enum):
    """How a bundle reached the content root."""

    ARCHIVE = "archive"
    REPOSITORY = "repository"
    URL_SCRAPE = "url_scrape"


class SourceType(str, Enum):
    """Kind of remote source recorded in the discovery registry."""

    REPOSITORY = "repository"
    URL = "url"


class Orientation(str, Enum):
    """Aspect class of a community image."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    SQUARE = "square"


class ActivityType(str, Enum):
    """User interaction recorded against a content item."""

    PLAY = "play"
    LIKE = "like"
