"""
Ingestion Package

Everything between "a user handed us something" and "a validated bundle
sits in its own directory under the content root". No database access.

Modules:
========
- bundle       → ContentBundle descriptor and tree inventory
- sources      → Archive, Repository and URL-Scrape adapters
- validation   → Static safety gate
- classifier   → Keyword category scoring
- icons        → Icon lookup, placeholder thumbnails, source badges
- slugs        → Title + base-36 id slugs
- pipeline     → Allocate, fetch, validate, clean up on failure
"""

from src.shared.ingestion.bundle import BundleFile, ContentBundle, inventory_tree
from src.shared.ingestion.classifier import BUNDLE_CLASSIFIER, IMAGE_CLASSIFIER, KeywordClassifier
from src.shared.ingestion.icons import find_icon, placeholder_thumbnail, source_badge
from src.shared.ingestion.pipeline import IngestionPipeline
from src.shared.ingestion.slugs import build_slug, to_base36
from src.shared.ingestion.validation import BundleValidator, ValidationRules

__all__ = [
    "BundleFile",
    "ContentBundle",
    "inventory_tree",
    "BUNDLE_CLASSIFIER",
    "IMAGE_CLASSIFIER",
    "KeywordClassifier",
    "find_icon",
    "placeholder_thumbnail",
    "source_badge",
    "IngestionPipeline",
    "build_slug",
    "to_base36",
    "BundleValidator",
    "ValidationRules",
]
