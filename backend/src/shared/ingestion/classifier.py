"""
Keyword Classifier

Derives a category slug from free text by counting keyword occurrences.

Scoring:
========
    text  = lower(title + " " + description + " " + " ".join(filenames))
    score = sum(text.count(keyword) for keyword in table[category])

The category with the strictly highest score wins. Ties keep the category
defined first in the table. A zero score falls back to the default slug.

Example:
========
    BUNDLE_CLASSIFIER.classify("Space Puzzle Game", "")   # -> "game"
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional


BUNDLE_CATEGORIES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "game": (
        "game", "play", "puzzle", "quiz", "match", "racing", "adventure",
        "arcade", "shooter", "strategy", "memory", "cards",
    ),
    "tool": (
        "tool", "calculator", "converter", "generator", "builder",
        "editor", "utility", "helper",
    ),
    "tutorial": (
        "tutorial", "guide", "demo", "example", "walkthrough", "learn", "course",
    ),
    "productivity": (
        "todo", "notes", "timer", "planner", "organizer", "tracker",
    ),
})

IMAGE_CATEGORIES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "space": ("space", "galaxy", "planet", "star", "nebula", "moon", "cosmos", "astronaut"),
    "india": ("india", "indian", "delhi", "mumbai", "taj", "diwali", "holi", "rangoli"),
    "nature": ("nature", "forest", "mountain", "river", "ocean", "flower", "tree", "sunset", "landscape"),
    "tech": ("tech", "computer", "code", "robot", "circuit", "cyber", "digital", "gadget"),
    "abstract": ("abstract", "pattern", "geometric", "texture", "gradient", "fractal"),
    "people": ("people", "portrait", "person", "face", "crowd", "family", "child"),
    "food": ("food", "dish", "meal", "fruit", "dessert", "cooking", "spice"),
    "architecture": ("architecture", "building", "temple", "bridge", "tower", "city", "skyline"),
    "animals": ("animal", "dog", "cat", "bird", "tiger", "elephant", "wildlife"),
    "travel": ("travel", "journey", "road", "beach", "tourism", "vacation"),
})

DEFAULT_CATEGORY = "general"


class KeywordClassifier:
    """
    Immutable keyword table plus the scoring rule.

    Built once at import time; instances hold no mutable state and are
    safe to share between requests.
    """

    def __init__(
        self,
        table: Mapping[str, tuple[str, ...]],
        default: str = DEFAULT_CATEGORY,
    ) -> None:
        self.table = table
        self.default = default

    def score(self, text: str) -> dict[str, int]:
        """Occurrence count per category over already-lowercased text."""
        return {
            category: sum(text.count(keyword) for keyword in keywords)
            for category, keywords in self.table.items()
        }

    def classify(
        self,
        title: str,
        description: Optional[str] = None,
        filenames: Optional[Iterable[str]] = None,
    ) -> str:
        """Return the winning category slug, or the default when nothing matches."""
        parts = [title or "", description or ""]
        if filenames:
            parts.extend(filenames)
        text = " ".join(parts).lower()

        best, best_score = self.default, 0
        for category, value in self.score(text).items():
            if value > best_score:
                best, best_score = category, value
        return best


BUNDLE_CLASSIFIER = KeywordClassifier(BUNDLE_CATEGORIES)
IMAGE_CLASSIFIER = KeywordClassifier(IMAGE_CATEGORIES)
