from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

# Map intent flags -> lower-case substrings that switch them on
_FLAG_KEYWORDS: Dict[str, Sequence[str]] = {
    "anime": ("anime", "shonen", "isekai", "slice of life"),
    "comedy": ("comedy", "funny", "humour", "humor", "laugh", "satire"),
    "horror": ("horror", "scary", "slasher", "haunting", "ghost", "demon"),
    "mystery": ("mystery", "detective", "whodunit", "investigation", "case"),
    "trippy": (
        "trippy",
        "psychedelic",
        "surreal",
        "mind-bending",
        "mind bending",
        "weird",
        "acid",
    ),
    "underrated": (
        "underrated",
        "hidden gem",
        "hidden gems",
        "gem",
        "gems",
        "under the radar",
    ),
    "bad_movie": (
        "bad movie",
        "so bad",
        "trash",
        "terrible",
        "awful",
        "guilty pleasure",
    ),
}

GENRE_FLAGS = ("anime", "comedy", "horror", "mystery")


class IntentSignature(BaseModel):
    """
    Fixed set of boolean flags describing what the user asked for.

    Derived purely from the query text; any combination of flags may be set.
    """

    model_config = ConfigDict(frozen=True)

    anime: bool = False
    comedy: bool = False
    horror: bool = False
    mystery: bool = False
    trippy: bool = False
    underrated: bool = False
    bad_movie: bool = False

    def active_flags(self) -> List[str]:
        return [name for name in _FLAG_KEYWORDS if getattr(self, name)]

    def single_genre(self) -> str | None:
        """Return the genre flag when it is the only genre ask and no mode is set."""
        if self.underrated or self.bad_movie:
            return None
        genres = [flag for flag in GENRE_FLAGS if getattr(self, flag)]
        if len(genres) != 1:
            return None
        return genres[0]

    def mode(self) -> str:
        if self.underrated:
            return "underrated"
        if self.bad_movie:
            return "bad_movie"
        genre = self.single_genre()
        if genre:
            return f"genre:{genre}"
        return "mixed"


def parse_intent(query: str | None) -> IntentSignature:
    if not query:
        return IntentSignature()

    normalized = query.lower()
    flags = {
        name: any(keyword in normalized for keyword in keywords)
        for name, keywords in _FLAG_KEYWORDS.items()
    }
    signature = IntentSignature(**flags)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Parsed intent for %r -> %s", query, signature.active_flags() or "none"
        )
    return signature
