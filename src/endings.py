#!/usr/bin/env python3
"""
Back-cover text for a story's ending type.

Maps free-text ending tags to a display label and a quote pool.
"""

import random
from dataclasses import dataclass

from config import LAYOUT_FORMAT

DEFAULT_LABEL = "A Tale Complete"

ENDING_LABELS = {
    "triumph": "A Triumphant Tale",
    "bittersweet": "A Bittersweet Journey",
    "mystery": "A Mysterious Conclusion",
    "tragedy": "A Poignant Story",
    "comedy": "A Joyful Adventure",
}

ENDING_QUOTES = {
    "triumph": (
        "And so the brave heart found its way home, carrying light for all who would follow.",
        "In the end, courage was not the absence of fear, but the triumph over it.",
        "Some stories end not with a period, but with a door opening to new adventures.",
    ),
    "bittersweet": (
        "Not all endings are happy, but all endings teach us something precious.",
        "The sweetest victories are those earned through tears.",
        "And though the path was hard, the journey made all the difference.",
    ),
    "mystery": (
        "Some questions are better left unanswered, for in mystery lies magic.",
        "The end is but another beginning in disguise.",
        "What remains unknown keeps the wonder alive.",
    ),
    "default": (
        "Every ending is a new beginning waiting to unfold.",
        "And they carried this story in their heart, forever.",
        "Thus concludes one tale, as countless others await.",
    ),
}


@dataclass(frozen=True)
class BackCoverText:
    heading: str
    label: str
    quote: str


def _normalize(ending_type: str | None) -> str:
    return (ending_type or "").strip().lower()


def ending_label(ending_type: str | None) -> str:
    """Display label for an ending tag, 'A Tale Complete' when unrecognized."""
    return ENDING_LABELS.get(_normalize(ending_type), DEFAULT_LABEL)


def ending_quote(
    ending_type: str | None,
    story_id: str | None = None,
    rng: random.Random | None = None,
) -> str:
    """
    Pick a back-cover quote for an ending tag.

    With a story id the choice is seeded from it, so every view and export of
    the same story shows the same quote. Without one the pick is uniform random.
    """
    key = _normalize(ending_type)
    quotes = ENDING_QUOTES.get(key, ENDING_QUOTES[LAYOUT_FORMAT.DEFAULT_ENDING])

    if rng is None:
        rng = random.Random(f"{story_id}:{key}") if story_id else random.Random()
    return rng.choice(quotes)


def back_cover_text(ending_type: str | None, story_id: str | None = None) -> BackCoverText:
    return BackCoverText(
        heading="The End",
        label=ending_label(ending_type),
        quote=ending_quote(ending_type, story_id),
    )
