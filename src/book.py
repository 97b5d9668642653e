#!/usr/bin/env python3
"""
Book page lists for the reader view.

The live reader paginates with character-count estimates. Once a story has
a compiled layout, that layout is the canonical page list instead.
"""

import logging
from dataclasses import replace

from endings import back_cover_text
from pagination import CharacterCountEstimator, Paginator, paginate_scenes
from story_model import BackCoverPage, CoverPage, Layout, Page, ReadingSession, StoryMetadata, TitlePage

logger = logging.getLogger(__name__)


def front_matter(story: StoryMetadata) -> list[Page]:
    """Front cover and title page; the title page is page 1."""
    return [
        CoverPage(side="front", cover_url=story.cover_url),
        TitlePage(title=story.title, page_number=1),
    ]


def back_cover(story: StoryMetadata, decorate: bool = False) -> BackCoverPage:
    page = BackCoverPage(ending_type=story.ending_type or "default")
    if decorate:
        decorate_back_cover(page, story.id)
    return page


def decorate_back_cover(page: BackCoverPage, story_id: str | None = None) -> BackCoverPage:
    """Fill in the ending label and quote for display."""
    text = back_cover_text(page.ending_type, story_id)
    page.label = text.label
    page.quote = text.quote
    return page


def build_reader_pages(session: ReadingSession, paginator: Paginator | None = None) -> list[Page]:
    """Heuristic page list for the live reader."""
    paginator = paginator or Paginator(CharacterCountEstimator())
    pages = front_matter(session.story)
    pages.extend(paginate_scenes(session.scenes, paginator, vertical=session.is_japanese))
    pages.append(back_cover(session.story, decorate=True))
    return pages


def book_pages(session: ReadingSession, layout: Layout | None = None) -> list[Page]:
    """
    Canonical pages for a book view.

    Replays the compiled layout when there is one for this story, so the book
    looks the same on every device and reload.
    """
    if layout is not None and layout.story_id == session.story.id:
        # The stored layout is read-only, decorate a copy of the back cover
        return [
            decorate_back_cover(replace(page), layout.story_id) if isinstance(page, BackCoverPage) else page
            for page in layout.pages
        ]

    if layout is not None:
        logger.warning(f"Ignoring layout for story {layout.story_id}, expected {session.story.id}")
    return build_reader_pages(session)
