#!/usr/bin/env python3
"""
Book compiler: precomputed page layout for a completed story.

Measures rendered paragraph heights against the page geometry once, after
the final scene, and produces a layout document that is stored and replayed
instead of re-paginating on every view.
"""

import logging
from datetime import datetime, timezone

from book import back_cover, front_matter
from config import PAGE_LAYOUT, PageLayoutConfig
from pagination import Paginator, ProgressCallback, paginate_scenes
from story_model import Layout, ReadingSession
from text_renderer import FontFamily, MeasuredHeightEstimator, TextMetrics

logger = logging.getLogger(__name__)


class BookCompiler:
    """Compile a finished story into a stable page layout."""

    def __init__(self, metrics: TextMetrics | None = None, page_config: PageLayoutConfig = PAGE_LAYOUT):
        self.page_config = page_config
        self.metrics = metrics or TextMetrics(
            FontFamily(),
            font_size=page_config.font_size,
            line_height_ratio=page_config.line_height_ratio,
        )

    def compile(self, session: ReadingSession, on_progress: ProgressCallback | None = None) -> Layout:
        """
        Compile a story into a layout.

        Args:
            session: Story metadata and its ordered scenes
            on_progress: Optional callback receiving 0-100 completion

        Returns:
            Layout with front cover, title page, scene pages and back cover

        Raises:
            MeasurementUnavailableError: if text cannot be measured; nothing
                partial is returned.
        """
        story = session.story
        report = on_progress or (lambda _: None)
        logger.info(f"Compiling book for story {story.id} ({len(session.scenes)} scenes)")

        paginator = Paginator(MeasuredHeightEstimator(self.metrics, self.page_config))
        pages = front_matter(story)
        report(5)

        with self.metrics.surface(self.page_config.width):
            pages.extend(
                paginate_scenes(
                    session.scenes,
                    paginator,
                    first_page_number=2,
                    vertical=session.is_japanese,
                    on_progress=report,
                )
            )

        pages.append(back_cover(story))
        report(100)

        layout = Layout(
            story_id=story.id,
            title=story.title,
            language=story.language,
            genre=story.genre,
            cover_url=story.cover_url,
            ending_type=story.ending_type,
            pages=pages,
            compiled_at=datetime.now(timezone.utc).isoformat(),
        )

        logger.info(f"Book compiled: {layout.total_pages} pages")
        return layout
