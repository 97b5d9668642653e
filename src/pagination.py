#!/usr/bin/env python3
"""
Page layout and text flow for storybook pages.

Flows scene paragraphs into fixed-size pages. The same greedy fill runs at
read time (character-count estimates) and at compile time (measured heights);
only the HeightEstimator differs.
"""

import logging
from typing import Callable, Iterable, Protocol

from config import CHARS_WITH_IMAGE, CHARS_WITHOUT_IMAGE, IMAGE_POSITIONS, SPLIT_THRESHOLD
from story_model import ContentPage, ImagePosition, Scene
from text_utils import split_paragraphs

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class MeasurementUnavailableError(RuntimeError):
    """No text-measurement environment; compilation cannot proceed."""


class HeightEstimator(Protocol):
    """Vertical extent of paragraphs and pages, in any consistent unit."""

    # Hysteresis factor for single-page scenes, None to always fill greedily
    split_threshold: float | None

    def available_extent(self, show_image: bool) -> float: ...

    def paragraph_extent(self, paragraph: str, drop_cap: bool = False) -> float: ...

    def scene_extent(self, text: str) -> float: ...


class CharacterCountEstimator:
    """Estimate page usage by character count."""

    def __init__(
        self,
        chars_with_image: int = CHARS_WITH_IMAGE,
        chars_without_image: int = CHARS_WITHOUT_IMAGE,
        split_threshold: float | None = SPLIT_THRESHOLD,
    ):
        self.chars_with_image = chars_with_image
        self.chars_without_image = chars_without_image
        self.split_threshold = split_threshold

    def available_extent(self, show_image: bool) -> float:
        return self.chars_with_image if show_image else self.chars_without_image

    def paragraph_extent(self, paragraph: str, drop_cap: bool = False) -> float:
        return len(paragraph)

    def scene_extent(self, text: str) -> float:
        # Whole narrative text, separators and markup included
        return len(text)


def image_position_for(scene_index: int) -> ImagePosition:
    """Illustration position, cycling a fixed pattern for visual variety."""
    return IMAGE_POSITIONS[scene_index % len(IMAGE_POSITIONS)]


class Paginator:
    """Flow a scene's paragraphs into fixed-capacity pages."""

    def __init__(self, estimator: HeightEstimator):
        self.estimator = estimator

    def _fits_on_one_page(self, text: str, has_image: bool) -> bool:
        """Hysteresis: accept modest overflow rather than a near-empty continuation."""
        threshold = self.estimator.split_threshold
        if threshold is None:
            return False
        total = self.estimator.scene_extent(text)
        return total <= self.estimator.available_extent(has_image) * threshold

    def _fill_page(self, paragraphs: list[str], available: float, drop_cap: bool) -> int:
        """Return how many leading paragraphs fit in the available extent."""
        used = 0.0
        count = 0
        for i, paragraph in enumerate(paragraphs):
            extent = self.estimator.paragraph_extent(paragraph, drop_cap=(i == 0 and drop_cap))
            if used + extent > available:
                break
            used += extent
            count += 1

        # A paragraph too long for an empty page is placed alone and may overflow
        if count == 0 and paragraphs:
            count = 1
        return count

    def paginate_scene(self, scene: Scene, vertical: bool = False) -> list[ContentPage]:
        """
        Split one scene into content pages.

        Page numbers are left at 0; paginate_scenes() assigns them once the
        whole scene has succeeded.
        """
        paragraphs = split_paragraphs(scene.text)
        if not paragraphs:
            return []

        position = image_position_for(scene.index)

        def make_page(paras: list[str], show_image: bool, first: bool) -> ContentPage:
            return ContentPage(
                paragraphs=paras,
                has_image=show_image,
                image_position=position if show_image else None,
                image_url=scene.image_url if show_image else None,
                scene_index=scene.index,
                is_first_page_of_scene=first,
                is_continuation=not first,
                vertical=vertical,
            )

        if self._fits_on_one_page(scene.text, scene.has_image):
            return [make_page(paragraphs, scene.has_image, True)]

        pages: list[ContentPage] = []
        remaining = paragraphs
        while remaining:
            first = not pages
            show_image = first and scene.has_image
            available = self.estimator.available_extent(show_image)
            count = self._fill_page(remaining, available, drop_cap=(first and not show_image))
            pages.append(make_page(remaining[:count], show_image, first))
            remaining = remaining[count:]

        return pages


def paginate_scenes(
    scenes: Iterable[Scene],
    paginator: Paginator,
    first_page_number: int = 2,
    vertical: bool = False,
    on_progress: ProgressCallback | None = None,
) -> list[ContentPage]:
    """
    Paginate every scene of a story and number the pages.

    A scene that fails to paginate is logged and skipped without using up
    page numbers. A missing measurement environment aborts the whole run.
    """
    scenes = list(scenes)
    total = len(scenes)
    pages: list[ContentPage] = []
    page_number = first_page_number

    for position, scene in enumerate(scenes):
        try:
            scene_pages = paginator.paginate_scene(scene, vertical=vertical)
        except MeasurementUnavailableError:
            raise
        except Exception as e:
            logger.warning(f"Skipping scene {scene.index}: {e}")
            scene_pages = []

        if not scene_pages:
            logger.debug(f"Scene {scene.index} produced no pages")

        for page in scene_pages:
            page.page_number = page_number
            page_number += 1
        pages.extend(scene_pages)

        if on_progress is not None:
            on_progress(5 + (position + 1) * 90 // total)

    return pages
