#!/usr/bin/env python3
"""
PIL-based text measurement and proof rendering for book pages.

Measures wrapped paragraph heights with real font metrics so the layout
compiler can pack pages exactly, and renders grayscale proofs of pages.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from PIL import Image, ImageDraw, ImageFont

from config import PAGE_LAYOUT, TYPOGRAPHY, PageLayoutConfig
from pagination import MeasurementUnavailableError
from story_model import ContentPage, TitlePage
from text_utils import split_paragraphs, visible_text

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


@dataclass
class FontFamily:
    """Font family with an optional bold variant. No regular path means Pillow's bundled font."""

    regular: Path | None = None
    bold: Path | None = None

    def get_path(self, bold: bool = False) -> Path | None:
        """Get font path for given style, with fallback to regular."""
        if bold and self.bold:
            return self.bold
        return self.regular


class TextMetrics:
    """
    Measure wrapped text with Pillow font metrics.

    Measurement needs a scratch surface, opened with surface() and always
    released when the block exits.
    """

    def __init__(
        self,
        font_family: FontFamily | None = None,
        font_size: float = TYPOGRAPHY.FONT_SIZE,
        line_height_ratio: float = TYPOGRAPHY.LINE_HEIGHT_RATIO,
    ):
        self.font_family = font_family or FontFamily()
        self.font_size = font_size
        self.line_height = font_size * line_height_ratio
        self._font_cache: dict[tuple[Path | None, int], Font] = {}
        self._draw: ImageDraw.ImageDraw | None = None

    def get_font(self, size: float | None = None, bold: bool = False) -> Font:
        """Get or create cached font for given style."""
        pixel_size = round(size if size is not None else self.font_size)
        font_path = self.font_family.get_path(bold)
        key = (font_path, pixel_size)

        if key not in self._font_cache:
            try:
                if font_path is None:
                    self._font_cache[key] = ImageFont.load_default(size=pixel_size)
                else:
                    self._font_cache[key] = ImageFont.truetype(str(font_path), pixel_size)
            except (OSError, ImportError) as e:
                raise MeasurementUnavailableError(f"Cannot load font {font_path or '<default>'}: {e}") from e

        return self._font_cache[key]

    @contextmanager
    def surface(self, width: int = PAGE_LAYOUT.width) -> Iterator["TextMetrics"]:
        """Hold an exclusive scratch surface for the duration of the block."""
        if self._draw is not None:
            raise RuntimeError("Measurement surface is already in use")

        image = Image.new("L", (max(width, 1), 1), 255)
        self._draw = ImageDraw.Draw(image)
        try:
            yield self
        finally:
            self._draw = None
            image.close()

    @property
    def has_surface(self) -> bool:
        return self._draw is not None

    def text_width(self, text: str, font: Font) -> float:
        """Measure rendered width of a single line."""
        if self._draw is None:
            raise MeasurementUnavailableError("No measurement surface open")
        return self._draw.textlength(text, font=font)

    def wrap_text(self, text: str, font: Font, max_width: float, first_line_indent: float = 0) -> list[str]:
        """
        Wrap text to fit within max_width pixels.

        Greedy on word boundaries. Words wider than a line, and unspaced
        runs such as Japanese text, are broken character by character.
        """
        words = text.split()
        if not words:
            return []

        lines: list[str] = []
        current = ""

        def limit() -> float:
            return max_width - (first_line_indent if not lines else 0)

        for word in words:
            candidate = f"{current} {word}" if current else word
            if self.text_width(candidate, font) <= limit():
                current = candidate
                continue

            if current:
                lines.append(current)
                current = ""

            if self.text_width(word, font) <= limit():
                current = word
                continue

            for char in word:
                candidate = current + char
                if not current or self.text_width(candidate, font) <= limit():
                    current = candidate
                else:
                    lines.append(current)
                    current = char

        if current:
            lines.append(current)

        return lines

    def paragraph_height(self, text: str, width: float, first_line_indent: float = 0) -> float:
        """Height of a paragraph wrapped at width, excluding spacing."""
        font = self.get_font()
        lines = self.wrap_text(visible_text(text), font, width, first_line_indent)
        return len(lines) * self.line_height


class MeasuredHeightEstimator:
    """Paragraph heights in pixels from real font metrics."""

    split_threshold = None

    def __init__(self, metrics: TextMetrics, page_config: PageLayoutConfig = PAGE_LAYOUT):
        self.metrics = metrics
        self.page_config = page_config
        font_size = page_config.font_size
        self.paragraph_spacing = font_size * TYPOGRAPHY.PARAGRAPH_SPACING_EM
        self.text_indent = font_size * TYPOGRAPHY.TEXT_INDENT_EM
        self.drop_cap_extra = font_size * TYPOGRAPHY.DROP_CAP_EXTRA_EM

    def available_extent(self, show_image: bool) -> float:
        if show_image:
            return self.page_config.text_area_with_image
        return self.page_config.text_area_full_page

    def paragraph_extent(self, paragraph: str, drop_cap: bool = False) -> float:
        indent = 0 if drop_cap else self.text_indent
        height = self.metrics.paragraph_height(paragraph, self.page_config.text_width, indent)
        height += self.paragraph_spacing
        if drop_cap:
            height += self.drop_cap_extra
        return height

    def scene_extent(self, text: str) -> float:
        return sum(self.paragraph_extent(p) for p in split_paragraphs(text))


# =============================================================================
# Proof rendering
# =============================================================================


def render_page(
    page: ContentPage,
    metrics: TextMetrics,
    page_config: PageLayoutConfig = PAGE_LAYOUT,
    total_pages: int | None = None,
) -> Image.Image:
    """
    Render a content page to a grayscale proof image.

    The illustration is drawn as a gray placeholder box in its position.
    """
    width, height = page_config.width, page_config.height
    padding = page_config.padding
    image = Image.new("L", (width, height), 255)
    draw = ImageDraw.Draw(image)

    font = metrics.get_font()
    text_top = padding["top"]
    text_bottom = height - padding["bottom"]

    if page.has_image:
        image_height = int(height * page_config.image_height_ratio)
        if page.image_position == "bottom":
            box_top = height - padding["bottom"] - image_height
            text_bottom = box_top - page_config.image_text_gap
        else:
            box_top = padding["top"]
            text_top = box_top + image_height + page_config.image_text_gap
        draw.rectangle(
            (padding["left"], box_top, width - padding["right"], box_top + image_height),
            fill=200,
        )

    indent = page_config.font_size * TYPOGRAPHY.TEXT_INDENT_EM
    spacing = page_config.font_size * TYPOGRAPHY.PARAGRAPH_SPACING_EM
    y = float(text_top)

    with metrics.surface(width):
        for paragraph in page.paragraphs:
            lines = metrics.wrap_text(visible_text(paragraph), font, page_config.text_width, indent)
            for i, line in enumerate(lines):
                if y + metrics.line_height > text_bottom:
                    break
                x = padding["left"] + (indent if i == 0 else 0)
                draw.text((x, y), line, fill=0, font=font)
                y += metrics.line_height
            y += spacing

        _render_page_number(draw, metrics, page_config, page.page_number, total_pages)

    return image


def _render_page_number(
    draw: ImageDraw.ImageDraw,
    metrics: TextMetrics,
    page_config: PageLayoutConfig,
    page_number: int,
    total_pages: int | None = None,
) -> None:
    """Render page number at bottom center."""
    font = metrics.get_font(12)

    if total_pages:
        text = f"{page_number} / {total_pages}"
    else:
        text = str(page_number)

    width = metrics.text_width(text, font)
    x = (page_config.width - width) // 2
    y = page_config.height - page_config.padding["bottom"] + 12

    draw.text((x, y), text, fill=128, font=font)


def render_title_page(
    page: TitlePage,
    metrics: TextMetrics,
    page_config: PageLayoutConfig = PAGE_LAYOUT,
) -> Image.Image:
    """Render the inner title page."""
    width, height = page_config.width, page_config.height
    image = Image.new("L", (width, height), 255)
    draw = ImageDraw.Draw(image)

    title_size = 28
    title_font = metrics.get_font(title_size, bold=True)
    line_height = int(title_size * TYPOGRAPHY.LINE_HEIGHT_RATIO)

    with metrics.surface(width):
        lines = metrics.wrap_text(page.title, title_font, page_config.text_width)
        title_y = height // 3
        for line in lines:
            line_width = metrics.text_width(line, title_font)
            draw.text(((width - line_width) // 2, title_y), line, fill=0, font=title_font)
            title_y += line_height

        divider_y = title_y + 16
        draw.line((width // 2 - 40, divider_y, width // 2 + 40, divider_y), fill=100, width=1)

    return image
