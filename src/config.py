#!/usr/bin/env python3
"""
Centralized configuration for the storybook layout engine.

Contains all constants for page geometry, typography, illustration placement,
heuristic capacities and the persisted layout format. Single source of truth
for both the read-time paginator and the layout compiler.
"""

from dataclasses import dataclass, field

# =============================================================================
# Book Page Geometry (matches the page-flip viewer)
# =============================================================================


@dataclass(frozen=True)
class BookPageGeometry:
    """Nominal size of one book page in CSS pixels."""

    WIDTH: int = 450
    HEIGHT: int = 620


PAGE = BookPageGeometry()

# Convenience aliases
PAGE_WIDTH = PAGE.WIDTH
PAGE_HEIGHT = PAGE.HEIGHT


# =============================================================================
# Padding
# =============================================================================


@dataclass(frozen=True)
class PaddingConfig:
    """Page padding settings."""

    TOP: int = 24
    RIGHT: int = 32
    BOTTOM: int = 40  # Extra space for page number
    LEFT: int = 32


PADDING_CONFIG = PaddingConfig()

# Dict format, same keys the renderer uses
PADDING = {
    "top": PADDING_CONFIG.TOP,
    "right": PADDING_CONFIG.RIGHT,
    "bottom": PADDING_CONFIG.BOTTOM,
    "left": PADDING_CONFIG.LEFT,
}


# =============================================================================
# Typography Settings
# =============================================================================


@dataclass(frozen=True)
class TypographyConfig:
    """Typography settings for narrative text."""

    FONT_SIZE: float = 16.8  # 1.05rem
    LINE_HEIGHT_RATIO: float = 1.75
    PARAGRAPH_SPACING_EM: float = 0.85
    TEXT_INDENT_EM: float = 1.5
    DROP_CAP_EXTRA_EM: float = 1.2  # Drop cap adds roughly one extra line


TYPOGRAPHY = TypographyConfig()

# Convenience aliases
DEFAULT_FONT_SIZE = TYPOGRAPHY.FONT_SIZE
LINE_HEIGHT_RATIO = TYPOGRAPHY.LINE_HEIGHT_RATIO


# =============================================================================
# Illustrations
# =============================================================================


@dataclass(frozen=True)
class IllustrationConfig:
    """Illustration placement on the first page of a scene."""

    HEIGHT_RATIO: float = 0.45  # 45% of page for images
    TEXT_GAP: int = 16
    POSITIONS: tuple[str, ...] = ("top", "top", "bottom", "top", "bottom", "top")


ILLUSTRATION = IllustrationConfig()

IMAGE_POSITIONS = ILLUSTRATION.POSITIONS


# =============================================================================
# Heuristic Paginator
# =============================================================================


@dataclass(frozen=True)
class HeuristicConfig:
    """Approximate characters that fit on a page, tuned for readability."""

    CHARS_WITH_IMAGE: int = 380
    CHARS_WITHOUT_IMAGE: int = 780
    # Only split when text is well past one page, avoids near-empty continuation pages
    SPLIT_THRESHOLD: float = 1.8


HEURISTIC = HeuristicConfig()

CHARS_WITH_IMAGE = HEURISTIC.CHARS_WITH_IMAGE
CHARS_WITHOUT_IMAGE = HEURISTIC.CHARS_WITHOUT_IMAGE
SPLIT_THRESHOLD = HEURISTIC.SPLIT_THRESHOLD


# =============================================================================
# Persisted Layout Format
# =============================================================================


@dataclass(frozen=True)
class LayoutFormatConstants:
    """Versioning for stored layout documents."""

    VERSION: int = 1
    FILE_SUFFIX: str = ".layout.json"
    DEFAULT_ENDING: str = "default"


LAYOUT_FORMAT = LayoutFormatConstants()

LAYOUT_VERSION = LAYOUT_FORMAT.VERSION
LAYOUT_FILE_SUFFIX = LAYOUT_FORMAT.FILE_SUFFIX


# =============================================================================
# Compiler Page Layout
# =============================================================================


@dataclass(frozen=True)
class PageLayoutConfig:
    """
    Page geometry used by the layout compiler.

    Fixed per deployment, not per story. Derived text-area heights follow
    the viewer's CSS: the illustration takes a fixed fraction of the page and
    a gap separates it from the text.
    """

    width: int = PAGE_WIDTH
    height: int = PAGE_HEIGHT
    padding: dict[str, int] = field(default_factory=lambda: dict(PADDING))
    image_height_ratio: float = ILLUSTRATION.HEIGHT_RATIO
    image_text_gap: int = ILLUSTRATION.TEXT_GAP
    font_size: float = DEFAULT_FONT_SIZE
    line_height_ratio: float = LINE_HEIGHT_RATIO

    @property
    def text_width(self) -> int:
        return self.width - self.padding["left"] - self.padding["right"]

    @property
    def text_area_with_image(self) -> float:
        return (
            self.height * (1 - self.image_height_ratio)
            - self.padding["top"]
            - self.padding["bottom"]
            - self.image_text_gap
        )

    @property
    def text_area_full_page(self) -> float:
        return self.height - self.padding["top"] - self.padding["bottom"]

    @property
    def line_height(self) -> float:
        return self.font_size * self.line_height_ratio


PAGE_LAYOUT = PageLayoutConfig()
