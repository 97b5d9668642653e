#!/usr/bin/env python3
"""
Story, scene and page data model for book layout.

Scenes come from the story store; pages and layouts are what the paginators
produce. Layout documents serialize to the camelCase shape the store keeps.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Literal, Union

from config import LAYOUT_VERSION
from text_utils import parse_furigana

ImagePosition = Literal["top", "bottom"]


@dataclass(frozen=True)
class Scene:
    """One narrative beat with an optional illustration."""

    index: int
    text: str = ""
    image_url: str | None = None
    choices: tuple[str, ...] = ()

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    @classmethod
    def from_dict(cls, index: int, data: dict[str, Any]) -> "Scene":
        """Build a scene from a store record ({"text", "image_url", "choices"})."""
        choices = data.get("choices") or ()
        return cls(
            index=index,
            text=data.get("text") or "",
            image_url=data.get("image_url") or None,
            choices=tuple(str(c.get("text", c)) if isinstance(c, dict) else str(c) for c in choices),
        )


@dataclass(frozen=True)
class StoryMetadata:
    """Story-level metadata used on covers and in the layout document."""

    id: str
    title: str = ""
    language: str = "en"
    genre: str | None = None
    maturity: str | None = None
    cover_url: str | None = None
    ending_type: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoryMetadata":
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            language=data.get("language") or "en",
            genre=data.get("genre"),
            maturity=data.get("maturity") or data.get("maturity_level"),
            cover_url=data.get("book_cover_url") or data.get("cover_url"),
            ending_type=data.get("ending_type"),
        )


@dataclass(frozen=True)
class ReadingSession:
    """
    Everything a pagination run needs about one story.

    Passed explicitly into the paginators so a layout can be computed
    without any page environment.
    """

    story: StoryMetadata
    scenes: tuple[Scene, ...] = ()

    @property
    def is_japanese(self) -> bool:
        return self.story.language == "ja"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReadingSession":
        """Build a session from a complete-story payload ({"story": ..., "pages": [...]})."""
        story = StoryMetadata.from_dict(data.get("story") or {})
        records = data.get("pages")
        if records is None:
            records = data.get("scenes") or []
        scenes = tuple(Scene.from_dict(i, record) for i, record in enumerate(records))
        if story.language == "ja":
            # Generated Japanese text mixes bracket and tag furigana
            scenes = tuple(replace(s, text=parse_furigana(s.text)) for s in scenes)
        return cls(story=story, scenes=scenes)


# =============================================================================
# Pages
# =============================================================================


@dataclass
class CoverPage:
    """Front or back hard cover with no narrative content."""

    side: Literal["front", "back"] = "front"
    cover_url: str | None = None
    type: str = field(default="cover", init=False)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "side": self.side}
        if self.cover_url:
            data["coverUrl"] = self.cover_url
        return data


@dataclass
class TitlePage:
    """Inner title page."""

    title: str
    page_number: int = 1
    type: str = field(default="title", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "title": self.title, "pageNumber": self.page_number}


@dataclass
class ContentPage:
    """A page of narrative text belonging to exactly one scene."""

    paragraphs: list[str]
    has_image: bool = False
    image_position: ImagePosition | None = None
    image_url: str | None = None
    scene_index: int = 0
    page_number: int = 0
    is_first_page_of_scene: bool = True
    is_continuation: bool = False
    vertical: bool = False
    type: str = field(default="content", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "paragraphs": list(self.paragraphs),
            "hasImage": self.has_image,
            "imagePosition": self.image_position,
            "imageUrl": self.image_url,
            "sceneIndex": self.scene_index,
            "pageNumber": self.page_number,
            "isFirstPageOfScene": self.is_first_page_of_scene,
            "isContinuation": self.is_continuation,
            "vertical": self.vertical,
        }


@dataclass
class BackCoverPage:
    """Back cover carrying the story's ending classification."""

    ending_type: str = "default"
    label: str | None = None
    quote: str | None = None
    type: str = field(default="back", init=False)

    def to_dict(self) -> dict[str, Any]:
        # label/quote are render-time decoration, never persisted
        return {"type": self.type, "endingType": self.ending_type}


Page = Union[CoverPage, TitlePage, ContentPage, BackCoverPage]


def page_from_dict(data: dict[str, Any]) -> Page:
    """Rebuild a typed page from its stored dict form."""
    page_type = data.get("type")
    if page_type == "cover":
        return CoverPage(side=data.get("side", "front"), cover_url=data.get("coverUrl"))
    if page_type == "title":
        return TitlePage(title=data.get("title", ""), page_number=int(data.get("pageNumber", 1)))
    if page_type == "content":
        return ContentPage(
            paragraphs=list(data.get("paragraphs") or []),
            has_image=bool(data.get("hasImage")),
            image_position=data.get("imagePosition"),
            image_url=data.get("imageUrl"),
            scene_index=int(data.get("sceneIndex", 0)),
            page_number=int(data.get("pageNumber", 0)),
            is_first_page_of_scene=bool(data.get("isFirstPageOfScene", True)),
            is_continuation=bool(data.get("isContinuation", False)),
            vertical=bool(data.get("vertical", False)),
        )
    if page_type == "back":
        return BackCoverPage(ending_type=data.get("endingType") or "default")
    raise ValueError(f"Unknown page type: {page_type!r}")


# =============================================================================
# Layout
# =============================================================================


@dataclass
class Layout:
    """Compiled, persisted page layout of a finished story."""

    story_id: str
    title: str
    pages: list[Page]
    language: str = "en"
    genre: str | None = None
    cover_url: str | None = None
    ending_type: str | None = None
    compiled_at: str = ""
    version: int = LAYOUT_VERSION

    @property
    def total_pages(self) -> int:
        """Numbered pages plus the back cover; the front cover is not counted."""
        numbered = [p.page_number for p in self.pages if isinstance(p, (TitlePage, ContentPage))]
        has_back = any(isinstance(p, BackCoverPage) for p in self.pages)
        return max(numbered, default=0) + int(has_back)

    def content_pages(self) -> list[ContentPage]:
        return [page for page in self.pages if isinstance(page, ContentPage)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "storyId": self.story_id,
            "title": self.title,
            "language": self.language,
            "genre": self.genre,
            "coverUrl": self.cover_url,
            "endingType": self.ending_type,
            "totalPages": self.total_pages,
            "pages": [page.to_dict() for page in self.pages],
            "compiledAt": self.compiled_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Layout":
        return cls(
            version=int(data["version"]),
            story_id=str(data["storyId"]),
            title=data.get("title") or "",
            language=data.get("language") or "en",
            genre=data.get("genre"),
            cover_url=data.get("coverUrl"),
            ending_type=data.get("endingType"),
            pages=[page_from_dict(p) for p in data["pages"]],
            compiled_at=data.get("compiledAt") or "",
        )
