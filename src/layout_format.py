#!/usr/bin/env python3
"""
Stored layout documents.

Layouts are JSON documents keyed by story id. A stored layout is read-only
to the renderers; only the compiler writes one.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from config import LAYOUT_FILE_SUFFIX, LAYOUT_VERSION
from story_model import Layout

logger = logging.getLogger(__name__)


class LayoutFormatError(ValueError):
    """Stored layout is malformed or has an unsupported version."""


def layout_to_json(layout: Layout) -> str:
    return json.dumps(layout.to_dict(), ensure_ascii=False, indent=2)


def layout_from_json(text: str) -> Layout:
    """Parse and validate a stored layout document."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LayoutFormatError(f"Layout is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise LayoutFormatError("Layout document must be an object")

    version = data.get("version")
    if version != LAYOUT_VERSION:
        raise LayoutFormatError(f"Unsupported layout version: {version!r}")

    try:
        layout = Layout.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise LayoutFormatError(f"Malformed layout document: {e}") from e

    total = data.get("totalPages")
    if total is not None and total != layout.total_pages:
        raise LayoutFormatError(f"Layout declares {total} pages but its pages give {layout.total_pages}")

    return layout


def write_layout(path: Path, layout: Layout) -> None:
    """Write a layout atomically (temp file in the same directory, then replace)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(layout_to_json(layout))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_layout(path: Path) -> Layout:
    return layout_from_json(path.read_text(encoding="utf-8"))


class LayoutStore:
    """Directory of compiled layouts, one file per story."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, story_id: str) -> Path:
        safe_id = "".join(c if c.isalnum() or c in "-_" else "_" for c in story_id)
        return self.root / f"{safe_id}{LAYOUT_FILE_SUFFIX}"

    def exists(self, story_id: str) -> bool:
        return self.path_for(story_id).exists()

    def save(self, layout: Layout) -> Path:
        path = self.path_for(layout.story_id)
        write_layout(path, layout)
        logger.debug(f"Saved layout for story {layout.story_id} to {path}")
        return path

    def load(self, story_id: str) -> Layout | None:
        """Load a story's layout, or None when it has not been compiled."""
        path = self.path_for(story_id)
        if not path.exists():
            return None
        return read_layout(path)
