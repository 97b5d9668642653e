#!/usr/bin/env python3
"""
Compile finished stories into stored book layouts.

Reads complete-story JSON ({"story": {...}, "pages": [...]}) and writes the
layout document the book viewer replays.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from book import build_reader_pages
from book_compiler import BookCompiler
from config import DEFAULT_FONT_SIZE, LAYOUT_FILE_SUFFIX, PageLayoutConfig
from layout_format import write_layout
from pagination import MeasurementUnavailableError
from story_model import ContentPage, Layout, ReadingSession, TitlePage
from text_renderer import FontFamily, TextMetrics, render_page, render_title_page

logger = logging.getLogger(__name__)


def load_session(path: Path) -> ReadingSession:
    """Load a complete-story JSON file."""
    with open(path, encoding="utf-8") as f:
        return ReadingSession.from_dict(json.load(f))


def write_previews(layout: Layout, metrics: TextMetrics, preview_dir: Path) -> int:
    """Render proof PNGs of the title and content pages. Returns pages written."""
    preview_dir.mkdir(parents=True, exist_ok=True)
    written = 0

    for index, page in enumerate(layout.pages):
        if isinstance(page, ContentPage):
            image = render_page(page, metrics, total_pages=layout.total_pages)
        elif isinstance(page, TitlePage):
            image = render_title_page(page, metrics)
        else:
            continue
        image.save(preview_dir / f"{layout.story_id}-{index:03d}.png")
        written += 1

    return written


def describe_pages(session: ReadingSession) -> str:
    """Human-readable heuristic page plan."""
    lines = []
    for page in build_reader_pages(session):
        if isinstance(page, ContentPage):
            image = f" image={page.image_position}" if page.has_image else ""
            cont = " (cont.)" if page.is_continuation else ""
            lines.append(
                f"  p{page.page_number}: scene {page.scene_index}{cont}, {len(page.paragraphs)} paragraphs{image}"
            )
        elif isinstance(page, TitlePage):
            lines.append(f"  p{page.page_number}: title '{page.title}'")
        else:
            lines.append(f"  {page.type}")
    return "\n".join(lines)


def compile_story_file(
    input_path: Path,
    output_path: Path,
    compiler: BookCompiler,
    preview_dir: Path | None = None,
) -> dict:
    """
    Compile one story file to a layout file.

    Returns:
        Dict with compilation statistics
    """
    session = load_session(input_path)
    layout = compiler.compile(session)
    write_layout(output_path, layout)

    stats = {
        "pages": layout.total_pages,
        "scenes": len(session.scenes),
        "previews": 0,
    }
    if preview_dir is not None:
        stats["previews"] = write_previews(layout, compiler.metrics, preview_dir)
    return stats


def main():
    parser = argparse.ArgumentParser(
        description="Compile finished stories into book layouts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s story.json story.layout.json
  %(prog)s story.json story.layout.json --font fonts/CormorantGaramond.ttf
  %(prog)s ./stories ./layouts --preview ./proofs
  %(prog)s story.json - --heuristic
""",
    )

    parser.add_argument("input", type=Path, help="Story JSON file or directory of them")
    parser.add_argument("output", type=Path, help="Output layout file or directory")

    parser.add_argument("--font", type=Path, help="Text font file (TTF/OTF), defaults to Pillow's bundled font")
    parser.add_argument("--font-bold", type=Path, help="Bold font for the title page (optional)")
    parser.add_argument(
        "--font-size",
        type=float,
        default=DEFAULT_FONT_SIZE,
        help=f"Base font size in CSS pixels (default: {DEFAULT_FONT_SIZE})",
    )
    parser.add_argument("--preview", type=Path, help="Directory for PNG proofs of compiled pages")
    parser.add_argument(
        "--heuristic",
        action="store_true",
        help="Print the read-time page plan instead of compiling",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.font and not args.font.exists():
        print(f"Error: Font file not found: {args.font}", file=sys.stderr)
        sys.exit(1)

    if args.input.is_file():
        story_files = [args.input]
        output_is_dir = not args.output.suffix
    elif args.input.is_dir():
        story_files = sorted(args.input.glob("*.json"))
        output_is_dir = True
    else:
        print(f"Error: Input path not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    if not story_files:
        print(f"No story files found in {args.input}", file=sys.stderr)
        sys.exit(1)

    if args.heuristic:
        for story_path in story_files:
            session = load_session(story_path)
            print(f"{story_path.name}: {session.story.title}")
            print(describe_pages(session))
        return

    if output_is_dir:
        args.output.mkdir(parents=True, exist_ok=True)

    page_config = PageLayoutConfig(font_size=args.font_size)
    font_family = FontFamily(
        regular=args.font,
        bold=args.font_bold if args.font_bold and args.font_bold.exists() else None,
    )
    metrics = TextMetrics(font_family, font_size=page_config.font_size, line_height_ratio=page_config.line_height_ratio)
    compiler = BookCompiler(metrics, page_config)

    total_stats = {"pages": 0, "files": 0}

    for story_path in story_files:
        out_path = args.output / (story_path.stem + LAYOUT_FILE_SUFFIX) if output_is_dir else args.output
        print(f"Compiling: {story_path.name}")

        try:
            stats = compile_story_file(story_path, out_path, compiler, preview_dir=args.preview)
        except MeasurementUnavailableError as e:
            # No point trying the remaining stories without fonts
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(2)
        except Exception as e:
            logger.error(f"Failed to compile {story_path}: {e}")
            print(f"  Error: {e}", file=sys.stderr)
            continue

        total_stats["pages"] += stats["pages"]
        total_stats["files"] += 1

        print(f"  -> {out_path}")
        print(f"     Pages: {stats['pages']}, Scenes: {stats['scenes']}")

    if total_stats["files"] > 1:
        print("\nSummary:")
        print(f"  Stories compiled: {total_stats['files']}")
        print(f"  Total pages: {total_stats['pages']}")


if __name__ == "__main__":
    main()
