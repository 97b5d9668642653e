import json
import sys

import pytest

import compile_book
from layout_format import read_layout

STORY = {
    "story": {
        "id": "cli-1",
        "title": "Paper Boats",
        "language": "en",
        "book_cover_url": "https://example.test/cover.png",
        "ending_type": "bittersweet",
    },
    "pages": [
        {"text": "The river rose.\n\nWe folded boats from old letters.", "image_url": "https://example.test/1.png"},
        {"text": "They sailed away. " * 80, "image_url": None},
    ],
}


@pytest.fixture
def story_file(tmp_path):
    path = tmp_path / "boats.json"
    path.write_text(json.dumps(STORY), encoding="utf-8")
    return path


def run_main(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["compile-book", *map(str, args)])
    compile_book.main()


def test_compile_single_file(monkeypatch, capsys, tmp_path, story_file):
    out = tmp_path / "out" / "boats.layout.json"
    out.parent.mkdir()
    run_main(monkeypatch, story_file, out)

    layout = read_layout(out)
    assert layout.story_id == "cli-1"
    assert layout.ending_type == "bittersweet"
    assert "Pages:" in capsys.readouterr().out


def test_compile_directory_with_previews(monkeypatch, tmp_path, story_file):
    out_dir = tmp_path / "layouts"
    proofs = tmp_path / "proofs"
    run_main(monkeypatch, tmp_path, out_dir, "--preview", proofs)

    layout = read_layout(out_dir / "boats.layout.json")
    pngs = sorted(proofs.glob("*.png"))
    content_and_title = [p for p in layout.pages if p.type in ("content", "title")]
    assert len(pngs) == len(content_and_title)


def test_heuristic_plan(monkeypatch, capsys, story_file):
    run_main(monkeypatch, story_file, "-", "--heuristic")

    out = capsys.readouterr().out
    assert "Paper Boats" in out
    assert "p1: title" in out
    assert "p2: scene 0, 2 paragraphs image=top" in out


def test_missing_font_exits(monkeypatch, tmp_path, story_file):
    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch, story_file, tmp_path / "x.layout.json", "--font", tmp_path / "missing.ttf")
    assert exc.value.code == 1


def test_missing_input_exits(monkeypatch, tmp_path):
    with pytest.raises(SystemExit):
        run_main(monkeypatch, tmp_path / "nope.json", tmp_path / "out.json")
