import json

import pytest

from book_compiler import BookCompiler
from layout_format import LayoutFormatError, LayoutStore, layout_from_json, layout_to_json, read_layout, write_layout


@pytest.fixture
def layout(session):
    return BookCompiler().compile(session)


def test_document_shape(layout):
    data = json.loads(layout_to_json(layout))

    assert data["version"] == 1
    assert data["storyId"] == "story-42"
    assert data["coverUrl"] == "https://example.test/cover.png"
    assert data["endingType"] == "triumph"
    assert data["totalPages"] == data["pages"][-2]["pageNumber"] + 1
    assert data["totalPages"] == len(data["pages"]) - 1
    assert data["pages"][0] == {"type": "cover", "side": "front", "coverUrl": "https://example.test/cover.png"}
    assert data["pages"][-1] == {"type": "back", "endingType": "triumph"}

    first_content = data["pages"][2]
    assert first_content["type"] == "content"
    assert first_content["pageNumber"] == 2
    assert first_content["sceneIndex"] == 0
    assert first_content["isFirstPageOfScene"] is True
    assert first_content["hasImage"] is True


def test_write_and_read(tmp_path, layout):
    path = tmp_path / "nested" / "story.layout.json"
    write_layout(path, layout)

    loaded = read_layout(path)
    assert loaded.to_dict() == layout.to_dict()
    assert list(path.parent.iterdir()) == [path]


def test_rejects_unknown_version(layout):
    data = layout.to_dict()
    data["version"] = 99
    with pytest.raises(LayoutFormatError, match="version"):
        layout_from_json(json.dumps(data))


@pytest.mark.parametrize("text", ["not json", "[]", '{"version": 1}'])
def test_rejects_malformed(text):
    with pytest.raises(LayoutFormatError):
        layout_from_json(text)


def test_rejects_unknown_page_type(layout):
    data = layout.to_dict()
    data["pages"].append({"type": "appendix"})
    data["totalPages"] += 1
    with pytest.raises(LayoutFormatError):
        layout_from_json(json.dumps(data))


def test_rejects_page_count_mismatch(layout):
    data = layout.to_dict()
    data["totalPages"] += 3
    with pytest.raises(LayoutFormatError, match="pages"):
        layout_from_json(json.dumps(data))


def test_store(tmp_path, layout):
    store = LayoutStore(tmp_path)

    assert store.load("story-42") is None
    assert not store.exists("story-42")

    path = store.save(layout)
    assert path.name == "story-42.layout.json"
    assert store.exists("story-42")
    assert store.load("story-42").to_dict() == layout.to_dict()


def test_store_sanitizes_ids(tmp_path):
    store = LayoutStore(tmp_path)
    assert store.path_for("../etc/passwd").parent == tmp_path
