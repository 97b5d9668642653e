from book import book_pages, build_reader_pages
from book_compiler import BookCompiler
from endings import ENDING_QUOTES
from story_model import BackCoverPage, ContentPage, CoverPage, ReadingSession, TitlePage


def test_reader_pages_structure(session):
    pages = build_reader_pages(session)

    assert isinstance(pages[0], CoverPage)
    assert isinstance(pages[1], TitlePage) and pages[1].page_number == 1
    back = pages[-1]
    assert isinstance(back, BackCoverPage)
    assert back.label == "A Triumphant Tale"
    assert back.quote in ENDING_QUOTES["triumph"]

    numbers = [p.page_number for p in pages if isinstance(p, ContentPage)]
    assert numbers == list(range(2, 2 + len(numbers)))


def test_reader_pages_are_stable(session):
    first = [p.to_dict() for p in build_reader_pages(session)]
    second = [p.to_dict() for p in build_reader_pages(session)]
    assert first == second
    assert build_reader_pages(session)[-1].quote == build_reader_pages(session)[-1].quote


def test_book_pages_prefers_compiled_layout(session):
    layout = BookCompiler().compile(session)
    pages = book_pages(session, layout)

    assert [p.to_dict() for p in pages] == [p.to_dict() for p in layout.pages]
    assert pages[-1].label == "A Triumphant Tale"
    # The stored layout itself is not decorated
    assert layout.pages[-1].label is None


def test_book_pages_falls_back_to_heuristic(session):
    assert [p.to_dict() for p in book_pages(session)] == [p.to_dict() for p in build_reader_pages(session)]


def test_layout_for_other_story_is_ignored(session, story):
    layout = BookCompiler().compile(session)
    layout.story_id = "someone-else"
    pages = book_pages(session, layout)
    assert [p.to_dict() for p in pages] == [p.to_dict() for p in build_reader_pages(session)]


def test_japanese_pages_are_vertical():
    session = ReadingSession.from_dict(
        {
            "story": {"id": "ja-1", "title": "灯台守", "language": "ja"},
            "pages": [{"text": "<ruby>灯台<rt>とうだい</rt></ruby>は静かだった。", "image_url": None}],
        }
    )
    pages = [p for p in build_reader_pages(session) if isinstance(p, ContentPage)]
    assert len(pages) == 1
    assert pages[0].vertical
    assert not pages[0].has_image


def test_session_from_store_payload():
    session = ReadingSession.from_dict(
        {
            "story": {
                "id": 17,
                "title": "Night Market",
                "language": "en",
                "genre": "mystery",
                "maturity_level": "teen",
                "book_cover_url": "https://example.test/c.png",
                "ending_type": "mystery",
            },
            "pages": [
                {"text": "One.", "image_url": "https://example.test/1.png", "choices": [{"text": "Go left"}]},
                {"text": "Two.", "image_url": ""},
            ],
        }
    )

    assert session.story.id == "17"
    assert session.story.cover_url == "https://example.test/c.png"
    assert session.story.maturity == "teen"
    assert [s.index for s in session.scenes] == [0, 1]
    assert session.scenes[0].has_image
    assert session.scenes[0].choices == ("Go left",)
    assert not session.scenes[1].has_image


def test_japanese_furigana_normalized_on_load():
    session = ReadingSession.from_dict(
        {
            "story": {"id": "ja-2", "title": "星", "language": "ja"},
            "pages": [{"text": "夜空《よぞら》を見た。\n\n星《ほし》が光る。"}],
        }
    )
    assert session.scenes[0].text == "<ruby>夜空<rt>よぞら</rt></ruby>を見た。\n\n<ruby>星<rt>ほし</rt></ruby>が光る。"
