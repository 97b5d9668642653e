import random

from endings import ENDING_QUOTES, back_cover_text, ending_label, ending_quote


def test_known_labels_case_insensitive():
    assert ending_label("triumph") == "A Triumphant Tale"
    assert ending_label("Bittersweet") == "A Bittersweet Journey"
    assert ending_label(" COMEDY ") == "A Joyful Adventure"


def test_unknown_and_missing_fall_back():
    assert ending_label("cliffhanger") == "A Tale Complete"
    assert ending_label(None) == "A Tale Complete"
    assert ending_quote("cliffhanger", rng=random.Random(1)) in ENDING_QUOTES["default"]


def test_tragedy_has_label_but_default_quotes():
    assert ending_label("tragedy") == "A Poignant Story"
    assert ending_quote("tragedy", story_id="s1") in ENDING_QUOTES["default"]


def test_quote_seeded_by_story_id_is_stable():
    quotes = {ending_quote("mystery", story_id="story-7") for _ in range(10)}
    assert len(quotes) == 1
    assert quotes.pop() in ENDING_QUOTES["mystery"]


def test_back_cover_text():
    text = back_cover_text("triumph", "story-1")
    assert text.heading == "The End"
    assert text.label == "A Triumphant Tale"
    assert text.quote in ENDING_QUOTES["triumph"]
