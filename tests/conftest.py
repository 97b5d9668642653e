import pytest

from story_model import ReadingSession, Scene, StoryMetadata


def make_text(*lengths: int, char: str = "a") -> str:
    """Narrative text with one paragraph per length, separated by blank lines."""
    return "\n\n".join(char * n for n in lengths)


@pytest.fixture
def story():
    return StoryMetadata(
        id="story-42",
        title="The Lantern Keeper",
        language="en",
        genre="fantasy",
        cover_url="https://example.test/cover.png",
        ending_type="triumph",
    )


@pytest.fixture
def session(story):
    scenes = (
        Scene(0, "The harbor was quiet.\n\nA lantern flickered on the pier.", "https://example.test/0.png"),
        Scene(1, "She climbed the tower stairs. " * 40 + "\n\n" + "The wind howled outside. " * 30),
        Scene(2, "   \n\n  "),
        Scene(3, "Dawn came at last.\n\n" + "The keeper smiled. " * 60, "https://example.test/3.png"),
    )
    return ReadingSession(story=story, scenes=scenes)
