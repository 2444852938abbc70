import pytest

from wordwise.domain.study.models import Word
from wordwise.infrastructure.scheduling import ManualScheduler

NOW = 1_700_000_000.0


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Mocks HOME to a temp dir so no real config file or env leaks into tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in ("WORDWISE_WORDS_FILE", "WORDWISE_SHUFFLE_SEED", "WORDWISE_ADVANCE_DELAY"):
        monkeypatch.delenv(key, raising=False)
    return home


@pytest.fixture
def clock():
    """A controllable epoch clock."""

    class Clock:
        def __init__(self):
            self.now = NOW

        def __call__(self):
            return self.now

    return Clock()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def sample_words():
    return [
        Word(id=1, text1="house", text2="ev", difficulty=3),
        Word(id=2, text1="water", text2="su", difficulty=1, internal_score=1.2),
        Word(id=3, text1="bridge", text2="kopru", difficulty=5, internal_score=5.0),
        Word(id=4, text1="apple", text2="elma", difficulty=0),
    ]
