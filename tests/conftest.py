import pytest

from kairos.domain.scheduling.models import CardSchedulingState


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and decks
    monkeypatch.setenv("HOME", str(home))
    for var in ("KAIROS_DECK_PATH", "KAIROS_PREFERRED_REVIEW_HOUR", "KAIROS_VERBOSE"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def deck_path(tmp_path):
    return tmp_path / "deck.json"


@pytest.fixture
def fresh_card():
    return CardSchedulingState.new("c1")
