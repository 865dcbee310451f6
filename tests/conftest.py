import pytest

from tests.support.factories import FakeSpotifyAPI


@pytest.fixture
def fake_api() -> FakeSpotifyAPI:
    return FakeSpotifyAPI()


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    """Record backoff sleeps instead of waiting."""
    recorded: list[float] = []
    monkeypatch.setattr("extraction.apis.rate_limit.time.sleep", recorded.append)
    return recorded
