"""Shared fixtures for ptcglog tests."""

from pathlib import Path

import pytest

from ptcglog.utils import reset_event_counter

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def fresh_event_ids():
    """Every test starts from event-1."""
    reset_event_counter()
    yield
    reset_event_counter()


@pytest.fixture
def sample_log_path() -> Path:
    return FIXTURES_DIR / "sample_log.txt"


@pytest.fixture
def sample_log(sample_log_path) -> str:
    """A full eleven-turn match ending in a deck out."""
    return sample_log_path.read_text(encoding="utf-8")
