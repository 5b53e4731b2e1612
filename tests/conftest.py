"""Pytest fixtures for degree audit tests."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path so the audit modules import without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from courses import Course, load_catalog

DATA_DIR = Path(__file__).parent.parent / "data"


@pytest.fixture(autouse=True)
def quiet_logs(monkeypatch):
    """Disable console and file logging for every test."""
    monkeypatch.setenv("ENV", "test")
    return monkeypatch


@pytest.fixture
def make_course():
    """Build a Course with only the fields a test cares about."""

    def build(department="CSE", number=114, credits=3, tags=(), name=""):
        return Course(
            department=department,
            number=number,
            name=name,
            credits=credits,
            distribution_tags=frozenset(tags),
        )

    return build


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def sample_catalog():
    """The shipped sample catalog keyed by course identifier."""
    return load_catalog(DATA_DIR / "courses.sample.json")
