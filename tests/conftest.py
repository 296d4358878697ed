"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (wired engine)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 6, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    """Provide a manually advanced clock."""
    return ManualClock()


@pytest.fixture
def make_record():
    """Factory for primary-format content records."""

    def _make(
        item_id: str,
        category: str = "dogBreeds",
        difficulty: str = "easy",
        text_en: str | None = None,
        text_de: str | None = None,
        tags: list[str] | None = None,
    ) -> dict:
        return {
            "id": item_id,
            "category": category,
            "difficulty": difficulty,
            "text": {
                "de": text_de or f"Frage {item_id}?",
                "en": text_en or f"Question {item_id}?",
            },
            "answers": {
                "de": ["A", "B", "C", "D"],
                "en": ["A", "B", "C", "D"],
            },
            "correctAnswerIndex": 1,
            "hint": {"en": f"Hint for {item_id}"},
            "funFact": {"en": f"Fact about {item_id}"},
            "tags": tags or [],
        }

    return _make


@pytest.fixture
def twelve_item_document(make_record):
    """Twelve items split over two categories and several tiers."""
    tiers = ["easy", "easy+", "medium", "hard", "easy", "medium"]
    return {
        "dogBreeds": [
            make_record(f"breeds-{n:02d}", "dogBreeds", tiers[n]) for n in range(6)
        ],
        "dogTraining": [
            make_record(f"training-{n:02d}", "dogTraining", tiers[n]) for n in range(6)
        ],
    }


@pytest.fixture
def sample_progress_dict():
    """Provide serialized path progress for testing."""
    return {
        "path": "dogTraining",
        "current_checkpoint": "pug",
        "answered_ids": [f"q-{n}" for n in range(1, 18)],
        "power_up_inventory": {"fiftyFifty": 2, "hint": 1, "teleport": 4},
        "lives_remaining": 1,
        "questions_answered": 17,
        "correct_answers": 14,
        "fallback_count": 0,
    }
