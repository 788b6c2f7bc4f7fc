"""
Shared fixtures and test configuration for database tests
"""

import pytest

from database.animals_db import AnimalsDatabase
from database.initialize_db import DatabaseManager
from models import SAMPLE_ANIMALS


class FeedbackRecorder:
    """Collects user_feedback messages in order"""

    def __init__(self):
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    def errors(self) -> list[str]:
        return [m for m in self.messages if m.startswith("[ERROR]")]


@pytest.fixture
def feedback():
    """Recording user_feedback callback"""
    return FeedbackRecorder()


@pytest.fixture
def db_path(tmp_path):
    """Path of a not-yet-created store file"""
    return tmp_path / "animals.db"


@pytest.fixture
def db_manager(db_path, feedback):
    """Open database manager with the schema applied"""
    manager = DatabaseManager(db_path, feedback)
    manager.connect()
    manager.ensure_schema()
    yield manager
    manager.close()


@pytest.fixture
def animals_db(db_manager):
    """AnimalsDatabase on an empty store"""
    return AnimalsDatabase(db_manager)


@pytest.fixture
def seeded_animals_db(animals_db):
    """AnimalsDatabase pre-seeded with the sample animals"""
    created_ids = []
    for animal in SAMPLE_ANIMALS:
        result = animals_db.create_animal(animal)
        assert result["success"], result
        created_ids.append(result["id"])
    return animals_db, created_ids


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with markers"""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
