"""
Pytest fixtures for logbook engine tests.
"""

import pytest

from application.use_cases import CloneEngine, GenerateWeekUseCase
from logbook.core.history_reader import HistoryReader
from logbook.core.weight_resolver import WeightResolver
from logbook.engine import LogbookEngine
from logbook.settings import Settings
from tests.fakes import FakeDataStore

TEST_USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with no Supabase or Sentry configuration."""
    return Settings(environment="test", _env_file=None)


@pytest.fixture
def store() -> FakeDataStore:
    """Empty in-memory store signed in as TEST_USER_ID."""
    return FakeDataStore(user_id=TEST_USER_ID)


@pytest.fixture
def history_reader(store) -> HistoryReader:
    return HistoryReader(store)


@pytest.fixture
def clone_engine(store) -> CloneEngine:
    return CloneEngine(store)


@pytest.fixture
def generator(store, clone_engine, history_reader) -> GenerateWeekUseCase:
    return GenerateWeekUseCase(
        store=store,
        clone_engine=clone_engine,
        resolver_factory=lambda: WeightResolver(history_reader),
    )


@pytest.fixture
def engine(store, test_settings) -> LogbookEngine:
    return LogbookEngine(store, settings=test_settings)
