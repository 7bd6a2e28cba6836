"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pytest

from mecenas.config.schema import MecenasConfig
from mecenas.privacy import PiiDetector
from mecenas.store import InMemoryCaseStore
from mecenas.store.models import Session
from mecenas.tools import ToolDispatcher, build_default_registry

# Valid PESEL (checksum digit 9)
VALID_PESEL = "44051401359"


@pytest.fixture
def default_config() -> MecenasConfig:
    """Provide a default configuration with the SQLite audit store disabled."""
    config = MecenasConfig()
    config.audit.enabled = False
    return config


@pytest.fixture
def store() -> InMemoryCaseStore:
    """Provide an empty in-memory case store."""
    return InMemoryCaseStore()


@pytest.fixture
def session() -> Session:
    """Provide a fresh chat session."""
    return Session(key="test-session-0001", user_id="user-1", channel="cli")


@pytest.fixture
def detector() -> PiiDetector:
    return PiiDetector()


@pytest.fixture
def audit() -> MagicMock:
    """Audit sink double recording every entry."""
    return MagicMock()


@pytest.fixture
def registry():
    return build_default_registry()


@pytest.fixture
def dispatcher(registry, store, audit) -> ToolDispatcher:
    return ToolDispatcher(registry, store, audit)


@pytest.fixture
def client_and_case(store):
    """A client with one civil case."""
    client = store.create_client(name="Jan Kowalski", type="osoba_fizyczna", pesel=VALID_PESEL)
    legal_case = store.create_case(
        client_id=client.id,
        title="Kowalski przeciwko Bankowi",
        law_area="cywilne",
        sygnatura="I C 123/26",
        court="Sąd Rejonowy w Warszawie",
    )
    return client, legal_case

