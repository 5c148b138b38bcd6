import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient
from network_blocker import install_network_blocker

from db.models import ALL_DOCUMENT_MODELS  # noqa: E402
from gps.token_cache import reset_token_cache  # noqa: E402


@pytest.fixture(autouse=True)
def _default_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GPS_BASE_URL", "https://api.gps51.com")
    monkeypatch.setenv("GPS_USERNAME", "fleet@example.com")
    monkeypatch.setenv("GPS_PASSWORD", "secret")
    install_network_blocker(monkeypatch)


@pytest.fixture(autouse=True)
def _fresh_token_cache():
    reset_token_cache()
    yield
    reset_token_cache()


@pytest.fixture
async def beanie_db():
    client = AsyncMongoMockClient()
    database = client["test_db"]
    await init_beanie(database=database, document_models=ALL_DOCUMENT_MODELS)
    return database
