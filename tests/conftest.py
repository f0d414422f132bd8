import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))
sys.path.insert(0, str(ROOT_DIR / "tests"))

from fakes import FakeOpenAI, FakeSupabase, studio_handler  # noqa: E402

from logo_studio.main import create_app  # noqa: E402
from logo_studio.services.logo_generator import LogoGenerator  # noqa: E402
from logo_studio.services.model_client import ModelClient  # noqa: E402
from logo_studio.services.store import SupabaseStore  # noqa: E402


def make_generator(fake_openai: FakeOpenAI, max_attempts: int = 3) -> LogoGenerator:
    return LogoGenerator(
        analysis_client=ModelClient(fake_openai, "analysis-model", max_attempts=max_attempts, retry_delay=0),
        concept_client=ModelClient(fake_openai, "concept-model", max_attempts=max_attempts, retry_delay=0),
    )


@pytest.fixture()
def fake_db():
    return FakeSupabase()


@pytest.fixture()
def store(fake_db):
    return SupabaseStore(fake_db)


@pytest.fixture()
def fake_openai():
    return FakeOpenAI(studio_handler())


@pytest.fixture()
def generator(fake_openai):
    return make_generator(fake_openai)


@pytest.fixture()
def api_client(store, generator):
    app = create_app(store=store, generator=generator, serve_ui=False)
    with TestClient(app) as client:
        yield client
