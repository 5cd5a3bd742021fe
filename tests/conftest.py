"""Shared fixtures: a recording stub provider and an app wired to it."""

import os

os.environ.setdefault("GEMINI_API_KEY", "test_key")

import pytest
from fastapi.testclient import TestClient

from genrelay.config import Settings, get_settings
from genrelay.exceptions import RemoteError
from genrelay.main import create_app
from genrelay.models import RemoteFileHandle
from genrelay.services.llm import GenerationProvider
from genrelay.services.storage import ScratchStorage


class StubProvider(GenerationProvider):
    """Provider returning canned values and recording every call."""

    name = "stub"

    def __init__(self, output="stub output", generate_error=None, upload_error=None):
        self.output = output
        self.generate_error = generate_error
        self.upload_error = upload_error
        self.generate_calls = []
        self.upload_calls = []

    async def upload_file(self, data, mime_type):
        self.upload_calls.append((data, mime_type))
        if self.upload_error is not None:
            raise self.upload_error
        return RemoteFileHandle(uri=f"https://files.example/{len(self.upload_calls)}", mime_type=mime_type)

    async def generate(self, model, contents):
        self.generate_calls.append((model, list(contents)))
        if self.generate_error is not None:
            raise self.generate_error
        return self.output


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def failing_provider():
    return StubProvider(generate_error=RemoteError("quota exceeded"))


@pytest.fixture
def scratch_dir(tmp_path):
    return tmp_path / "scratch"


@pytest.fixture
def storage(scratch_dir):
    return ScratchStorage(scratch_dir)


@pytest.fixture
def settings(scratch_dir):
    return Settings(gemini_api_key="test_key", scratch_dir=scratch_dir)


@pytest.fixture
def make_client(storage, settings):
    """Factory building a TestClient around a given provider."""

    def _make(stub, **overrides):
        app = create_app(provider=stub, storage=storage)
        app.dependency_overrides[get_settings] = lambda: settings.model_copy(update=overrides)
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, provider):
    return make_client(provider)
