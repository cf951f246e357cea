import json

import pytest
from fastapi.testclient import TestClient

from cogniclear.main import app, limiter
from cogniclear.settings import Settings, get_settings

limiter.enabled = False


VALID_PAYLOAD = {
    "overallScore": 42,
    "summary": "The decision leans heavily on sunk costs.",
    "biases": [
        {
            "name": "Sunk Cost Fallacy",
            "description": "Past spending is used to justify further spending.",
            "confidence": 91,
            "triggerPhrase": "we can't just throw away that investment",
        },
        {
            "name": "Optimism Bias",
            "description": "A turnaround is assumed without evidence.",
            "confidence": 64,
            "triggerPhrase": "we can probably turn it around",
        },
    ],
    "metrics": {"rationality": 35, "objectivity": 40, "completeness": 50},
    "correction": "Evaluate the next $500k on expected future returns only.",
}

DECISION_TEXT = (
    "We've already spent $2 million on Project X. Even though interest is "
    "declining, we can't just throw away that investment. If we put in "
    "another $500k, we can probably turn it around."
)


class FakeOllamaClient:
    """Stands in for ``ollama.AsyncClient``; records every chat call."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def chat(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"message": {"role": "assistant", "content": self.content}}


@pytest.fixture
def settings():
    return Settings(_env_file=None, ollama_api_key="test-key")


@pytest.fixture
def valid_json():
    return json.dumps(VALID_PAYLOAD)


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


class ClosableOllamaClient(FakeOllamaClient):
    """Fake client that tracks the ``async with`` lifecycle."""

    def __init__(self, content=None, error=None):
        super().__init__(content=content, error=error)
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True
