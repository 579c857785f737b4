import os
from types import SimpleNamespace

import pytest

# must be set before jurispol.settings is imported
os.environ["OTEL_ENABLED"] = "false"
os.environ.setdefault("LOG_LEVEL", "WARNING")


def fake_response(text, chunks=()):
    """Shape of a google-genai GenerateContentResponse as far as the relay reads it."""
    web_chunks = [SimpleNamespace(web=SimpleNamespace(uri=c["uri"], title=c["title"])) for c in chunks]
    candidate = SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=web_chunks))
    return SimpleNamespace(text=text, candidates=[candidate])


class StubGenerator:
    def __init__(self, result=None, error=None):
        self.result = result if result is not None else ("ok", [])
        self.error = error
        self.calls = []

    def generate(self, history, message):
        self.calls.append((list(history), message))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def stub_generator():
    return StubGenerator()
