import pytest

from jurispol import observability


@pytest.fixture
def instrumented(monkeypatch):
    calls = {"provider": [], "requests": 0}

    class FakeRequestsInstrumentor:
        def instrument(self):
            calls["requests"] += 1

    monkeypatch.setattr(observability.trace, "set_tracer_provider", calls["provider"].append)
    monkeypatch.setattr(observability, "RequestsInstrumentor", FakeRequestsInstrumentor)
    return calls


def test_relay_tracing_leaves_requests_alone(instrumented):
    observability.setup_tracing("jurispol-relay", "http://localhost:4318")

    assert len(instrumented["provider"]) == 1
    assert instrumented["requests"] == 0


def test_client_tracing_instruments_requests(instrumented):
    observability.setup_tracing("jurispol-ui", "http://localhost:4318", instrument_requests=True)

    assert instrumented["requests"] == 1
