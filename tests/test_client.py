import pytest
import requests

from jurispol import client as client_module
from jurispol.client import FailureKind, RelayClient, RelayFailure, RelayReply
from jurispol.prompts import BACKEND_UNREACHABLE, GENERIC_CLIENT_ERROR
from jurispol.state import ChatSession


class FakeResponse:
    def __init__(self, status_code, json_body=None, text=""):
        self.status_code = status_code
        self._json = json_body
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._json is None:
            raise ValueError("not json")
        return self._json


@pytest.fixture
def post(monkeypatch):
    calls = []

    def install(response=None, error=None):
        def fake_post(url, json=None, timeout=None):
            calls.append({"url": url, "json": json, "timeout": timeout})
            if error is not None:
                raise error
            return response

        monkeypatch.setattr(client_module.requests, "post", fake_post)
        return calls

    return install


def test_success_returns_reply_with_unique_sources(post):
    calls = post(
        FakeResponse(
            200,
            {
                "text": "respuesta",
                "sources": [
                    {"title": "A", "uri": "a"},
                    {"title": "A", "uri": "a"},
                    {"title": "B", "uri": "b"},
                ],
            },
        )
    )
    result = RelayClient("http://relay/", timeout=5).send_message(
        [{"role": "user", "content": "hola"}], "¿y ahora?"
    )

    assert isinstance(result, RelayReply)
    assert result.text == "respuesta"
    assert [s.uri for s in result.sources] == ["a", "b"]
    assert calls == [
        {
            "url": "http://relay/api/chat",
            "json": {"history": [{"role": "user", "content": "hola"}], "message": "¿y ahora?"},
            "timeout": 5,
        }
    ]


def test_missing_sources_default_to_empty(post):
    post(FakeResponse(200, {"text": "ok"}))
    result = RelayClient("http://relay").send_message([], "hola")
    assert result == RelayReply(text="ok", sources=[])


def test_http_error_prefers_details(post):
    post(FakeResponse(500, {"error": "Error interno procesando la solicitud.", "details": "boom"}))
    result = RelayClient("http://relay").send_message([], "hola")

    assert isinstance(result, RelayFailure)
    assert result.kind is FailureKind.HTTP
    assert result.message == "Error del servidor (500): boom"
    assert result.detail == "boom"


def test_http_error_falls_back_to_error_field_then_text(post):
    post(FakeResponse(400, {"error": "El mensaje es obligatorio"}))
    assert RelayClient("http://relay").send_message([], "x").message == "Error del servidor (400): El mensaje es obligatorio"

    post(FakeResponse(502, None, text="Bad Gateway"))
    assert RelayClient("http://relay").send_message([], "x").message == "Error del servidor (502): Bad Gateway"

    post(FakeResponse(503, None, text=""))
    assert RelayClient("http://relay").send_message([], "x").message == "Error del servidor (503)"


def test_429_is_classified_as_quota(post):
    post(FakeResponse(429, {"error": "sobrecargado", "details": "Quota exceeded"}))
    result = RelayClient("http://relay").send_message([], "hola")
    assert result.kind is FailureKind.QUOTA
    assert "429" in result.message


def test_unreachable_backend(post):
    post(error=requests.ConnectionError("connection refused"))
    result = RelayClient("http://relay").send_message([], "hola")

    assert result.kind is FailureKind.NETWORK
    assert result.message == BACKEND_UNREACHABLE
    assert "connection refused" in result.detail


@pytest.mark.parametrize(
    "body",
    [
        {"text": "ok", "sources": [{"uri": "a", "title": 5}]},
        ["not", "an", "object"],
        {"text": "ok", "sources": 7},
    ],
)
def test_malformed_success_body_becomes_failure(post, body):
    post(FakeResponse(200, body))
    result = RelayClient("http://relay").send_message([], "hola")

    assert isinstance(result, RelayFailure)
    assert result.kind is FailureKind.HTTP
    assert result.message == GENERIC_CLIENT_ERROR
    assert result.detail


def test_session_recovers_from_malformed_reply(post):
    post(FakeResponse(200, {"text": "ok", "sources": [{"uri": "a", "title": 5}]}))
    session = ChatSession(RelayClient("http://relay"))

    assert session.send("hola") is None
    assert session.state.is_loading is False
    assert session.state.error == GENERIC_CLIENT_ERROR

    post(FakeResponse(200, {"text": "ya funciona"}))
    assert session.send("otra vez").content == "ya funciona"
