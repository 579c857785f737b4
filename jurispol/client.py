from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

import requests

from .prompts import BACKEND_UNREACHABLE, GENERIC_CLIENT_ERROR
from .schemas import GroundingSource
from .settings import settings

logger = logging.getLogger(__name__)


class FailureKind(str, Enum):
    HTTP = "http"
    NETWORK = "network"
    QUOTA = "quota"


@dataclass(frozen=True)
class RelayReply:
    text: str
    sources: List[GroundingSource] = field(default_factory=list)


@dataclass(frozen=True)
class RelayFailure:
    kind: FailureKind
    message: str
    detail: Optional[str] = None


RelayResult = Union[RelayReply, RelayFailure]


def _dedupe_sources(raw: Any) -> List[GroundingSource]:
    out: List[GroundingSource] = []
    seen = set()
    for item in raw or []:
        if not isinstance(item, dict):
            continue
        uri, title = item.get("uri"), item.get("title")
        if not uri or uri in seen:
            continue
        seen.add(uri)
        out.append(GroundingSource(title=title or uri, uri=uri))
    return out


def _http_failure(resp: requests.Response) -> RelayFailure:
    detail: Optional[str]
    try:
        data = resp.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        detail = data.get("details") or data.get("error")
    else:
        detail = resp.text or None

    message = f"Error del servidor ({resp.status_code})"
    if detail:
        message += f": {detail}"
    kind = FailureKind.QUOTA if resp.status_code == 429 else FailureKind.HTTP
    return RelayFailure(kind=kind, message=message, detail=detail)


class RelayClient:
    """Talks to the relay's /api/chat endpoint. One attempt per call, no retries."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}/api/chat"

    def send_message(self, history: Sequence[Dict[str, str]], user_input: str) -> RelayResult:
        payload = {
            "history": [{"role": h["role"], "content": h["content"]} for h in history],
            "message": user_input,
        }
        try:
            resp = requests.post(self.chat_url, json=payload, timeout=self.timeout)
        except requests.ConnectionError as e:
            logger.error("Relay unreachable at %s: %s", self.chat_url, e)
            return RelayFailure(kind=FailureKind.NETWORK, message=BACKEND_UNREACHABLE, detail=str(e))
        except requests.RequestException as e:
            logger.error("Relay request failed: %s", e)
            return RelayFailure(kind=FailureKind.NETWORK, message=GENERIC_CLIENT_ERROR, detail=str(e))

        if not resp.ok:
            failure = _http_failure(resp)
            logger.warning("Relay answered %s: %s", resp.status_code, failure.detail)
            return failure

        try:
            data = resp.json()
            return RelayReply(text=str(data.get("text") or ""), sources=_dedupe_sources(data.get("sources")))
        except (ValueError, AttributeError, TypeError) as e:
            # ValueError also covers pydantic's ValidationError
            logger.error("Unreadable relay reply: %s", e)
            return RelayFailure(kind=FailureKind.HTTP, message=GENERIC_CLIENT_ERROR, detail=str(e))
