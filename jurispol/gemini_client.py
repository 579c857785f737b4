from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from google import genai
from google.genai import types

from .prompts import FALLBACK_ANSWER, SYSTEM_INSTRUCTION
from .schemas import GroundingSource, HistoryTurn

logger = logging.getLogger(__name__)


class MissingApiKeyError(RuntimeError):
    pass


def build_contents(history: Sequence[HistoryTurn], message: str) -> List[types.Content]:
    """Map the client's history to Gemini turns and append the new message."""
    contents = [
        types.Content(
            role="user" if turn.role == "user" else "model",
            parts=[types.Part(text=turn.content)],
        )
        for turn in history
    ]
    contents.append(types.Content(role="user", parts=[types.Part(text=message)]))
    return contents


def extract_sources(response: Any) -> List[GroundingSource]:
    """Web citations from the first candidate's grounding metadata, unique by URI."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    seen = set()
    sources: List[GroundingSource] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        title = getattr(web, "title", None)
        if not uri or not title or uri in seen:
            continue
        seen.add(uri)
        sources.append(GroundingSource(title=title, uri=uri))
    return sources


def is_quota_error(exc: BaseException) -> bool:
    # google.genai.errors.APIError carries the HTTP status in `code`
    for attr in ("code", "status", "status_code"):
        if getattr(exc, attr, None) == 429:
            return True
    message = str(exc)
    return "429" in message or "quota" in message.lower()


class GeminiClient:
    def __init__(self, api_key: str, model: str, client: Optional[Any] = None):
        if not api_key:
            raise MissingApiKeyError("Missing API_KEY (or GEMINI_API_KEY / GOOGLE_API_KEY) in environment.")

        self.model = model
        self.client = client or genai.Client(api_key=api_key)
        self.config = types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            tools=[types.Tool(google_search=types.GoogleSearch())],
        )

    def generate(self, history: Sequence[HistoryTurn], message: str) -> Tuple[str, List[GroundingSource]]:
        contents = build_contents(history, message)
        logger.info("Querying %s with %d turns", self.model, len(contents))
        resp = self.client.models.generate_content(
            model=self.model,
            contents=contents,
            config=self.config,
        )
        text = getattr(resp, "text", None) or FALLBACK_ANSWER
        return text, extract_sources(resp)
