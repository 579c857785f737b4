"""Conversation state held by the client.

The relay keeps nothing between requests, so the client owns the history and
resends it in full on every turn. All mutations go through the functions in
this module; the UI only reads the container.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .client import FailureKind, RelayClient, RelayFailure, RelayReply
from .prompts import GENERIC_CLIENT_ERROR
from .schemas import GroundingSource

logger = logging.getLogger(__name__)


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    role: Role
    content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)
    sources: Optional[Tuple[GroundingSource, ...]] = None

    def as_history(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class ChatState:
    messages: List[Message] = field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None

    def history(self) -> List[Dict[str, str]]:
        return [m.as_history() for m in self.messages]


def begin_send(state: ChatState, text: str) -> Optional[Message]:
    """Append the user's message and mark the state as loading.

    Returns None, leaving the state untouched, for blank input or while a
    previous send is still in flight.
    """
    if not text or not text.strip() or state.is_loading:
        return None
    message = Message(role=Role.USER, content=text)
    state.messages.append(message)
    state.is_loading = True
    state.error = None
    return message


def receive_reply(state: ChatState, reply: RelayReply) -> Message:
    message = Message(
        role=Role.ASSISTANT,
        content=reply.text,
        sources=tuple(reply.sources) if reply.sources else None,
    )
    state.messages.append(message)
    state.is_loading = False
    return message


def fail_send(state: ChatState, failure: RelayFailure) -> None:
    state.is_loading = False
    state.error = failure.message or "Error de conexión con JurisPol. Intente de nuevo."


def clear(state: ChatState) -> None:
    state.messages, state.is_loading, state.error = [], False, None


class ChatSession:
    def __init__(self, client: RelayClient, state: Optional[ChatState] = None):
        self.client = client
        self.state = state if state is not None else ChatState()

    def send(self, text: str) -> Optional[Message]:
        """Run one full turn. Returns the assistant message, or None if nothing was appended."""
        # history is what came before the new message; the relay appends it
        history = self.state.history()
        if begin_send(self.state, text) is None:
            return None

        try:
            result = self.client.send_message(history, text)
        except Exception as e:
            # the loading flag must never outlive the turn
            logger.exception("Unexpected error while sending")
            result = RelayFailure(kind=FailureKind.HTTP, message=GENERIC_CLIENT_ERROR, detail=str(e))

        if isinstance(result, RelayFailure):
            logger.warning("Send failed (%s): %s", result.kind.value, result.message)
            fail_send(self.state, result)
            return None
        return receive_reply(self.state, result)

    def clear(self) -> None:
        clear(self.state)
