from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class HistoryTurn(BaseModel):
    # anything other than "user" is sent to the model as a "model" turn
    role: str = ""
    content: str = ""

    @field_validator("role", "content", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class ChatRequest(BaseModel):
    history: List[HistoryTurn] = Field(default_factory=list)
    message: Optional[str] = None

    @field_validator("history", mode="before")
    @classmethod
    def _history_must_be_list(cls, v: Any) -> Any:
        # anything that is not a list is treated as an empty conversation
        return v if isinstance(v, list) else []


class GroundingSource(BaseModel):
    title: str
    uri: str


class ChatResponse(BaseModel):
    text: str
    sources: List[GroundingSource] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
