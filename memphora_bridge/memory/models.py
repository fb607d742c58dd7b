"""Data models for conversations, memory records, and rendered context."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Message(BaseModel):
    """A single conversation message."""

    role: Literal["user", "assistant"]
    content: str = Field(min_length=1)


class MemoryRecord(BaseModel):
    """A memory returned by the Memphora API.

    Fields the service sends beyond these are kept as extras.
    """

    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    id: str = ""
    user_id: str = ""
    content: str = ""
    score: float | None = None  # search results only
    created_at: str = ""
    updated_at: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ContextResult(BaseModel):
    """Memories rendered into a prompt-ready block."""

    context: str = ""
    memory_count: int = Field(default=0, ge=0)

    @computed_field
    @property
    def has_context(self) -> bool:
        return self.memory_count > 0
