"""Base types for the action framework."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from memphora_bridge.actions.context import InvocationContext
from memphora_bridge.memory.client import MemphoraClient
from memphora_bridge.memory.models import MemoryRecord

# Creates return one mapping; searches and triggers return a list of them.
ActionOutput = dict[str, Any] | list[dict[str, Any]]


class ActionParams(BaseModel):
    """Base class for action input models.

    Subclass with Field() definitions. Unknown input fields are ignored;
    the JSON schema comes from model_json_schema().
    """

    model_config = ConfigDict(extra="ignore")


class UserScopedParams(ActionParams):
    """Base params for actions that read or write a user's memories.

    Adds an optional ``user_id``. When omitted the connection default, then
    DEFAULT_USER_ID, is used.
    """

    user_id: str | None = Field(
        default=None,
        description="Unique identifier for the user. Leave empty to use default.",
    )


def client_for(invocation: InvocationContext) -> MemphoraClient:
    """Build a Memphora client for this invocation's connection."""
    return MemphoraClient(api_key=invocation.api_key or None)


def record_output(record: MemoryRecord, fields: tuple[str, ...]) -> dict[str, Any]:
    """Flatten a record for output; metadata is sent as a JSON string."""
    data = record.model_dump(include=set(fields))
    if "metadata" in fields:
        data["metadata"] = json.dumps(record.metadata)
    return {name: data.get(name) for name in fields}
