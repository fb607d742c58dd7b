"""Polling triggers."""

from typing import Any

from memphora_bridge.actions.base import UserScopedParams, client_for, record_output
from memphora_bridge.actions.context import InvocationContext
from memphora_bridge.actions.registry import registry
from memphora_bridge.config import settings
from memphora_bridge.memory.context import order_by_recency

POLL_OUTPUT_FIELDS = ("id", "content", "user_id", "created_at", "updated_at", "metadata")


class NewMemoryParams(UserScopedParams):
    pass


@registry.action(
    key="new_memory",
    noun="Memory",
    label="New Memory",
    description="Triggers when a new memory is created.",
    kind="trigger",
    params_model=NewMemoryParams,
    sample={
        "id": "mem_abc123",
        "content": "User mentioned they prefer morning meetings",
        "user_id": "user_123",
        "created_at": "2024-01-15T10:30:00Z",
        "updated_at": "2024-01-15T10:30:00Z",
        "metadata": '{"source": "slack"}',
    },
)
async def new_memory(
    user_id: str | None = None,
    invocation: InvocationContext | None = None,
) -> list[dict[str, Any]]:
    """Latest memories for the user, newest first.

    Deduplication across polls is the platform's job; this only lists.
    """
    invocation = invocation or InvocationContext()
    client = client_for(invocation)
    records = await client.list_memories(invocation.user_id(user_id), settings.poll_limit)
    return [record_output(r, POLL_OUTPUT_FIELDS) for r in order_by_recency(records)]
