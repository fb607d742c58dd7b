"""Search actions: semantic search and prompt-ready context."""

from typing import Any

from pydantic import Field

from memphora_bridge.actions.base import UserScopedParams, client_for, record_output
from memphora_bridge.actions.context import InvocationContext
from memphora_bridge.actions.registry import registry
from memphora_bridge.config import settings
from memphora_bridge.memory.context import assemble_context

SEARCH_OUTPUT_FIELDS = ("id", "content", "user_id", "score", "created_at", "metadata")

# -- search_memories ---------------------------------------------------------


class SearchMemoriesParams(UserScopedParams):
    query: str = Field(
        min_length=1,
        description='What to search for. Example: "customer preferences" or "previous issues"',
    )
    limit: int | None = Field(
        default=None,
        ge=1,
        le=20,
        description="Maximum number of memories to return (1-20). Defaults to 5.",
    )


@registry.action(
    key="search_memories",
    noun="Memory",
    label="Search Memories",
    description="Searches for relevant memories using AI-powered semantic search.",
    kind="search",
    params_model=SearchMemoriesParams,
    sample={
        "id": "mem_abc123",
        "content": "Customer prefers email communication over phone calls",
        "user_id": "user_123",
        "score": 0.92,
        "created_at": "2024-01-15T10:30:00Z",
        "metadata": '{"category": "preferences"}',
    },
)
async def search_memories(
    query: str,
    user_id: str | None = None,
    limit: int | None = None,
    invocation: InvocationContext | None = None,
) -> list[dict[str, Any]]:
    invocation = invocation or InvocationContext()
    client = client_for(invocation)
    records = await client.search_memories(
        invocation.user_id(user_id),
        query,
        limit or settings.search_default_limit,
    )
    return [record_output(r, SEARCH_OUTPUT_FIELDS) for r in records]


# -- get_context -------------------------------------------------------------


class GetContextParams(UserScopedParams):
    query: str = Field(
        min_length=1,
        description="What context to retrieve. Usually the user's question or topic.",
    )
    limit: int | None = Field(
        default=None,
        ge=1,
        le=50,
        description="Maximum number of memories to include in context. Defaults to 10.",
    )
    prefix: str | None = Field(
        default=None,
        description="Text to prepend to the context",
    )


@registry.action(
    key="get_context",
    noun="Context",
    label="Get Context for AI",
    description="Gets formatted context from memories, ready to use in AI prompts.",
    kind="search",
    params_model=GetContextParams,
    sample={
        "context": (
            "Relevant context from previous conversations:\n"
            "- User prefers dark mode\n"
            "- User works as a software engineer"
        ),
        "memory_count": 2,
        "user_id": "user_123",
        "query": "user preferences",
        "has_context": True,
    },
)
async def get_context(
    query: str,
    user_id: str | None = None,
    limit: int | None = None,
    prefix: str | None = None,
    invocation: InvocationContext | None = None,
) -> list[dict[str, Any]]:
    invocation = invocation or InvocationContext()
    resolved_user = invocation.user_id(user_id)
    limit = limit or settings.context_default_limit

    client = client_for(invocation)
    records = await client.search_memories(resolved_user, query, limit)
    result = assemble_context(records, prefix=prefix, limit=limit)

    return [
        {
            **result.model_dump(),
            "user_id": resolved_user,
            "query": query,
        }
    ]
