"""Create actions: store memories, store conversations, delete memories."""

from typing import Any

from pydantic import Field

from memphora_bridge.actions.base import ActionParams, UserScopedParams, client_for
from memphora_bridge.actions.context import InvocationContext
from memphora_bridge.actions.registry import registry
from memphora_bridge.config import settings
from memphora_bridge.memory.metadata import integration_metadata, merge_metadata
from memphora_bridge.memory.parser import parse_conversation


class MetadataParams(UserScopedParams):
    category: str | None = Field(
        default=None,
        description='Optional category for organizing memories (e.g., "preferences", "work")',
    )
    tags: str | None = Field(
        default=None,
        description='Comma-separated tags (e.g., "important, customer, vip")',
    )
    custom_metadata: str | dict[str, Any] | None = Field(
        default=None,
        description='Additional metadata as JSON (e.g., {"priority": "high"})',
    )


# -- store_memory ------------------------------------------------------------


class StoreMemoryParams(MetadataParams):
    content: str = Field(
        min_length=1,
        description='The information to remember. Example: "John prefers email communication"',
    )


@registry.action(
    key="store_memory",
    noun="Memory",
    label="Store Memory",
    description="Stores a new memory in Memphora. The AI will remember this information.",
    kind="create",
    params_model=StoreMemoryParams,
    sample={
        "id": "mem_abc123",
        "user_id": "user_123",
        "content": "John prefers email communication over phone calls",
        "metadata": {"source": "zapier", "category": "preferences"},
        "created_at": "2024-01-15T10:30:00Z",
        "updated_at": "2024-01-15T10:30:00Z",
    },
)
async def store_memory(
    content: str,
    user_id: str | None = None,
    category: str | None = None,
    tags: str | None = None,
    custom_metadata: str | dict[str, Any] | None = None,
    invocation: InvocationContext | None = None,
) -> dict[str, Any]:
    invocation = invocation or InvocationContext()
    metadata = merge_metadata(
        integration_metadata(invocation.zap_id),
        category=category,
        tags=tags,
        custom_metadata=custom_metadata,
    )
    client = client_for(invocation)
    return await client.store_memory(invocation.user_id(user_id), content, metadata)


# -- store_conversation ------------------------------------------------------


class StoreConversationParams(MetadataParams):
    conversation_json: str | list[Any] | None = Field(
        default=None,
        description=(
            'Full conversation as JSON array: [{"role": "user", "content": "..."}, '
            '{"role": "assistant", "content": "..."}]'
        ),
    )
    user_message: str | None = Field(
        default=None,
        description="Single user message (use with Assistant Message for simple exchanges)",
    )
    assistant_message: str | None = Field(
        default=None,
        description="Single assistant response (use with User Message)",
    )
    transcript: str | None = Field(
        default=None,
        description='Plain text transcript with "User:" and "Assistant:" prefixes',
    )
    platform: str | None = Field(
        default=None,
        description='Where this conversation came from (e.g., "intercom", "zendesk", "slack")',
    )


@registry.action(
    key="store_conversation",
    noun="Conversation",
    label="Store Conversation",
    description=(
        "Extracts and stores important facts from a conversation. "
        "AI automatically identifies what to remember."
    ),
    kind="create",
    params_model=StoreConversationParams,
    sample={
        "memories_extracted": 2,
        "memories": [
            {"id": "mem_abc123", "content": "User prefers dark mode in applications"},
            {"id": "mem_def456", "content": "User works in software development"},
        ],
        "user_id": "user_123",
        "message_count": 4,
    },
)
async def store_conversation(
    conversation_json: str | list[Any] | None = None,
    user_message: str | None = None,
    assistant_message: str | None = None,
    transcript: str | None = None,
    platform: str | None = None,
    user_id: str | None = None,
    category: str | None = None,
    tags: str | None = None,
    custom_metadata: str | dict[str, Any] | None = None,
    invocation: InvocationContext | None = None,
) -> dict[str, Any]:
    invocation = invocation or InvocationContext()
    messages = parse_conversation(
        conversation_json=conversation_json,
        user_message=user_message,
        assistant_message=assistant_message,
        transcript=transcript,
    )
    base = integration_metadata(
        invocation.zap_id,
        platform=platform or settings.integration_source,
    )
    metadata = merge_metadata(base, category=category, tags=tags, custom_metadata=custom_metadata)

    resolved_user = invocation.user_id(user_id)
    client = client_for(invocation)
    memories = await client.store_conversation(resolved_user, messages, metadata)

    return {
        "memories_extracted": len(memories),
        "memories": [m.model_dump(exclude_unset=True) for m in memories],
        "user_id": resolved_user,
        "message_count": len(messages),
    }


# -- delete_memory -----------------------------------------------------------


class DeleteMemoryParams(ActionParams):
    memory_id: str = Field(
        min_length=1,
        description="The ID of the memory to delete (e.g., from a previous search)",
    )


@registry.action(
    key="delete_memory",
    noun="Memory",
    label="Delete Memory",
    description="Deletes a specific memory by its ID.",
    kind="create",
    params_model=DeleteMemoryParams,
    sample={
        "deleted": True,
        "memory_id": "mem_abc123",
        "message": "Memory successfully deleted",
    },
)
async def delete_memory(
    memory_id: str,
    invocation: InvocationContext | None = None,
) -> dict[str, Any]:
    invocation = invocation or InvocationContext()
    client = client_for(invocation)
    result = await client.delete_memory(memory_id)
    return {**result, "message": "Memory successfully deleted"}
