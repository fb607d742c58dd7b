"""Shared test fixtures."""

from unittest.mock import AsyncMock

import pytest

from memphora_bridge.actions.context import InvocationContext
from memphora_bridge.memory.models import MemoryRecord


@pytest.fixture
def invocation() -> InvocationContext:
    """An invocation carrying its own API key and zap id."""
    return InvocationContext(zap_id="zap_42", api_key="test-key")


@pytest.fixture
def mock_client() -> AsyncMock:
    """A MemphoraClient stand-in with canned responses."""
    client = AsyncMock()
    client.store_memory.return_value = {"id": "mem_new", "content": "stored"}
    client.store_conversation.return_value = [
        MemoryRecord(id="mem_1", content="Prefers dark mode"),
    ]
    client.delete_memory.return_value = {"deleted": True, "memory_id": "mem_1"}
    client.search_memories.return_value = []
    client.list_memories.return_value = []
    client.check_auth.return_value = {
        "status": "authenticated",
        "message": "Successfully connected to Memphora",
    }
    return client
