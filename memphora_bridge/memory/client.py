"""Memphora REST API client.

One HTTP request per call, no retries. A 401 becomes
``AuthenticationError``; any other error status propagates as
``httpx.HTTPStatusError`` for the caller to report. A 2xx body that is not
JSON raises ``httpx.DecodingError``.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from memphora_bridge.config import settings
from memphora_bridge.errors import AuthenticationError
from memphora_bridge.memory.models import MemoryRecord, Message
from memphora_bridge.memory.records import normalize_records

logger = logging.getLogger(__name__)

INVALID_KEY_MESSAGE = "Invalid API key. Please check your Memphora API key."


class MemphoraClient:
    """Thin async wrapper over the Memphora memory endpoints."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key or settings.memphora_api_key
        if not self.api_key:
            msg = "Memphora API key is not configured. Set MEMPHORA_API_KEY."
            raise AuthenticationError(msg)
        self.base_url = (base_url or settings.memphora_api_url).rstrip("/")
        self.timeout = timeout or settings.memphora_timeout_seconds

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("Memphora %s %s", method, path)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.request(method, url, headers=self.headers, **kwargs)

        if resp.status_code == 401:
            raise AuthenticationError(INVALID_KEY_MESSAGE)
        resp.raise_for_status()
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            msg = f"Memphora returned a non-JSON body for {method} {path}"
            raise httpx.DecodingError(msg, request=resp.request) from exc

    # -- Auth ----------------------------------------------------------------

    async def check_auth(self) -> dict[str, str]:
        """Verify the API key against the health endpoint."""
        await self._request("GET", "/health")
        return {
            "status": "authenticated",
            "message": "Successfully connected to Memphora",
        }

    # -- Write ---------------------------------------------------------------

    async def store_memory(
        self,
        user_id: str,
        content: str,
        metadata: dict[str, Any],
    ) -> dict[str, Any]:
        """Store a single memory. Returns the service's record as-is."""
        data = await self._request(
            "POST",
            "/memories",
            json={"user_id": user_id, "content": content, "metadata": metadata},
        )
        logger.info("Stored memory for user %s: %s", user_id, content[:80])
        return data

    async def store_conversation(
        self,
        user_id: str,
        messages: list[Message],
        metadata: dict[str, Any],
    ) -> list[MemoryRecord]:
        """Send a conversation for fact extraction. Returns extracted memories."""
        data = await self._request(
            "POST",
            "/conversations/extract",
            json={
                "user_id": user_id,
                "conversation": [m.model_dump() for m in messages],
                "metadata": metadata,
            },
        )
        records = normalize_records(data)
        logger.info(
            "Extracted %d memories from %d messages for user %s",
            len(records),
            len(messages),
            user_id,
        )
        return records

    # -- Delete --------------------------------------------------------------

    async def delete_memory(self, memory_id: str) -> dict[str, Any]:
        await self._request("DELETE", f"/memories/{quote(memory_id, safe='')}")
        logger.info("Deleted memory: %s", memory_id)
        return {"deleted": True, "memory_id": memory_id}

    # -- Read ----------------------------------------------------------------

    async def search_memories(
        self,
        user_id: str,
        query: str,
        limit: int,
    ) -> list[MemoryRecord]:
        """Semantic search. Results come back ranked, best match first."""
        data = await self._request(
            "POST",
            "/memories/search",
            json={"user_id": user_id, "query": query, "limit": limit},
        )
        return normalize_records(data)

    async def list_memories(self, user_id: str, limit: int) -> list[MemoryRecord]:
        """List a user's memories. Order is whatever the service returns."""
        data = await self._request(
            "GET",
            f"/memories/user/{quote(user_id, safe='')}",
            params={"limit": limit},
        )
        return normalize_records(data)
