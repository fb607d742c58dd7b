"""Tests for the Memphora API client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from memphora_bridge.errors import AuthenticationError
from memphora_bridge.memory.client import INVALID_KEY_MESSAGE, MemphoraClient
from memphora_bridge.memory.models import MemoryRecord, Message

BASE_URL = "https://api.memphora.ai/api/v1"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _response(status_code: int, json_data=None, method: str = "POST") -> httpx.Response:
    kwargs = {"json": json_data} if json_data is not None else {}
    return httpx.Response(
        status_code=status_code,
        request=httpx.Request(method, BASE_URL),
        **kwargs,
    )


def _mock_httpx_client(mock_client_cls: MagicMock, response: httpx.Response) -> AsyncMock:
    """Wire up an AsyncClient context-manager mock that returns *response*."""
    mock_client = AsyncMock()
    mock_client.request.return_value = response
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client_cls.return_value = mock_client
    return mock_client


@pytest.fixture
def client() -> MemphoraClient:
    return MemphoraClient(api_key="test-key", base_url=BASE_URL)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_missing_key_raises(self) -> None:
        with pytest.raises(AuthenticationError, match="not configured"):
            MemphoraClient(api_key="")

    def test_bearer_header(self, client: MemphoraClient) -> None:
        assert client.headers == {"Authorization": "Bearer test-key"}

    def test_trailing_slash_trimmed(self) -> None:
        c = MemphoraClient(api_key="k", base_url="https://example.com/api/")
        assert c.base_url == "https://example.com/api"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestStoreMemory:
    async def test_posts_payload(self, client: MemphoraClient) -> None:
        record = {"id": "mem_1", "content": "Likes tea"}
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            mock = _mock_httpx_client(mock_cls, _response(201, record))
            result = await client.store_memory("user_1", "Likes tea", {"source": "zapier"})

        assert result == record
        args, kwargs = mock.request.call_args
        assert args == ("POST", f"{BASE_URL}/memories")
        assert kwargs["json"] == {
            "user_id": "user_1",
            "content": "Likes tea",
            "metadata": {"source": "zapier"},
        }
        assert kwargs["headers"]["Authorization"] == "Bearer test-key"


class TestStoreConversation:
    async def test_sends_messages_and_normalizes(self, client: MemphoraClient) -> None:
        messages = [
            Message(role="user", content="I use vim"),
            Message(role="assistant", content="Nice"),
        ]
        body = {"memories": [{"id": "mem_1", "content": "Uses vim"}]}
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            mock = _mock_httpx_client(mock_cls, _response(200, body))
            records = await client.store_conversation("user_1", messages, {"source": "zapier"})

        assert records == [MemoryRecord(id="mem_1", content="Uses vim")]
        args, kwargs = mock.request.call_args
        assert args[1] == f"{BASE_URL}/conversations/extract"
        assert kwargs["json"]["conversation"] == [
            {"role": "user", "content": "I use vim"},
            {"role": "assistant", "content": "Nice"},
        ]

    async def test_missing_memories_is_empty(self, client: MemphoraClient) -> None:
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            _mock_httpx_client(mock_cls, _response(200, {"status": "queued"}))
            records = await client.store_conversation(
                "user_1", [Message(role="user", content="x")], {}
            )

        assert records == []


class TestDeleteMemory:
    async def test_deletes_by_id(self, client: MemphoraClient) -> None:
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            mock = _mock_httpx_client(mock_cls, _response(204, method="DELETE"))
            result = await client.delete_memory("mem_1")

        assert result == {"deleted": True, "memory_id": "mem_1"}
        args, _ = mock.request.call_args
        assert args == ("DELETE", f"{BASE_URL}/memories/mem_1")

    async def test_id_is_path_escaped(self, client: MemphoraClient) -> None:
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            mock = _mock_httpx_client(mock_cls, _response(204, method="DELETE"))
            await client.delete_memory("a/b")

        args, _ = mock.request.call_args
        assert args[1] == f"{BASE_URL}/memories/a%2Fb"


class TestSearchMemories:
    async def test_bare_list_response(self, client: MemphoraClient) -> None:
        body = [{"id": "mem_1", "content": "Likes tea", "score": 0.8}]
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            mock = _mock_httpx_client(mock_cls, _response(200, body))
            records = await client.search_memories("user_1", "tea", 5)

        assert [r.id for r in records] == ["mem_1"]
        assert records[0].score == 0.8
        _, kwargs = mock.request.call_args
        assert kwargs["json"] == {"user_id": "user_1", "query": "tea", "limit": 5}

    async def test_wrapped_response(self, client: MemphoraClient) -> None:
        body = {"memories": [{"id": "mem_1"}, {"id": "mem_2"}]}
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            _mock_httpx_client(mock_cls, _response(200, body))
            records = await client.search_memories("user_1", "tea", 5)

        assert [r.id for r in records] == ["mem_1", "mem_2"]


class TestListMemories:
    async def test_gets_user_path_with_limit(self, client: MemphoraClient) -> None:
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            mock = _mock_httpx_client(mock_cls, _response(200, [], method="GET"))
            await client.list_memories("user 1", 20)

        args, kwargs = mock.request.call_args
        assert args == ("GET", f"{BASE_URL}/memories/user/user%201")
        assert kwargs["params"] == {"limit": 20}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    async def test_401_raises_authentication_error(self, client: MemphoraClient) -> None:
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            _mock_httpx_client(mock_cls, _response(401, {"detail": "bad key"}))
            with pytest.raises(AuthenticationError, match=INVALID_KEY_MESSAGE):
                await client.search_memories("user_1", "tea", 5)

    async def test_server_error_propagates(self, client: MemphoraClient) -> None:
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            mock = _mock_httpx_client(mock_cls, _response(503, {"detail": "down"}))
            with pytest.raises(httpx.HTTPStatusError):
                await client.store_memory("user_1", "x", {})

        assert mock.request.call_count == 1

    async def test_transport_error_propagates(self, client: MemphoraClient) -> None:
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            mock = _mock_httpx_client(mock_cls, _response(200, {}))
            mock.request.side_effect = httpx.ConnectError("refused")
            with pytest.raises(httpx.ConnectError):
                await client.list_memories("user_1", 20)

    async def test_non_json_body_raises_decoding_error(self, client: MemphoraClient) -> None:
        response = httpx.Response(
            status_code=200,
            request=httpx.Request("POST", BASE_URL),
            content=b"<html>gateway</html>",
        )
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            _mock_httpx_client(mock_cls, response)
            with pytest.raises(httpx.DecodingError, match="non-JSON body"):
                await client.search_memories("user_1", "tea", 5)


class TestCheckAuth:
    async def test_success(self, client: MemphoraClient) -> None:
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            mock = _mock_httpx_client(mock_cls, _response(200, {"ok": True}, method="GET"))
            result = await client.check_auth()

        assert result["status"] == "authenticated"
        args, _ = mock.request.call_args
        assert args == ("GET", f"{BASE_URL}/health")

    async def test_rejected_key(self, client: MemphoraClient) -> None:
        with patch("memphora_bridge.memory.client.httpx.AsyncClient") as mock_cls:
            _mock_httpx_client(mock_cls, _response(401, method="GET"))
            with pytest.raises(AuthenticationError):
                await client.check_auth()
