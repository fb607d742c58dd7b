"""Connection test and label for a Memphora API key."""

from memphora_bridge.actions.base import client_for
from memphora_bridge.actions.context import InvocationContext


async def check_connection(invocation: InvocationContext) -> dict[str, str]:
    """Verify the invocation's API key.

    Raises:
        AuthenticationError: The key is missing or rejected.
    """
    client = client_for(invocation)
    return await client.check_auth()


def connection_label(invocation: InvocationContext) -> str:
    """Human-readable name for the connection."""
    return f"Memphora ({invocation.user_id()})"
