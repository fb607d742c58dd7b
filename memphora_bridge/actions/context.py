"""InvocationContext: per-call details the automation platform supplies."""

from dataclasses import dataclass

from memphora_bridge.config import settings


@dataclass
class InvocationContext:
    """Context for a single action invocation.

    Attributes:
        zap_id: Identifier of the automation that triggered the call.
        api_key: Memphora API key for this connection. Falls back to
            MEMPHORA_API_KEY when empty.
        default_user_id: Connection-level default user. Falls back to
            DEFAULT_USER_ID when empty.
    """

    zap_id: str = ""
    api_key: str = ""
    default_user_id: str = ""

    def __post_init__(self) -> None:
        if not self.zap_id:
            self.zap_id = "unknown"

    def user_id(self, requested: str | None = None) -> str:
        """Resolve the user for this call: input, then connection, then config."""
        return settings.resolve_user_id(requested, self.default_user_id)
