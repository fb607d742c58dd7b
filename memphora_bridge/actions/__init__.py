"""Action framework: import action modules here to register them."""

# Import action modules so their @registry.action() decorators execute.
from memphora_bridge.actions import creates, searches, triggers  # noqa: F401
from memphora_bridge.actions.context import InvocationContext
from memphora_bridge.actions.registry import registry

__all__ = ["InvocationContext", "registry"]
