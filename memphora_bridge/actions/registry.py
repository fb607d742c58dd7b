"""Action registry: central catalog for triggers, searches and creates."""

from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from pydantic import ValidationError

from memphora_bridge.actions.context import InvocationContext
from memphora_bridge.errors import InputError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from memphora_bridge.actions.base import ActionOutput, ActionParams

logger = logging.getLogger(__name__)

ActionKind = Literal["trigger", "search", "create"]
ACTION_KINDS: tuple[ActionKind, ...] = ("trigger", "search", "create")
# Group names used in the app definition.
KIND_GROUPS: dict[ActionKind, str] = {
    "trigger": "triggers",
    "search": "searches",
    "create": "creates",
}


class UnknownActionError(LookupError):
    """Raised when no action is registered under the requested key."""


@dataclass
class ActionDef:
    """Internal representation of a registered action."""

    key: str
    noun: str
    label: str
    description: str
    kind: ActionKind
    handler: Callable[..., Awaitable[ActionOutput]]
    params_model: type[ActionParams] | None = None
    sample: dict[str, Any] = field(default_factory=dict)


class ActionRegistry:
    """Central registry for all actions.

    Usage::

        @registry.action(
            key="store_memory",
            noun="Memory",
            label="Store Memory",
            description="Stores a new memory.",
            kind="create",
            params_model=StoreMemoryParams,
        )
        async def store_memory(content: str, ...) -> dict:
            ...
    """

    def __init__(self) -> None:
        self._actions: dict[str, ActionDef] = {}

    def action(
        self,
        *,
        key: str,
        noun: str,
        label: str,
        description: str,
        kind: ActionKind,
        params_model: type[ActionParams] | None = None,
        sample: dict[str, Any] | None = None,
    ) -> Callable:
        """Decorator to register an async function as an action."""
        if kind not in ACTION_KINDS:
            msg = f"Action '{key}' has unknown kind '{kind}'"
            raise ValueError(msg)

        def decorator(fn: Callable[..., Awaitable[ActionOutput]]) -> Callable:
            if not inspect.iscoroutinefunction(fn):
                msg = f"Action handler '{key}' must be an async function"
                raise TypeError(msg)

            self._actions[key] = ActionDef(
                key=key,
                noun=noun,
                label=label,
                description=description,
                kind=kind,
                handler=fn,
                params_model=params_model,
                sample=sample or {},
            )
            return fn

        return decorator

    def get(self, key: str) -> ActionDef | None:
        """Look up an action by key."""
        return self._actions.get(key)

    @property
    def action_keys(self) -> list[str]:
        """All registered action keys."""
        return list(self._actions.keys())

    def get_actions_by_kind(self) -> dict[ActionKind, list[ActionDef]]:
        """Group registered actions by kind."""
        groups: dict[ActionKind, list[ActionDef]] = {kind: [] for kind in ACTION_KINDS}
        for action_def in self._actions.values():
            groups[action_def.kind].append(action_def)
        return groups

    def describe(self) -> dict[str, dict[str, Any]]:
        """App definition: actions grouped by kind, keyed by action key."""
        return {
            KIND_GROUPS[kind]: {a.key: self._action_schema(a) for a in actions}
            for kind, actions in self.get_actions_by_kind().items()
        }

    async def execute(
        self,
        key: str,
        arguments: dict[str, Any],
        invocation: InvocationContext | None = None,
    ) -> ActionOutput:
        """Validate arguments and run an action.

        The handler receives ``invocation`` when its signature accepts it.

        Raises:
            UnknownActionError: No action is registered under ``key``.
            InputError: Arguments failed validation.
        """
        action_def = self._actions.get(key)
        if action_def is None:
            msg = f"Unknown action: {key}"
            raise UnknownActionError(msg)

        logger.info("Action '%s' called with fields %s", key, sorted(arguments))
        t0 = time.monotonic()

        if action_def.params_model is not None:
            try:
                params = action_def.params_model(**arguments)
            except ValidationError as exc:
                logger.warning("Action '%s' rejected input: %s", key, exc.error_count())
                raise InputError(_validation_message(exc)) from exc
            kwargs = params.model_dump()
        else:
            kwargs = {}

        if _accepts_param(action_def.handler, "invocation"):
            kwargs["invocation"] = invocation or InvocationContext()

        try:
            result = await action_def.handler(**kwargs)
        except InputError as exc:
            logger.warning("Action '%s' rejected input: %s", key, exc)
            raise
        except Exception:
            logger.exception("Action '%s' failed in %.2fs", key, time.monotonic() - t0)
            raise

        logger.info("Action '%s' succeeded in %.2fs", key, time.monotonic() - t0)
        return result

    @staticmethod
    def _action_schema(action_def: ActionDef) -> dict[str, Any]:
        """Build a single action's definition dict."""
        if action_def.params_model is not None:
            input_schema = action_def.params_model.model_json_schema()
        else:
            input_schema = {"type": "object", "properties": {}}

        return {
            "key": action_def.key,
            "noun": action_def.noun,
            "display": {
                "label": action_def.label,
                "description": action_def.description,
            },
            "input_schema": input_schema,
            "sample": action_def.sample,
        }


def _accepts_param(fn: Callable[..., Any], param_name: str) -> bool:
    """Check whether a callable accepts a given parameter name."""
    return param_name in inspect.signature(fn).parameters


def _validation_message(exc: ValidationError) -> str:
    """Summarize a ValidationError as one caller-facing line."""
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ())) or "input"
        if error.get("type") == "missing":
            parts.append(f"Missing required field: {loc}")
        else:
            parts.append(f"{loc}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


# Global registry. Import this from anywhere to register or look up actions.
registry = ActionRegistry()
