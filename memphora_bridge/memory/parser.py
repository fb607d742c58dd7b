"""Conversation format detection.

Callers hand over a conversation in one of three shapes. Sources are tried
in a fixed order and the first one present is the only one used:

1. ``conversation_json``: a JSON array of ``{"role", "content"}`` objects.
2. ``user_message`` + ``assistant_message``: a single exchange.
3. ``transcript``: plain text with ``User:`` / ``Assistant:`` style prefixes.
"""

import json
import logging
import re
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from memphora_bridge.errors import InputError
from memphora_bridge.memory.models import Message

logger = logging.getLogger(__name__)

USER_ALIASES = ("user", "customer", "human", "me")
ASSISTANT_ALIASES = ("assistant", "ai", "bot", "agent", "support")

# Alias must be followed directly by the colon, so "member:" is not "me:".
_ROLE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("user", re.compile(rf"^(?:{'|'.join(USER_ALIASES)}):\s*(\S.*)$", re.IGNORECASE)),
    (
        "assistant",
        re.compile(rf"^(?:{'|'.join(ASSISTANT_ALIASES)}):\s*(\S.*)$", re.IGNORECASE),
    ),
)

NO_CONVERSATION_MESSAGE = (
    "No valid conversation found. Please provide conversation_json, "
    "user_message + assistant_message, or transcript."
)


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


# -- Handlers ----------------------------------------------------------------


def _from_json(fields: dict[str, Any]) -> list[Message]:
    raw = fields["conversation_json"]
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"conversation_json is not valid JSON: {exc.msg}"
            raise InputError(msg) from exc

    if not isinstance(raw, list):
        msg = "conversation_json must be a JSON array of {role, content} objects."
        raise InputError(msg)

    messages = []
    for index, item in enumerate(raw):
        try:
            messages.append(Message.model_validate(item))
        except ValidationError as exc:
            msg = f"conversation_json item {index} is not a valid message: {_first_error(exc)}"
            raise InputError(msg) from exc
    return messages


def _from_pair(fields: dict[str, Any]) -> list[Message]:
    return [
        Message(role="user", content=fields["user_message"]),
        Message(role="assistant", content=fields["assistant_message"]),
    ]


def _from_transcript(fields: dict[str, Any]) -> list[Message]:
    messages = []
    for line in fields["transcript"].splitlines():
        line = line.strip()
        if not line:
            continue
        message = parse_transcript_line(line)
        if message is not None:
            messages.append(message)
    return messages


def parse_transcript_line(line: str) -> Message | None:
    """Match a single transcript line against the role aliases."""
    for role, pattern in _ROLE_PATTERNS:
        match = pattern.match(line.strip())
        if match:
            return Message(role=role, content=match.group(1).strip())
    return None


# Ordered (name, predicate, handler) chain. The first satisfied predicate wins.
_SOURCES: tuple[
    tuple[str, Callable[[dict[str, Any]], bool], Callable[[dict[str, Any]], list[Message]]],
    ...,
] = (
    ("conversation_json", lambda f: _present(f.get("conversation_json")), _from_json),
    (
        "user_message+assistant_message",
        lambda f: _present(f.get("user_message")) and _present(f.get("assistant_message")),
        _from_pair,
    ),
    ("transcript", lambda f: _present(f.get("transcript")), _from_transcript),
)


def parse_conversation(
    conversation_json: str | list[Any] | None = None,
    user_message: str | None = None,
    assistant_message: str | None = None,
    transcript: str | None = None,
) -> list[Message]:
    """Resolve the caller's conversation input into an ordered message list.

    Raises:
        InputError: No source was given, the chosen source produced no
            messages, or ``conversation_json`` could not be decoded.
    """
    fields = {
        "conversation_json": conversation_json,
        "user_message": user_message,
        "assistant_message": assistant_message,
        "transcript": transcript,
    }

    for name, predicate, handler in _SOURCES:
        if not predicate(fields):
            continue
        messages = handler(fields)
        if not messages:
            break
        logger.debug("Parsed %d messages from %s", len(messages), name)
        return messages

    raise InputError(NO_CONVERSATION_MESSAGE)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return f"{loc}: {first.get('msg', '')}" if loc else first.get("msg", "")
