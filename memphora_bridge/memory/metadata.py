"""Metadata assembly for stored memories and conversations.

Overlays are applied in a fixed order and later overlays win:

    base  ->  category  ->  tags  ->  custom_metadata

Keys from the custom JSON blob override everything, including ``source``
and ``zap_id``.
"""

import json
from typing import Any

from memphora_bridge.config import settings
from memphora_bridge.errors import InputError


def integration_metadata(zap_id: str | None, **extra: Any) -> dict[str, Any]:
    """Base metadata identifying where a memory came from."""
    return {
        "source": settings.integration_source,
        "zap_id": zap_id or "unknown",
        **extra,
    }


def parse_tags(tags: str) -> list[str]:
    """Split a comma-separated tag string, dropping blanks."""
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def parse_custom_metadata(custom_metadata: str | dict[str, Any]) -> dict[str, Any]:
    """Decode the caller's custom metadata blob into a mapping."""
    if isinstance(custom_metadata, dict):
        return dict(custom_metadata)

    try:
        data = json.loads(custom_metadata)
    except (json.JSONDecodeError, TypeError) as exc:
        msg = f"custom_metadata is not valid JSON: {exc}"
        raise InputError(msg) from exc

    if not isinstance(data, dict):
        msg = "custom_metadata must be a JSON object, e.g. {\"priority\": \"high\"}"
        raise InputError(msg)
    return data


def metadata_overlays(
    base: dict[str, Any],
    category: str | None = None,
    tags: str | None = None,
    custom_metadata: str | dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Return the overlays in the order they are applied."""
    overlays: list[dict[str, Any]] = [dict(base)]
    if category:
        overlays.append({"category": category})
    if tags:
        overlays.append({"tags": parse_tags(tags)})
    if custom_metadata:
        overlays.append(parse_custom_metadata(custom_metadata))
    return overlays


def merge_metadata(
    base: dict[str, Any],
    category: str | None = None,
    tags: str | None = None,
    custom_metadata: str | dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge base, category, tags and custom metadata into one mapping.

    Raises:
        InputError: ``custom_metadata`` is not a JSON object.
    """
    merged: dict[str, Any] = {}
    for overlay in metadata_overlays(base, category, tags, custom_metadata):
        merged.update(overlay)
    return merged
