"""Normalization of Memphora API responses into MemoryRecord lists."""

import logging
from typing import Any

from pydantic import ValidationError

from memphora_bridge.memory.models import MemoryRecord

logger = logging.getLogger(__name__)


def normalize_records(raw: Any) -> list[MemoryRecord]:
    """Normalize a bare list or a ``{"memories": [...]}`` wrapper.

    Any other shape yields an empty list. Items that are not mappings are
    skipped; every mapping becomes a record, in service order.
    """
    if isinstance(raw, dict):
        items = raw.get("memories") or []
    elif isinstance(raw, list):
        items = raw
    else:
        items = []

    if not isinstance(items, list):
        return []

    return [_to_record(item) for item in items if isinstance(item, dict)]


def _to_record(item: dict[str, Any]) -> MemoryRecord:
    # Null fields fall back to the model defaults.
    fields = {key: value for key, value in item.items() if value is not None}
    try:
        return MemoryRecord.model_validate(fields)
    except ValidationError as exc:
        invalid = {str(err["loc"][0]) for err in exc.errors() if err.get("loc")}
        logger.warning(
            "Memory record %s has invalid fields %s, using defaults",
            item.get("id"),
            sorted(invalid),
        )
        return MemoryRecord.model_validate({k: v for k, v in fields.items() if k not in invalid})
