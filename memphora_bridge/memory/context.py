"""Rendering and ordering of memory records.

Records arrive already ranked by the Memphora API. ``assemble_context`` keeps
that order; ``order_by_recency`` is only used for the polling listing.
"""

from collections.abc import Sequence
from datetime import UTC, datetime

from memphora_bridge.config import settings
from memphora_bridge.memory.models import ContextResult, MemoryRecord

_UNDATED = datetime.min.replace(tzinfo=UTC)


def assemble_context(
    records: Sequence[MemoryRecord],
    prefix: str | None = None,
    limit: int | None = None,
) -> ContextResult:
    """Render ranked records as a prefixed bullet list.

    Args:
        records: Search results, highest relevance first.
        prefix: Header line. Falls back to the configured context prefix.
        limit: The limit the search was issued with. Rendering stops there
            if the service returned more.
    """
    rendered = list(records if limit is None else records[: max(limit, 0)])
    if not rendered:
        return ContextResult(context="", memory_count=0)

    header = prefix or settings.context_prefix
    lines = "\n".join(f"- {record.content}" for record in rendered)
    return ContextResult(context=f"{header}\n{lines}", memory_count=len(rendered))


def _created_at(record: MemoryRecord) -> datetime:
    """Parse ``created_at``; missing or unparseable values sort last."""
    if not record.created_at:
        return _UNDATED
    try:
        parsed = datetime.fromisoformat(record.created_at)
    except ValueError:
        return _UNDATED
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def order_by_recency(records: Sequence[MemoryRecord]) -> list[MemoryRecord]:
    """Newest first. Equal timestamps keep the order the service returned."""
    return sorted(records, key=_created_at, reverse=True)
