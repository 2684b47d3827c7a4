"""Split bulk check items into bounded, order-preserving chunks."""

from __future__ import annotations

import logging
from typing import Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def chunk_items(items: Sequence[T], limit: Optional[int]) -> list[list[T]]:
    """Partition ``items`` into contiguous chunks of at most ``limit``.

    ``None``, zero or a negative limit means no splitting. An empty input
    gives no chunks at all.
    """
    if not items:
        return []
    if limit is None or limit <= 0 or len(items) <= limit:
        return [list(items)]
    chunks = [list(items[start:start + limit]) for start in range(0, len(items), limit)]
    logger.debug("Split %d items into %d chunks of at most %d", len(items), len(chunks), limit)
    return chunks
