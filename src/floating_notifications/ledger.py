"""Floating Notification Pipeline - Dedup Ledger.

Bounded, insertion-ordered record of notification IDs that were already
handled. Eviction is a sliding window over insertion order: trimming keeps
the most recently inserted ``capacity`` IDs. Re-adding an ID that is
already present does not refresh its position.

An ID evicted by trimming is forgotten completely, so the same
notification can be admitted again if a later snapshot still carries it
as unread.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)


class DedupLedger:
    """Capped ordered set of processed notification IDs."""

    def __init__(self, capacity: int = 100, ids: Optional[Iterable[str]] = None) -> None:
        if capacity < 1:
            raise ValueError(f"Ledger capacity must be positive, got {capacity}")
        self._capacity = capacity
        # dict preserves insertion order and gives O(1) membership
        self._ids: Dict[str, None] = {}
        for notification_id in ids or ():
            self._ids.setdefault(notification_id, None)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def add(self, notification_id: str) -> bool:
        """Record an ID.

        Returns:
            True if the ID was new, False if it was already present.
        """
        if notification_id in self._ids:
            return False
        self._ids[notification_id] = None
        return True

    def add_many(self, notification_ids: Iterable[str]) -> int:
        """Record several IDs, returning how many were new."""
        return sum(1 for nid in notification_ids if self.add(nid))

    def trim(self) -> List[str]:
        """Evict the oldest IDs beyond capacity.

        Returns:
            The evicted IDs, oldest first.
        """
        overflow = len(self._ids) - self._capacity
        if overflow <= 0:
            return []
        ordered = list(self._ids)
        evicted = ordered[:overflow]
        self._ids = dict.fromkeys(ordered[overflow:])
        logger.debug("Ledger trimmed %d ids (kept %d)", len(evicted), len(self._ids))
        return evicted

    def copy(self) -> "DedupLedger":
        return DedupLedger(capacity=self._capacity, ids=self._ids)

    def ids(self) -> List[str]:
        """IDs in insertion order."""
        return list(self._ids)
