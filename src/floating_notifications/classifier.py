"""Floating Notification Pipeline - Arrival Classification.

The first snapshot seen while the pipeline is enabled is history: its
unread IDs are recorded in the ledger and nothing is displayed. Every
later snapshot yields live arrivals, i.e. unread notifications whose IDs
the ledger has not seen, capped per snapshot and then filtered by the
per-type preference.

Arrivals beyond the cap are not recorded in the ledger, so they are
picked up again by the next snapshot that still carries them. Arrivals
filtered out by type preference are not recorded in the ledger either;
their IDs are passed back in as ``skip_ids`` so they stop occupying cap
slots, and are re-evaluated once the preference changes.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Container, List, Sequence

from .ledger import DedupLedger
from .models import Notification

logger = logging.getLogger(__name__)


@dataclass
class ClassificationResult:
    """Outcome of classifying one snapshot."""

    initial_load: bool = False
    seeded_ids: List[str] = field(default_factory=list)
    arrivals: List[Notification] = field(default_factory=list)
    deferred: List[Notification] = field(default_factory=list)
    filtered: List[Notification] = field(default_factory=list)


def seed_history(snapshot: Sequence[Notification], ledger: DedupLedger) -> List[str]:
    """Record every unread ID of the historical snapshot without admitting it."""
    seeded = [n.id for n in snapshot if not n.is_read]
    ledger.add_many(seeded)
    logger.info("Initial snapshot: suppressed %d unread notifications", len(seeded))
    return seeded


def classify_snapshot(
    snapshot: Sequence[Notification],
    ledger: DedupLedger,
    initial_load: bool,
    is_type_enabled: Callable[[str], bool],
    arrival_cap: int = 10,
    skip_ids: Container[str] = (),
) -> ClassificationResult:
    """Split a snapshot into history, eligible arrivals, and leftovers.

    Args:
        snapshot: Notifications in store order.
        ledger: Dedup ledger; only seeded on the initial load.
        initial_load: Whether this is the first snapshot processed.
        is_type_enabled: Per-type preference check.
        arrival_cap: Maximum live arrivals considered per snapshot.
        skip_ids: IDs already filtered by the current type preference.

    Returns:
        ClassificationResult. Eligible arrivals keep snapshot order.
    """
    if initial_load:
        return ClassificationResult(initial_load=True, seeded_ids=seed_history(snapshot, ledger))

    fresh: List[Notification] = []
    seen = set()
    for notification in snapshot:
        if (
            notification.is_read
            or notification.id in ledger
            or notification.id in seen
            or notification.id in skip_ids
        ):
            continue
        seen.add(notification.id)
        fresh.append(notification)

    result = ClassificationResult(deferred=fresh[arrival_cap:])
    for notification in fresh[:arrival_cap]:
        if is_type_enabled(notification.type):
            result.arrivals.append(notification)
        else:
            result.filtered.append(notification)

    if result.deferred:
        logger.warning(
            "Snapshot flood guard: %d arrivals deferred (cap=%d)",
            len(result.deferred),
            arrival_cap,
        )
    if result.filtered:
        logger.debug("Filtered %d arrivals by type preference", len(result.filtered))
    return result
