"""Floating Notification Pipeline - Admission and Queue Promotion."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .models import Notification

logger = logging.getLogger(__name__)


def _log_fields(notification: Notification, queue: List[Notification]) -> dict:
    return {
        "notification_id": notification.id,
        "notification_type": notification.type,
        "queue_length": len(queue),
    }


@dataclass
class AdmissionResult:
    """Display set and queue after an admission or promotion pass.

    Attributes:
        display: Visible notifications, oldest first.
        queue: Waiting notifications, FIFO.
        shown: Notifications that entered the display set in this pass,
            in order; each one gets a sound cue.
        queued: Notifications appended to the queue in this pass.
    """

    display: Tuple[Notification, ...] = ()
    queue: Tuple[Notification, ...] = ()
    shown: List[Notification] = field(default_factory=list)
    queued: List[Notification] = field(default_factory=list)


def admit(
    display: Tuple[Notification, ...],
    queue: Tuple[Notification, ...],
    arrivals: Iterable[Notification],
    max_visible: int = 5,
) -> AdmissionResult:
    """Place arrivals into the display set while it has room, else the queue.

    Arrivals whose ID is already displayed or queued are skipped, so a
    repeated pass over the same arrivals changes nothing.
    """
    display_list = list(display)
    queue_list = list(queue)
    present = {n.id for n in display_list} | {n.id for n in queue_list}
    result = AdmissionResult()

    for notification in arrivals:
        if notification.id in present:
            logger.debug("Skipping already admitted notification %s", notification.id)
            continue
        present.add(notification.id)
        if len(display_list) < max_visible:
            display_list.append(notification)
            result.shown.append(notification)
            logger.info(
                "Displaying notification %s [%s]",
                notification.id,
                notification.type,
                extra=_log_fields(notification, queue_list),
            )
        else:
            queue_list.append(notification)
            result.queued.append(notification)
            logger.info(
                "Queued notification %s [%s] (queue=%d)",
                notification.id,
                notification.type,
                len(queue_list),
                extra=_log_fields(notification, queue_list),
            )

    result.display = tuple(display_list)
    result.queue = tuple(queue_list)
    return result


def promote(
    display: Tuple[Notification, ...],
    queue: Tuple[Notification, ...],
    max_visible: int = 5,
) -> AdmissionResult:
    """Move queue heads into the display set until it is full or the queue is empty."""
    display_list = list(display)
    queue_list = list(queue)
    result = AdmissionResult()

    while queue_list and len(display_list) < max_visible:
        head = queue_list.pop(0)
        display_list.append(head)
        result.shown.append(head)
        logger.info(
            "Promoted notification %s from queue (remaining=%d)",
            head.id,
            len(queue_list),
            extra=_log_fields(head, queue_list),
        )

    result.display = tuple(display_list)
    result.queue = tuple(queue_list)
    return result


def remove_from_display(
    display: Tuple[Notification, ...], notification_id: str
) -> Tuple[Tuple[Notification, ...], bool]:
    """Drop one ID from the display set; queued entries are untouched."""
    kept = tuple(n for n in display if n.id != notification_id)
    return kept, len(kept) < len(display)
