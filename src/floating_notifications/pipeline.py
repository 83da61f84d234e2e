"""Floating Notification Pipeline - Reducer.

``apply(state, event)`` is the whole pipeline: it takes the current
state and one event and returns the next state plus the side effects to
run (sound cues, navigation, preference fetches). It performs no I/O and
never mutates the state it was given.

Event handling:
    ArrivalSnapshot        classify, dedup, admit (only while enabled)
    PreferenceUpdate       resolve flags, request a fetch if needed,
                           flush everything when disabled
    PreferenceFetchFailed  re-arm the fetch guard for one retry
    UserAction             close / click / clear-all
    TrimTick               trim the dedup ledger
"""

import logging
from dataclasses import dataclass, field, replace
from typing import FrozenSet, List, Optional, Tuple

from .admission import admit, promote, remove_from_display
from .classifier import classify_snapshot
from .config import PipelineConfig
from .events import (
    ActionKind,
    ArrivalSnapshot,
    Effect,
    FetchPreferences,
    NavigationRequest,
    PipelineEvent,
    PlaySound,
    PreferenceFetchFailed,
    PreferenceUpdate,
    TrimTick,
    UserAction,
)
from .exceptions import MissingNotificationIdError, UnknownActionError, UnknownEventError
from .ledger import DedupLedger
from .models import Notification
from .preferences import FetchGuard, ResolvedPreferences, resolve_preferences
from .routing import resolve_route
from .sound import should_play

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineState:
    """Complete pipeline state.

    Attributes:
        display: Visible notifications in admission order.
        queue: Notifications waiting for a free slot, FIFO.
        ledger: IDs already handled. Treated as immutable; reductions
            that change it work on a copy.
        initial_load: True until the first snapshot has been seeded.
        preferences: Flags resolved from the latest preference update.
        fetch_guard: One-shot preference fetch bookkeeping.
        snapshot: Latest snapshot, re-processed when preferences change.
        filtered_ids: Unread IDs rejected by the current type preference;
            cleared on every preference update.
    """

    display: Tuple[Notification, ...] = ()
    queue: Tuple[Notification, ...] = ()
    ledger: DedupLedger = field(default_factory=DedupLedger)
    initial_load: bool = True
    preferences: ResolvedPreferences = field(default_factory=ResolvedPreferences)
    fetch_guard: FetchGuard = field(default_factory=FetchGuard)
    snapshot: Tuple[Notification, ...] = ()
    filtered_ids: FrozenSet[str] = frozenset()

    @property
    def enabled(self) -> bool:
        return self.preferences.enabled

    @property
    def queue_length(self) -> int:
        return len(self.queue)

    def displayed_ids(self) -> List[str]:
        return [n.id for n in self.display]

    def queued_ids(self) -> List[str]:
        return [n.id for n in self.queue]


@dataclass
class Transition:
    """Result of one reduction."""

    state: PipelineState
    effects: List[Effect] = field(default_factory=list)


def initial_state(config: Optional[PipelineConfig] = None) -> PipelineState:
    config = config or PipelineConfig()
    return PipelineState(
        ledger=DedupLedger(capacity=config.ledger_capacity),
        preferences=ResolvedPreferences(in_app_channel=config.in_app_channel),
    )


def apply(
    state: PipelineState,
    event: PipelineEvent,
    config: Optional[PipelineConfig] = None,
) -> Transition:
    """Reduce one event.

    Raises:
        UnknownEventError: If ``event`` is not a pipeline event.
        UnknownActionError: If a UserAction has an unsupported kind.
        MissingNotificationIdError: If close/click carries no ID.
    """
    config = config or PipelineConfig()

    if isinstance(event, ArrivalSnapshot):
        return _on_snapshot(state, event, config)
    if isinstance(event, PreferenceUpdate):
        return _on_preferences(state, event, config)
    if isinstance(event, PreferenceFetchFailed):
        return _on_fetch_failed(state, event, config)
    if isinstance(event, UserAction):
        return _on_action(state, event, config)
    if isinstance(event, TrimTick):
        return _on_trim(state)
    raise UnknownEventError(event)


# ── Snapshots ────────────────────────────────────────────────────────


def _on_snapshot(state: PipelineState, event: ArrivalSnapshot, config: PipelineConfig) -> Transition:
    state = replace(state, snapshot=tuple(event.notifications))
    if not state.enabled:
        return Transition(state)
    return _process_snapshot(state, config)


def _process_snapshot(state: PipelineState, config: PipelineConfig) -> Transition:
    if not state.snapshot:
        return Transition(state)

    ledger = state.ledger.copy()
    result = classify_snapshot(
        state.snapshot,
        ledger,
        initial_load=state.initial_load,
        is_type_enabled=state.preferences.is_type_enabled,
        arrival_cap=config.arrival_cap,
        skip_ids=state.filtered_ids,
    )
    if result.initial_load:
        return Transition(replace(state, ledger=ledger, initial_load=False))
    if result.filtered:
        state = replace(state, filtered_ids=state.filtered_ids | {n.id for n in result.filtered})
    if not result.arrivals:
        return Transition(state)

    ledger.add_many(n.id for n in result.arrivals)
    admitted = admit(state.display, state.queue, result.arrivals, config.max_visible)
    state = replace(state, ledger=ledger, display=admitted.display, queue=admitted.queue)
    return Transition(state, _sound_effects(state, admitted.shown))


# ── Preferences ──────────────────────────────────────────────────────


def _on_preferences(state: PipelineState, event: PreferenceUpdate, config: PipelineConfig) -> Transition:
    was_enabled = state.enabled
    resolved = resolve_preferences(event.preferences, in_app_channel=config.in_app_channel)
    guard, fetch = state.fetch_guard.evaluate(resolved.loaded, event.loading)
    state = replace(state, preferences=resolved, fetch_guard=guard, filtered_ids=frozenset())

    effects: List[Effect] = []
    if fetch:
        logger.info("Preferences not loaded, requesting fetch (attempt %d)", guard.attempts)
        effects.append(FetchPreferences(attempt=guard.attempts))

    if not resolved.enabled:
        if was_enabled or state.display or state.queue:
            logger.info(
                "Floating notifications disabled, flushing %d displayed and %d queued",
                len(state.display),
                len(state.queue),
            )
        state = replace(state, display=(), queue=())
        return Transition(state, effects)

    if not was_enabled:
        logger.info("Floating notifications enabled")
    transition = _process_snapshot(state, config)
    effects.extend(transition.effects)
    state = transition.state

    promoted = promote(state.display, state.queue, config.max_visible)
    if promoted.shown:
        state = replace(state, display=promoted.display, queue=promoted.queue)
        effects.extend(_sound_effects(state, promoted.shown))
    return Transition(state, effects)


def _on_fetch_failed(state: PipelineState, event: PreferenceFetchFailed, config: PipelineConfig) -> Transition:
    logger.warning("Preference fetch failed: %s", event.error or "unknown error")
    guard = state.fetch_guard.on_failure(config.max_preference_fetch_attempts)
    guard, fetch = guard.evaluate(state.preferences.loaded, loading=False)
    state = replace(state, fetch_guard=guard)
    if fetch:
        logger.info("Retrying preference fetch (attempt %d)", guard.attempts)
        return Transition(state, [FetchPreferences(attempt=guard.attempts)])
    return Transition(state)


# ── User actions ─────────────────────────────────────────────────────


def _on_action(state: PipelineState, event: UserAction, config: PipelineConfig) -> Transition:
    try:
        kind = ActionKind(event.kind)
    except ValueError:
        raise UnknownActionError(event.kind) from None

    if kind == ActionKind.CLEAR_ALL:
        logger.info(
            "Clear all: dropping %d displayed and %d queued",
            len(state.display),
            len(state.queue),
        )
        return Transition(replace(state, display=(), queue=()))

    if not event.notification_id:
        raise MissingNotificationIdError(kind.value)

    if kind == ActionKind.CLOSE:
        return _close(state, event.notification_id, config)

    # CLICK
    target = next((n for n in state.display if n.id == event.notification_id), None)
    transition = _close(state, event.notification_id, config)
    if target is None:
        logger.warning("Click on notification %s that is not displayed", event.notification_id)
        return transition

    route = resolve_route(target)
    logger.info(
        "Notification %s [%s] clicked, navigating to %s",
        target.id,
        target.type,
        route,
        extra={"notification_id": target.id, "notification_type": target.type, "route": route},
    )
    transition.effects.append(NavigationRequest(type=target.type, route=route, notification_id=target.id))
    return transition


def _close(state: PipelineState, notification_id: str, config: PipelineConfig) -> Transition:
    display, removed = remove_from_display(state.display, notification_id)
    if not removed:
        return Transition(state)
    state = replace(state, display=display)
    logger.debug("Closed notification %s", notification_id)

    if not state.enabled or not state.queue:
        return Transition(state)
    promoted = promote(state.display, state.queue, config.max_visible)
    state = replace(state, display=promoted.display, queue=promoted.queue)
    return Transition(state, _sound_effects(state, promoted.shown))


# ── Maintenance ──────────────────────────────────────────────────────


def _on_trim(state: PipelineState) -> Transition:
    # filtered IDs no longer in the snapshot were read or deleted
    live_filtered = state.filtered_ids & {n.id for n in state.snapshot}
    if live_filtered != state.filtered_ids:
        state = replace(state, filtered_ids=live_filtered)

    if len(state.ledger) <= state.ledger.capacity:
        return Transition(state)
    ledger = state.ledger.copy()
    evicted = ledger.trim()
    logger.info("Trimmed %d ids from dedup ledger", len(evicted))
    return Transition(replace(state, ledger=ledger))


def _sound_effects(state: PipelineState, shown: List[Notification]) -> List[Effect]:
    return [
        PlaySound(notification_id=n.id, notification_type=n.type)
        for n in shown
        if should_play(state.preferences.sound_enabled, n.type)
    ]
