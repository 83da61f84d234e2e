"""Floating Notification Pipeline - Controller.

Stateful facade over the reducer for a host application. It serialises
events, runs the effects each reduction returns against injected
capabilities, and owns the periodic ledger trim.

Usage:
    controller = FloatingNotificationController(
        sound_player=player, navigator=router, preference_fetcher=prefs_api,
    )
    with controller:
        controller.update_preferences(None)       # triggers one fetch
        controller.receive_snapshot(records)      # history, suppressed
        controller.receive_snapshot(more_records) # live arrivals
        controller.click("n-42")
"""

import logging
import threading
from collections import deque
from typing import Any, Callable, Deque, Iterable, List, Optional, Protocol, runtime_checkable

from .config import PipelineConfig, get_adjusted_duration
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
from .models import Notification
from .pipeline import PipelineState, apply, initial_state
from .scheduler import TrimScheduler
from .sound import SoundGate, SoundPlayer

logger = logging.getLogger(__name__)


@runtime_checkable
class Navigator(Protocol):
    """Router capability."""

    def navigate(self, request: NavigationRequest) -> None:
        ...


@runtime_checkable
class PreferenceFetcher(Protocol):
    """Preference service capability.

    ``fetch_preferences`` may return the loaded preference object, or
    None when the result will arrive later through ``update_preferences``.
    Raising signals a failed fetch.
    """

    def fetch_preferences(self) -> Optional[Any]:
        ...


def overflow_label(queue_length: int) -> str:
    """Text for the "+N more" indicator; empty when nothing is queued."""
    if queue_length <= 0:
        return ""
    return f"+{queue_length} more notification{'s' if queue_length > 1 else ''}"


class FloatingNotificationController:
    """Owns pipeline state and executes its side effects.

    Thread-safe via internal locking; effects run inside the lock so
    follow-up events they produce are reduced in order.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        sound_player: Optional[SoundPlayer] = None,
        navigator: Optional[Navigator] = None,
        preference_fetcher: Optional[PreferenceFetcher] = None,
    ) -> None:
        self._config = config or PipelineConfig()
        self._state = initial_state(self._config)
        self._lock = threading.RLock()
        self._sound = SoundGate(sound_player)
        self._navigator = navigator
        self._fetcher = preference_fetcher
        self._scheduler: Optional[TrimScheduler] = None
        self._listeners: List[Callable[[PipelineState], None]] = []

    # ── Read side ────────────────────────────────────────────────────

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._state.enabled

    @property
    def displayed(self) -> List[Notification]:
        return list(self._state.display)

    @property
    def queue_length(self) -> int:
        return self._state.queue_length

    @property
    def overflow_label(self) -> str:
        return overflow_label(self._state.queue_length)

    @property
    def sound_gate(self) -> SoundGate:
        return self._sound

    def display_duration_ms(self, notification: Notification) -> int:
        return get_adjusted_duration(notification.type)

    def subscribe(self, listener: Callable[[PipelineState], None]) -> None:
        """Register a callback invoked with the new state after each event."""
        self._listeners.append(listener)

    # ── Write side ───────────────────────────────────────────────────

    def dispatch(self, event: PipelineEvent) -> PipelineState:
        """Reduce an event and every follow-up event its effects produce."""
        with self._lock:
            pending: Deque[PipelineEvent] = deque([event])
            while pending:
                transition = apply(self._state, pending.popleft(), self._config)
                self._state = transition.state
                for effect in transition.effects:
                    follow_up = self._run_effect(effect)
                    if follow_up is not None:
                        pending.append(follow_up)
            state = self._state

        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as exc:
                logger.error("State listener failed: %s", exc)
        return state

    def receive_snapshot(self, records: Iterable[Any]) -> PipelineState:
        return self.dispatch(ArrivalSnapshot.from_records(records))

    def update_preferences(self, preferences: Optional[Any], loading: bool = False) -> PipelineState:
        return self.dispatch(PreferenceUpdate(preferences=preferences, loading=loading))

    def close(self, notification_id: str) -> PipelineState:
        return self.dispatch(UserAction(ActionKind.CLOSE, notification_id))

    def click(self, notification_id: str) -> PipelineState:
        return self.dispatch(UserAction(ActionKind.CLICK, notification_id))

    def clear_all(self) -> PipelineState:
        return self.dispatch(UserAction(ActionKind.CLEAR_ALL))

    def trim(self) -> PipelineState:
        return self.dispatch(TrimTick())

    # ── Lifecycle ────────────────────────────────────────────────────

    def start(self) -> None:
        """Start the periodic ledger trim."""
        with self._lock:
            if self._scheduler is None:
                self._scheduler = TrimScheduler(self._config.trim_interval_seconds, self.trim)
            self._scheduler.start()

    def shutdown(self) -> None:
        """Release the trim timer."""
        with self._lock:
            scheduler, self._scheduler = self._scheduler, None
        if scheduler is not None:
            scheduler.stop()

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.is_running

    def __enter__(self) -> "FloatingNotificationController":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    # ── Effects ──────────────────────────────────────────────────────

    def _run_effect(self, effect: Effect) -> Optional[PipelineEvent]:
        if isinstance(effect, PlaySound):
            self._sound.cue(effect.notification_type)
            return None

        if isinstance(effect, NavigationRequest):
            if self._navigator is None:
                logger.warning("No navigator configured, dropping route %s", effect.route)
                return None
            try:
                self._navigator.navigate(effect)
            except Exception as exc:
                logger.error("Navigation to %s failed: %s", effect.route, exc)
            return None

        if isinstance(effect, FetchPreferences):
            return self._fetch_preferences(effect)

        logger.warning("Ignoring unknown effect %r", effect)
        return None

    def _fetch_preferences(self, effect: FetchPreferences) -> Optional[PipelineEvent]:
        if self._fetcher is None:
            logger.debug("No preference fetcher configured, skipping fetch")
            return None
        try:
            loaded = self._fetcher.fetch_preferences()
        except Exception as exc:
            logger.error("Preference fetch attempt %d failed: %s", effect.attempt, exc)
            return PreferenceFetchFailed(error=str(exc))
        if loaded is None:
            return None
        return PreferenceUpdate(preferences=loaded)
