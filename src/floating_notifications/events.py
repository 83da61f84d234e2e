"""Floating Notification Pipeline - Events and Effects.

Inputs to the reducer form a tagged union; each reduction returns the
side effects it wants executed alongside the new state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

from .models import Notification


class ActionKind(str, Enum):
    """User actions on floating notifications."""

    CLOSE = "close"
    CLICK = "click"
    CLEAR_ALL = "clear_all"


# ── Events ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ArrivalSnapshot:
    """Full current notification list from the notification store."""

    notifications: Tuple[Notification, ...] = ()

    @classmethod
    def from_records(cls, records) -> "ArrivalSnapshot":
        return cls(
            notifications=tuple(
                r if isinstance(r, Notification) else Notification.from_dict(r)
                for r in records
            )
        )


@dataclass(frozen=True)
class PreferenceUpdate:
    """New preference object (or None while unloaded) from the preference service."""

    preferences: Optional[Any] = None
    loading: bool = False


@dataclass(frozen=True)
class PreferenceFetchFailed:
    """A requested preference fetch did not succeed."""

    error: str = ""


@dataclass(frozen=True)
class UserAction:
    """Close, click, or clear-all issued by the user."""

    kind: ActionKind
    notification_id: Optional[str] = None


@dataclass(frozen=True)
class TrimTick:
    """Periodic ledger maintenance tick."""


PipelineEvent = Union[ArrivalSnapshot, PreferenceUpdate, PreferenceFetchFailed, UserAction, TrimTick]


# ── Effects ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PlaySound:
    """Play the notification cue for an admitted or promoted notification."""

    notification_id: str
    notification_type: str


@dataclass(frozen=True)
class NavigationRequest:
    """Route change requested by a notification click."""

    type: str
    route: str
    notification_id: Optional[str] = None


@dataclass(frozen=True)
class FetchPreferences:
    """Ask the preference service to load preferences."""

    attempt: int = 1


Effect = Union[PlaySound, NavigationRequest, FetchPreferences]
