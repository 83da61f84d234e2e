"""Floating Notification Pipeline - Sound Gate.

Audio is best effort. The gate decides whether a cue should play for a
notification and drives a single injected player; any player failure is
logged and swallowed at this boundary.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

from .config import get_type_config

logger = logging.getLogger(__name__)


@runtime_checkable
class SoundPlayer(Protocol):
    """Audio handle capability supplied by the host application."""

    def rewind(self) -> None:
        """Reset playback position to the start of the cue."""
        ...

    def play(self) -> None:
        """Start playback without blocking."""
        ...


class NullSoundPlayer:
    """Player that does nothing; the default when no audio is available."""

    def rewind(self) -> None:
        pass

    def play(self) -> None:
        pass


def should_play(sound_enabled: bool, notification_type: str) -> bool:
    """Cue plays only if sound is on and the type is marked audible."""
    return bool(sound_enabled) and get_type_config(notification_type).sound


class SoundGate:
    """Plays the notification cue on the shared player.

    Example:
        gate = SoundGate(player)
        gate.cue("BILL_OVERDUE")
    """

    def __init__(self, player: Optional[SoundPlayer] = None) -> None:
        self._player = player if player is not None else NullSoundPlayer()
        self._played = 0
        self._failures = 0

    @property
    def player(self) -> SoundPlayer:
        return self._player

    def cue(self, notification_type: str = "") -> bool:
        """Rewind and play the cue.

        Returns:
            True if playback started, False if the player failed.
        """
        try:
            self._player.rewind()
            self._player.play()
        except Exception as exc:
            self._failures += 1
            logger.warning("Could not play notification sound for %s: %s", notification_type, exc)
            return False
        self._played += 1
        return True

    def get_stats(self) -> dict:
        return {"played": self._played, "failures": self._failures}
