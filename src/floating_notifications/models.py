"""Floating Notification Pipeline - Data Models."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

# Snapshot keys that describe the notification itself; everything else
# travels in the payload.
_ENVELOPE_KEYS = ("id", "type", "isRead", "is_read", "payload")


@dataclass(frozen=True)
class Notification:
    """One entry of a notification snapshot.

    Attributes:
        id: Stable, unique identifier.
        type: Notification category string (may be unknown).
        payload: Opaque reference fields such as ``expenseId``.
        is_read: Whether the user already read it.
    """

    id: str
    type: str = ""
    payload: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    is_read: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Notification":
        """Build a notification from a store record.

        Accepts both a nested ``payload`` mapping and flat reference
        fields (``expenseId``, ``chatId`` ...) next to the envelope keys.
        """
        nested = data.get("payload")
        payload = dict(nested) if isinstance(nested, Mapping) else {}
        for key, value in data.items():
            if key not in _ENVELOPE_KEYS:
                payload.setdefault(key, value)
        is_read = data.get("isRead", data.get("is_read", False))
        # only a real bool marks a notification as read
        return cls(
            id=str(data["id"]),
            type=str(data.get("type") or ""),
            payload=payload,
            is_read=is_read is True,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "isRead": self.is_read,
            "payload": dict(self.payload),
        }
