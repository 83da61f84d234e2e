"""Floating Notification Pipeline - Configuration."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class PriorityLevel(str, Enum):
    """Display priority of a notification type."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class DeliveryMethod(str, Enum):
    """Channels a user can enable per notification type."""

    IN_APP = "in_app"
    EMAIL = "email"
    PUSH = "push"
    SMS = "sms"


class NotificationType(str, Enum):
    """Known notification categories.

    Snapshots may carry types outside this enum; they are kept as plain
    strings and resolve to the DEFAULT config entry.
    """

    FRIEND_REQUEST_RECEIVED = "FRIEND_REQUEST_RECEIVED"
    FRIEND_REQUEST_ACCEPTED = "FRIEND_REQUEST_ACCEPTED"
    FRIEND_REQUEST_REJECTED = "FRIEND_REQUEST_REJECTED"
    FRIENDSHIP_REMOVED = "FRIENDSHIP_REMOVED"
    EXPENSE_ADDED = "EXPENSE_ADDED"
    EXPENSE_UPDATED = "EXPENSE_UPDATED"
    EXPENSE_DELETED = "EXPENSE_DELETED"
    EXPENSE_SHARED = "EXPENSE_SHARED"
    BUDGET_THRESHOLD_WARNING = "BUDGET_THRESHOLD_WARNING"
    BUDGET_EXCEEDED = "BUDGET_EXCEEDED"
    BUDGET_CREATED = "BUDGET_CREATED"
    BUDGET_UPDATED = "BUDGET_UPDATED"
    BILL_DUE_SOON = "BILL_DUE_SOON"
    BILL_OVERDUE = "BILL_OVERDUE"
    BILL_PAID = "BILL_PAID"
    BILL_REMINDER = "BILL_REMINDER"
    NEW_MESSAGE = "NEW_MESSAGE"
    NEW_COMMENT = "NEW_COMMENT"
    SYSTEM_UPDATE = "SYSTEM_UPDATE"
    ACHIEVEMENT = "ACHIEVEMENT"


@dataclass(frozen=True)
class TypeConfig:
    """Presentation and delivery hints for one notification type."""

    icon: str
    color: str
    default_duration_ms: int
    priority: PriorityLevel
    sound: bool


DEFAULT_TYPE_KEY = "DEFAULT"

NOTIFICATION_TYPE_CONFIG: Dict[str, TypeConfig] = {
    # Friends
    "FRIEND_REQUEST_RECEIVED": TypeConfig("PersonAdd", "#3b82f6", 6000, PriorityLevel.HIGH, True),
    "FRIEND_REQUEST_ACCEPTED": TypeConfig("Check", "#10b981", 5000, PriorityLevel.MEDIUM, True),
    "FRIEND_REQUEST_REJECTED": TypeConfig("Close", "#ef4444", 4000, PriorityLevel.LOW, False),
    "FRIENDSHIP_REMOVED": TypeConfig("PersonRemove", "#f59e0b", 4000, PriorityLevel.MEDIUM, False),
    # Expenses
    "EXPENSE_ADDED": TypeConfig("ReceiptLong", "#8b5cf6", 4000, PriorityLevel.MEDIUM, False),
    "EXPENSE_UPDATED": TypeConfig("ReceiptLong", "#06b6d4", 4000, PriorityLevel.LOW, False),
    "EXPENSE_DELETED": TypeConfig("MoneyOff", "#64748b", 3000, PriorityLevel.LOW, False),
    "EXPENSE_SHARED": TypeConfig("Group", "#14b8a6", 5000, PriorityLevel.MEDIUM, True),
    # Budgets
    "BUDGET_THRESHOLD_WARNING": TypeConfig("Warning", "#f59e0b", 7000, PriorityLevel.HIGH, True),
    "BUDGET_EXCEEDED": TypeConfig("Error", "#ef4444", 8000, PriorityLevel.CRITICAL, True),
    "BUDGET_CREATED": TypeConfig("AccountBalanceWallet", "#10b981", 4000, PriorityLevel.MEDIUM, False),
    "BUDGET_UPDATED": TypeConfig("TrendingUp", "#06b6d4", 4000, PriorityLevel.LOW, False),
    # Bills
    "BILL_DUE_SOON": TypeConfig("Event", "#f59e0b", 7000, PriorityLevel.HIGH, True),
    "BILL_OVERDUE": TypeConfig("Error", "#ef4444", 8000, PriorityLevel.CRITICAL, True),
    "BILL_PAID": TypeConfig("Payment", "#10b981", 5000, PriorityLevel.MEDIUM, True),
    "BILL_REMINDER": TypeConfig("Notifications", "#3b82f6", 6000, PriorityLevel.HIGH, True),
    # Chat
    "NEW_MESSAGE": TypeConfig("Message", "#8b5cf6", 5000, PriorityLevel.MEDIUM, True),
    "NEW_COMMENT": TypeConfig("Comment", "#06b6d4", 4000, PriorityLevel.LOW, False),
    # System
    "SYSTEM_UPDATE": TypeConfig("Info", "#3b82f6", 5000, PriorityLevel.LOW, False),
    "ACHIEVEMENT": TypeConfig("Celebration", "#f59e0b", 6000, PriorityLevel.MEDIUM, True),
    DEFAULT_TYPE_KEY: TypeConfig("Notifications", "#64748b", 5000, PriorityLevel.MEDIUM, False),
}

PRIORITY_DURATION_MULTIPLIERS: Dict[PriorityLevel, float] = {
    PriorityLevel.LOW: 0.8,
    PriorityLevel.MEDIUM: 1.0,
    PriorityLevel.HIGH: 1.2,
    PriorityLevel.CRITICAL: 1.5,
}


def get_type_config(notification_type: Optional[str]) -> TypeConfig:
    """Look up the config for a type, falling back to DEFAULT."""
    key = notification_type.value if isinstance(notification_type, Enum) else notification_type
    return NOTIFICATION_TYPE_CONFIG.get(key, NOTIFICATION_TYPE_CONFIG[DEFAULT_TYPE_KEY])


def get_adjusted_duration(notification_type: Optional[str], base_ms: Optional[int] = None) -> int:
    """Display duration in milliseconds, scaled by the type's priority.

    Args:
        notification_type: Notification type string.
        base_ms: Base duration. Falsy values use the type default.

    Returns:
        Rounded duration in milliseconds.
    """
    cfg = get_type_config(notification_type)
    duration = base_ms or cfg.default_duration_ms
    multiplier = PRIORITY_DURATION_MULTIPLIERS.get(
        cfg.priority, PRIORITY_DURATION_MULTIPLIERS[PriorityLevel.MEDIUM]
    )
    return int(round(duration * multiplier))


@dataclass(frozen=True)
class PipelineConfig:
    """Tunables for the delivery pipeline reducer."""

    max_visible: int = 5
    arrival_cap: int = 10
    ledger_capacity: int = 100
    trim_interval_seconds: float = 60.0
    in_app_channel: str = DeliveryMethod.IN_APP.value
    max_preference_fetch_attempts: int = 2

    @classmethod
    def from_settings(cls, settings=None) -> "PipelineConfig":
        """Build a config from environment-backed settings."""
        if settings is None:
            from src.settings import get_settings

            settings = get_settings()
        return cls(
            max_visible=settings.max_visible,
            arrival_cap=settings.arrival_cap,
            ledger_capacity=settings.ledger_capacity,
            trim_interval_seconds=settings.trim_interval_seconds,
            in_app_channel=settings.in_app_channel,
            max_preference_fetch_attempts=settings.max_preference_fetch_attempts,
        )
