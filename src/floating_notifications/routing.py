"""Floating Notification Pipeline - Click Routing.

Maps a clicked notification to an application route using only its
type and payload reference fields. Unknown types go to the generic
notifications page.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .models import Notification

logger = logging.getLogger(__name__)

FALLBACK_ROUTE = "/notifications"


@dataclass(frozen=True)
class RouteRule:
    """Collection route plus the payload key that selects a detail page."""

    base: str
    id_key: Optional[str] = None


_FRIENDS = RouteRule("/friends")
_EXPENSES = RouteRule("/expenses", "expenseId")
_BUDGET = RouteRule("/budget", "budgetId")
_BILLS = RouteRule("/bills", "billId")
_CHAT = RouteRule("/chat", "chatId")

ROUTE_TABLE: Dict[str, RouteRule] = {
    "FRIEND_REQUEST_RECEIVED": _FRIENDS,
    "FRIEND_REQUEST_ACCEPTED": _FRIENDS,
    "FRIEND_REQUEST_REJECTED": _FRIENDS,
    "EXPENSE_ADDED": _EXPENSES,
    "EXPENSE_UPDATED": _EXPENSES,
    "EXPENSE_SHARED": _EXPENSES,
    "BUDGET_THRESHOLD_WARNING": _BUDGET,
    "BUDGET_EXCEEDED": _BUDGET,
    "BUDGET_CREATED": _BUDGET,
    "BUDGET_UPDATED": _BUDGET,
    "BILL_DUE_SOON": _BILLS,
    "BILL_OVERDUE": _BILLS,
    "BILL_PAID": _BILLS,
    "BILL_REMINDER": _BILLS,
    "NEW_MESSAGE": _CHAT,
}


def resolve_route(notification: Notification) -> str:
    """Route for a clicked notification; never raises."""
    rule = ROUTE_TABLE.get(notification.type)
    if rule is None:
        return FALLBACK_ROUTE

    if rule.id_key:
        payload = notification.payload if isinstance(notification.payload, Mapping) else {}
        ref = payload.get(rule.id_key)
        if ref not in (None, ""):
            return f"{rule.base}/{ref}"
    return rule.base
