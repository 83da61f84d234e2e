"""Floating Notification Delivery Pipeline.

Decides which incoming notifications are shown as floating cards, queues
overflow, suppresses duplicates and historical replays, and reclaims
display capacity as notifications close.
"""

from .config import (
    DeliveryMethod,
    NotificationType,
    PipelineConfig,
    PriorityLevel,
    TypeConfig,
    NOTIFICATION_TYPE_CONFIG,
    get_adjusted_duration,
    get_type_config,
)
from .models import Notification
from .ledger import DedupLedger
from .preferences import (
    DeliveryMethodsSchema,
    FetchGuard,
    PreferenceSet,
    ResolvedPreferences,
    decode_delivery_methods,
    resolve_preferences,
)
from .classifier import ClassificationResult, classify_snapshot
from .admission import AdmissionResult, admit, promote
from .routing import FALLBACK_ROUTE, resolve_route
from .sound import NullSoundPlayer, SoundGate, SoundPlayer
from .events import (
    ActionKind,
    ArrivalSnapshot,
    FetchPreferences,
    NavigationRequest,
    PlaySound,
    PreferenceFetchFailed,
    PreferenceUpdate,
    TrimTick,
    UserAction,
)
from .exceptions import (
    MissingNotificationIdError,
    NotificationPipelineError,
    UnknownActionError,
    UnknownEventError,
)
from .pipeline import PipelineState, Transition, apply, initial_state
from .scheduler import TrimScheduler
from .controller import (
    FloatingNotificationController,
    Navigator,
    PreferenceFetcher,
    overflow_label,
)

__all__ = [
    # Config
    "DeliveryMethod",
    "NotificationType",
    "PipelineConfig",
    "PriorityLevel",
    "TypeConfig",
    "NOTIFICATION_TYPE_CONFIG",
    "get_adjusted_duration",
    "get_type_config",
    # Models
    "Notification",
    "DedupLedger",
    # Preferences
    "DeliveryMethodsSchema",
    "FetchGuard",
    "PreferenceSet",
    "ResolvedPreferences",
    "decode_delivery_methods",
    "resolve_preferences",
    # Classification & admission
    "ClassificationResult",
    "classify_snapshot",
    "AdmissionResult",
    "admit",
    "promote",
    # Actions
    "FALLBACK_ROUTE",
    "resolve_route",
    # Sound
    "NullSoundPlayer",
    "SoundGate",
    "SoundPlayer",
    # Events & effects
    "ActionKind",
    "ArrivalSnapshot",
    "FetchPreferences",
    "NavigationRequest",
    "PlaySound",
    "PreferenceFetchFailed",
    "PreferenceUpdate",
    "TrimTick",
    "UserAction",
    # Errors
    "MissingNotificationIdError",
    "NotificationPipelineError",
    "UnknownActionError",
    "UnknownEventError",
    # Reducer
    "PipelineState",
    "Transition",
    "apply",
    "initial_state",
    # Controller
    "TrimScheduler",
    "FloatingNotificationController",
    "Navigator",
    "PreferenceFetcher",
    "overflow_label",
]
