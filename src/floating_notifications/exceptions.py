"""Floating Notification Pipeline - Exceptions.

Runtime degradations (bad preference blobs, audio or fetch failures)
never raise; these exceptions signal misuse of the pipeline API.
"""

from typing import Any


class NotificationPipelineError(Exception):
    """Base exception for the floating notification pipeline."""


class UnknownEventError(NotificationPipelineError):
    """Raised when the reducer receives an object that is not a pipeline event."""

    def __init__(self, event: Any):
        super().__init__(f"Unsupported pipeline event: {type(event).__name__}")
        self.event = event


class UnknownActionError(NotificationPipelineError):
    """Raised for a user action kind the dispatcher does not handle."""

    def __init__(self, kind: Any):
        super().__init__(f"Unsupported user action: {kind!r}")
        self.kind = kind


class MissingNotificationIdError(NotificationPipelineError):
    """Raised when a close or click action carries no notification ID."""

    def __init__(self, kind: Any):
        super().__init__(f"User action {kind!r} requires a notification_id")
        self.kind = kind
