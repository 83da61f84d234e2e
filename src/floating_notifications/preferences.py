"""Floating Notification Pipeline - Preference Resolution.

Turns the raw preference object supplied by the preference service into
the three flags the pipeline needs:

    enabled        master on, floating on, do-not-disturb off
    sound_enabled  notification sound on and master not off
    is_type_enabled(type)
                   per-type in-app delivery from the delivery-methods blob

The delivery-methods blob is a JSON document owned by another service.
Decoding never raises: a missing, malformed, or unsupported blob decodes
to an empty map and every type fails open (enabled), so a corrupt blob
cannot silently hide all notifications.

Usage:
    from src.floating_notifications.preferences import resolve_preferences

    resolved = resolve_preferences({"masterEnabled": True, "doNotDisturb": False})
    if resolved.enabled and resolved.is_type_enabled("BILL_OVERDUE"):
        ...
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .config import DeliveryMethod

logger = logging.getLogger(__name__)

DELIVERY_METHODS_SCHEMA_VERSION = 1


class PreferenceSet(BaseModel):
    """Raw user preferences as served by the preference service.

    Flags are tri-state: ``None`` means "not set" and is treated as the
    permissive default by the resolver.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    master_enabled: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("masterEnabled", "master_enabled")
    )
    floating_notifications_enabled: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices(
            "floatingNotificationsEnabled",
            "floatingNotifications",
            "floating_notifications_enabled",
        ),
    )
    do_not_disturb: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("doNotDisturb", "do_not_disturb")
    )
    notification_sound: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("notificationSound", "notification_sound")
    )
    # Decoded by decode_delivery_methods, never validated here.
    delivery_methods_json: Any = Field(
        default=None,
        validation_alias=AliasChoices(
            "deliveryMethodsJson",
            "notificationPreferencesJson",
            "delivery_methods_json",
        ),
    )


class DeliveryMethodsSchema(BaseModel):
    """Versioned per-type delivery-method map."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    version: int = DELIVERY_METHODS_SCHEMA_VERSION
    delivery_methods: Dict[str, List[str]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("deliveryMethods", "delivery_methods"),
    )

    def channels_for(self, notification_type: str) -> Optional[List[str]]:
        return self.delivery_methods.get(notification_type)


def decode_delivery_methods(raw: Any) -> DeliveryMethodsSchema:
    """Decode a delivery-methods blob; never raises.

    Args:
        raw: JSON text, an already-parsed mapping, or None. Anything else
            is treated as malformed.

    Returns:
        The decoded schema, or an empty schema when the blob is absent,
        malformed, or of an unsupported version.
    """
    if raw is None or raw == "" or raw == b"":
        return DeliveryMethodsSchema()

    try:
        if isinstance(raw, (str, bytes)):
            schema = DeliveryMethodsSchema.model_validate_json(raw)
        elif isinstance(raw, Mapping):
            schema = DeliveryMethodsSchema.model_validate(dict(raw))
        else:
            logger.error(
                "Malformed delivery-methods preferences, failing open: unexpected %s",
                type(raw).__name__,
            )
            return DeliveryMethodsSchema()
    except ValidationError as exc:
        logger.error("Malformed delivery-methods preferences, failing open: %s", exc)
        return DeliveryMethodsSchema()

    if schema.version > DELIVERY_METHODS_SCHEMA_VERSION:
        logger.warning(
            "Unsupported delivery-methods schema version %d (max %d), failing open",
            schema.version,
            DELIVERY_METHODS_SCHEMA_VERSION,
        )
        return DeliveryMethodsSchema()

    return schema


def parse_preferences(raw: Union[PreferenceSet, Mapping[str, Any], None]) -> Optional[PreferenceSet]:
    """Coerce a raw preference object; None if absent or unusable."""
    if raw is None:
        return None
    if isinstance(raw, PreferenceSet):
        return raw
    try:
        return PreferenceSet.model_validate(raw)
    except ValidationError as exc:
        logger.error("Unusable preference object, treating as not loaded: %s", exc)
        return None


@dataclass(frozen=True)
class ResolvedPreferences:
    """Effective flags derived from a preference set.

    Attributes:
        loaded: Whether a usable preference set was available.
        enabled: Whether floating notifications should be shown at all.
        sound_enabled: Whether audio cues may play.
        delivery: Decoded per-type delivery methods.
        in_app_channel: Channel name that gates floating display.
    """

    loaded: bool = False
    enabled: bool = False
    sound_enabled: bool = False
    delivery: DeliveryMethodsSchema = field(default_factory=DeliveryMethodsSchema)
    in_app_channel: str = DeliveryMethod.IN_APP.value

    def is_type_enabled(self, notification_type: str) -> bool:
        """In-app delivery check for a type; types without an entry fail open."""
        channels = self.delivery.channels_for(notification_type)
        if channels is None:
            return True
        return self.in_app_channel in channels


def resolve_preferences(
    raw: Union[PreferenceSet, Mapping[str, Any], None],
    in_app_channel: str = DeliveryMethod.IN_APP.value,
) -> ResolvedPreferences:
    """Resolve a raw preference object into effective flags."""
    prefs = parse_preferences(raw)
    if prefs is None:
        return ResolvedPreferences(in_app_channel=in_app_channel)

    enabled = (
        prefs.master_enabled is not False
        and prefs.floating_notifications_enabled is not False
        and prefs.do_not_disturb is not True
    )
    sound_enabled = prefs.notification_sound is True and prefs.master_enabled is not False

    return ResolvedPreferences(
        loaded=True,
        enabled=enabled,
        sound_enabled=sound_enabled,
        delivery=decode_delivery_methods(prefs.delivery_methods_json),
        in_app_channel=in_app_channel,
    )


@dataclass(frozen=True)
class FetchGuard:
    """One-shot preference fetch with a bounded retry.

    ``attempted`` blocks further requests; a failed fetch clears it while
    attempts remain.
    """

    attempted: bool = False
    attempts: int = 0

    def evaluate(self, preferences_present: bool, loading: bool) -> Tuple["FetchGuard", bool]:
        """Decide whether a fetch should be requested now."""
        if preferences_present or loading or self.attempted:
            return self, False
        return replace(self, attempted=True, attempts=self.attempts + 1), True

    def on_failure(self, max_attempts: int) -> "FetchGuard":
        if self.attempts < max_attempts:
            return replace(self, attempted=False)
        logger.warning("Preference fetch failed %d times, giving up", self.attempts)
        return self
