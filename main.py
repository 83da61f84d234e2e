"""CLI entry point: python main.py events.json"""

import argparse
import json
import logging
import sys
from dataclasses import replace

from src.floating_notifications import (
    FloatingNotificationController,
    NotificationPipelineError,
    PipelineConfig,
)
from src.settings import get_settings
from src.logging_config import LogFormat, LoggingConfig, LogLevel, SessionContext, configure_logging

logger = logging.getLogger(__name__)


class PrintingNavigator:
    def navigate(self, request):
        print(f"  -> navigate {request.route} ({request.type or 'unknown type'})")


class PrintingSoundPlayer:
    def __init__(self, asset, volume):
        self.asset = asset
        self.volume = volume

    def rewind(self):
        pass

    def play(self):
        print(f"  -> play {self.asset} (volume {self.volume:.0%})")


def load_script(path):
    """Read an event script: a JSON list of events or {"events": [...]}."""
    with open(path) as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = data.get("events", [])
    if not isinstance(data, list):
        raise ValueError("Event script must be a list of events")
    return data


def replay_event(controller, entry):
    """Feed one scripted event to the controller."""
    kind = entry.get("event")
    if kind == "snapshot":
        controller.receive_snapshot(entry.get("notifications", []))
    elif kind == "preferences":
        controller.update_preferences(entry.get("preferences"), loading=bool(entry.get("loading", False)))
    elif kind == "close":
        controller.close(entry.get("id"))
    elif kind == "click":
        controller.click(entry.get("id"))
    elif kind == "clear_all":
        controller.clear_all()
    elif kind == "trim":
        controller.trim()
    else:
        raise ValueError(f"Unknown scripted event: {kind!r}")


def format_state(controller):
    displayed = ", ".join(n.id for n in controller.displayed) or "-"
    queued = ", ".join(n.id for n in controller.state.queue) or "-"
    lines = [
        f"  enabled:   {controller.enabled}",
        f"  displayed: [{displayed}]",
        f"  queued:    [{queued}]",
    ]
    if controller.overflow_label:
        lines.append(f"  {controller.overflow_label}")
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Replay a scripted event sequence through the floating notification pipeline"
    )
    parser.add_argument("script", help="Path to a JSON event script")
    parser.add_argument(
        "--max-visible", type=int, default=None,
        help="Override the number of visible slots (default: from settings)"
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Print the pipeline state after every event"
    )
    parser.add_argument(
        "--log-format", choices=[f.value for f in LogFormat], default=LogFormat.CONSOLE.value,
        help="Log output format"
    )
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig(
        level=LogLevel.DEBUG if args.verbose else LogLevel.WARNING,
        format=LogFormat(args.log_format),
    ))

    settings = get_settings()
    config = PipelineConfig.from_settings(settings)
    if args.max_visible is not None:
        config = replace(config, max_visible=args.max_visible)

    try:
        events = load_script(args.script)
    except (OSError, ValueError) as exc:
        print(f"Could not load event script: {exc}", file=sys.stderr)
        return 2

    print("=" * 60)
    print("FLOATING NOTIFICATIONS - EVENT REPLAY")
    print(f"Script: {args.script} ({len(events)} events, {config.max_visible} slots)")
    print("=" * 60)

    controller = FloatingNotificationController(
        config=config,
        sound_player=PrintingSoundPlayer(settings.sound_asset, settings.sound_volume),
        navigator=PrintingNavigator(),
    )

    with SessionContext(), controller:
        for i, entry in enumerate(events, 1):
            print(f"\n[{i}/{len(events)}] {entry.get('event')}")
            try:
                replay_event(controller, entry)
            except (NotificationPipelineError, ValueError) as exc:
                logger.error("Event %d rejected: %s", i, exc)
                print(f"  !! rejected: {exc}")
                continue
            if args.verbose:
                print(format_state(controller))

    print("\nFinal state:")
    print(format_state(controller))
    return 0


if __name__ == "__main__":
    sys.exit(main())
