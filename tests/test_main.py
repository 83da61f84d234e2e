"""Tests for the event replay CLI."""

import json
import logging

import pytest

from main import load_script, main


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _write(tmp_path, payload):
    path = tmp_path / "events.json"
    path.write_text(json.dumps(payload))
    return str(path)


PREFS = {
    "masterEnabled": True,
    "floatingNotificationsEnabled": True,
    "doNotDisturb": False,
    "notificationSound": True,
}


class TestReplayCli:
    def test_load_script_accepts_wrapped_list(self, tmp_path):
        path = _write(tmp_path, {"events": [{"event": "trim"}]})
        assert load_script(path) == [{"event": "trim"}]

    def test_load_script_rejects_scalar(self, tmp_path):
        path = _write(tmp_path, 42)
        with pytest.raises(ValueError):
            load_script(path)

    def test_replay_prints_final_state(self, tmp_path, capsys):
        history = [{"id": "h0", "type": "EXPENSE_ADDED"}]
        live = history + [{"id": f"n{i}", "type": "NEW_MESSAGE", "chatId": i} for i in range(7)]
        path = _write(tmp_path, [
            {"event": "preferences", "preferences": PREFS},
            {"event": "snapshot", "notifications": history},
            {"event": "snapshot", "notifications": live},
            {"event": "click", "id": "n0"},
            {"event": "bogus"},
        ])
        assert main([path, "--log-format", "json"]) == 0
        out = capsys.readouterr().out
        assert "navigate /chat/0" in out
        assert "play /notification-sound.mp3 (volume 50%)" in out
        assert "rejected" in out
        assert "displayed: [n1, n2, n3, n4, n5]" in out
        assert "queued:    [n6]" in out
        assert "+1 more notification" in out

    def test_max_visible_override(self, tmp_path, capsys):
        path = _write(tmp_path, [
            {"event": "preferences", "preferences": PREFS},
            {"event": "snapshot", "notifications": [{"id": "h0"}]},
            {"event": "snapshot", "notifications": [{"id": "h0"}, {"id": "a"}, {"id": "b"}]},
        ])
        assert main([path, "--max-visible", "1"]) == 0
        assert "displayed: [a]" in capsys.readouterr().out

    def test_missing_script(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.json")]) == 2
        assert "Could not load event script" in capsys.readouterr().err
