from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from instarelay.adapters.offline import OfflineDirectApi
from instarelay.app import ReplayResult
from instarelay.ui import cli as cli_module
from tests.helpers.payloads import batch, patch, thread_path, thread_payload

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "configure_logging", lambda **_kwargs: None)


@pytest.fixture
def feed(tmp_path: Path) -> Path:
    path = tmp_path / "feed.jsonl"
    records = [
        {"kind": "threads", "threads": [thread_payload("1", title="Old")]},
        {"kind": "ready"},
        {
            "kind": "realtime",
            "topic": "146",
            "payload": batch(patch("replace", thread_path("1"), {"thread_title": "New"})),
        },
    ]
    path.write_text("\n".join(json.dumps(record) for record in records), encoding="utf-8")
    return path


def test_replay_offline_uses_offline_api(monkeypatch: pytest.MonkeyPatch, feed: Path) -> None:
    captured: dict[str, object] = {}

    async def fake_replay(path: Path, **kwargs: object) -> ReplayResult:
        captured["path"] = path
        captured.update(kwargs)
        return ReplayResult()

    monkeypatch.setattr(cli_module, "replay_feed", fake_replay)

    cli_module.main(["replay", str(feed), "--offline", "--max-age", "0"])

    assert captured["path"] == feed
    assert isinstance(captured["api"], OfflineDirectApi)
    assert captured["config"].message_max_age is None  # type: ignore[attr-defined]
    assert callable(captured["listener"])


def test_replay_logs_domain_events(feed: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("INFO"):
        cli_module.main(["--log-level", "debug", "replay", str(feed), "--offline"])

    assert "chatNameUpdate Chat(1) 'Old' 'New'" in caplog.text
    assert "rawRealtime" not in caplog.text
    assert "Replay finished: realtime=1" in caplog.text


def test_missing_feed_exits_with_validation_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["replay", str(tmp_path / "absent.jsonl"), "--offline"])

    assert excinfo.value.code == 2


def test_negative_max_age_exits_with_validation_error(feed: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["replay", str(feed), "--offline", "--max-age", "-5"])

    assert excinfo.value.code == 2


def test_online_replay_without_session_is_fatal(feed: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["replay", str(feed)])

    assert excinfo.value.code == 1


def test_invalid_environment_exits_with_validation_error(
    monkeypatch: pytest.MonkeyPatch, feed: Path
) -> None:
    monkeypatch.setenv("INSTARELAY_MESSAGE_MAX_AGE", "ten")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["replay", str(feed), "--offline"])

    assert excinfo.value.code == 2
