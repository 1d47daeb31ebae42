from __future__ import annotations

from datetime import timedelta

import pytest

from instarelay.config import InvalidConfigurationError, get_realtime_config
from instarelay.config.realtime import MESSAGE_SYNC_TOPIC_ID


def test_defaults() -> None:
    config = get_realtime_config()

    assert config.message_sync_topic == MESSAGE_SYNC_TOPIC_ID == "146"
    assert config.message_max_age == timedelta(seconds=10)


def test_max_age_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INSTARELAY_MESSAGE_MAX_AGE", "30")
    monkeypatch.setenv("INSTARELAY_MESSAGE_SYNC_TOPIC", "147")

    config = get_realtime_config()

    assert config.message_max_age == timedelta(seconds=30)
    assert config.message_sync_topic == "147"


def test_zero_max_age_disables_check(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INSTARELAY_MESSAGE_MAX_AGE", "0")

    assert get_realtime_config().message_max_age is None


def test_negative_max_age_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INSTARELAY_MESSAGE_MAX_AGE", "-1")

    with pytest.raises(InvalidConfigurationError, match="non-negative") as exc:
        get_realtime_config()
    assert exc.value.name == "INSTARELAY_MESSAGE_MAX_AGE"
