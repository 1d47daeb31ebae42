"""Realtime engine configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import optional_env_var, optional_float_env_var
from .errors import InvalidConfigurationError

MESSAGE_SYNC_TOPIC_ID = "146"
DEFAULT_MESSAGE_MAX_AGE_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class RealtimeConfig:
    """Tuning knobs for the reconciliation engine.

    ``message_max_age`` bounds how old a freshly added message may be and still
    raise ``messageCreate``; ``None`` disables the age check.
    """

    message_sync_topic: str = MESSAGE_SYNC_TOPIC_ID
    message_max_age: timedelta | None = timedelta(seconds=DEFAULT_MESSAGE_MAX_AGE_SECONDS)


def get_realtime_config() -> RealtimeConfig:
    seconds = optional_float_env_var(
        "INSTARELAY_MESSAGE_MAX_AGE", DEFAULT_MESSAGE_MAX_AGE_SECONDS
    )
    if seconds is not None and seconds < 0:
        raise InvalidConfigurationError("INSTARELAY_MESSAGE_MAX_AGE", "must be non-negative")
    topic = optional_env_var("INSTARELAY_MESSAGE_SYNC_TOPIC", MESSAGE_SYNC_TOPIC_ID)
    return RealtimeConfig(
        message_sync_topic=topic or MESSAGE_SYNC_TOPIC_ID,
        message_max_age=timedelta(seconds=seconds) if seconds else None,
    )
