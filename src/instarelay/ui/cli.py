from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from datetime import timedelta
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from instarelay.adapters.instagram import InstagramDirectClient
from instarelay.adapters.offline import OfflineDirectApi
from instarelay.app import ReplayResult, replay_feed
from instarelay.config import (
    ConfigurationError,
    configure_logging,
    get_instagram_config,
    get_realtime_config,
)
from instarelay.config.logging import LOG_LEVEL_NAMES, parse_log_level
from instarelay.domain.model import Entity, EventName

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from instarelay.config.realtime import RealtimeConfig

log = logging.getLogger(__name__)

_RAW_EVENTS = frozenset({EventName.RAW_REALTIME.value, EventName.RAW_FBNS.value})


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile Instagram Direct realtime traffic")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=[*LOG_LEVEL_NAMES, *(name.lower() for name in LOG_LEVEL_NAMES)],
        help="Logging verbosity (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser("replay", help="Replay a recorded feed and log its events")
    replay.add_argument("feed", type=Path, help="JSON-lines file of recorded deliveries")
    replay.add_argument(
        "--offline",
        action="store_true",
        help="Do not call the Instagram API; unseen users and chats stay unresolved",
    )
    replay.add_argument(
        "--max-age",
        type=float,
        help="Maximum message age in seconds for messageCreate (0 disables the check)",
    )
    replay.add_argument(
        "--raw",
        action="store_true",
        help="Also log rawRealtime/rawFbns passthrough events",
    )
    return parser.parse_args(list(argv))


def _realtime_config(max_age: float | None) -> RealtimeConfig:
    config = get_realtime_config()
    if max_age is None:
        return config
    if max_age < 0:
        raise ValueError("--max-age must be non-negative")
    return replace(config, message_max_age=timedelta(seconds=max_age) if max_age else None)


def _describe(value: object) -> str:
    if isinstance(value, Entity):
        return f"{type(value).__name__}({value.id})"
    text = repr(value)
    return text if len(text) <= 120 else f"{text[:117]}..."


def _build_event_logger(*, include_raw: bool) -> Callable[..., None]:
    def log_event(event: str, *args: object) -> None:
        if event in _RAW_EVENTS and not include_raw:
            return
        log.info("%s %s", event, " ".join(_describe(arg) for arg in args))

    return log_event


async def _run_replay(args: argparse.Namespace, config: RealtimeConfig) -> ReplayResult:
    listener = _build_event_logger(include_raw=args.raw)
    if args.offline:
        return await replay_feed(args.feed, api=OfflineDirectApi(), config=config, listener=listener)
    async with InstagramDirectClient(config=get_instagram_config()) as api:
        return await replay_feed(args.feed, api=api, config=config, listener=listener)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=parse_log_level(parsed_args.log_level), force=True)
        config = _realtime_config(parsed_args.max_age)
        if not parsed_args.feed.is_file():
            raise ValueError(f"Feed file not found: {parsed_args.feed}")  # noqa: TRY301
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        result = asyncio.run(_run_replay(parsed_args, config))
        log.info(
            "Replay finished: realtime=%s, pushes=%s, replayed_before_ready=%s",
            result.realtime,
            result.pushes,
            result.replayed_before_ready,
        )
    except Exception:
        log.exception("Fatal error during replay")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()
