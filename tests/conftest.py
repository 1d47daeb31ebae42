from __future__ import annotations

import pytest

from instarelay.domain.cache import EntityCache
from instarelay.domain.realtime import RealtimeEngine
from instarelay.domain.resolution import CachingResolver
from instarelay.domain.validity import FreshMessageValidator
from tests.helpers.direct_api import FakeDirectApi
from tests.helpers.events import EventRecorder


@pytest.fixture
def cache() -> EntityCache:
    return EntityCache()


@pytest.fixture
def fake_api() -> FakeDirectApi:
    return FakeDirectApi()


@pytest.fixture
def resolver(cache: EntityCache, fake_api: FakeDirectApi) -> CachingResolver:
    return CachingResolver(cache=cache, api=fake_api)


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def engine(
    cache: EntityCache, resolver: CachingResolver, recorder: EventRecorder
) -> RealtimeEngine:
    """Live engine without the message age check."""

    engine = RealtimeEngine(
        cache=cache,
        resolver=resolver,
        validator=FreshMessageValidator(max_age=None),
    )
    engine.events.on_any(recorder)
    engine.mark_ready()
    return engine


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    for name in (
        "INSTARELAY_SESSION_ID",
        "INSTARELAY_BASE_URL",
        "INSTARELAY_USER_AGENT",
        "INSTARELAY_MESSAGE_MAX_AGE",
        "INSTARELAY_MESSAGE_SYNC_TOPIC",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("INSTARELAY_DATA_DIR", str(tmp_path_factory.mktemp("instarelay-data")))
