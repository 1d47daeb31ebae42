from __future__ import annotations

import asyncio

import httpx
import pytest

from instarelay.adapters.http_resilience import ResilientClient, build_retry
from instarelay.config.http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy


def test_build_retry_uses_policy_values() -> None:
    retry = build_retry(RetryPolicy(total=5, status_forcelist=frozenset({503})))

    assert retry.total == 5
    assert 503 in retry.status_forcelist


def test_resilient_client_applies_base_url_and_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "ok"})

    config = ResilienceConfig(
        name="test",
        base_url="https://api.example.test/v1/",
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        cache=None,
        default_headers={"X-Test": "1"},
    )

    async def scenario() -> httpx.Response:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            return await client.get("items/", params={"page": "2"})

    response = asyncio.run(scenario())

    assert response.json() == {"status": "ok"}
    (request,) = seen
    assert str(request.url) == "https://api.example.test/v1/items/?page=2"
    assert request.headers["X-Test"] == "1"


def test_resilient_client_retries_server_errors() -> None:
    attempts: list[int] = []

    def handler(_request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        if len(attempts) == 1:
            return httpx.Response(503)
        return httpx.Response(200, json={"status": "ok"})

    config = ResilienceConfig(
        name="test",
        base_url="https://api.example.test/",
        retry=RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0),
        cache=None,
    )

    async def scenario() -> int:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            response = await client.get("ping")
            return response.status_code

    assert asyncio.run(scenario()) == 200
    assert len(attempts) == 2


def test_unknown_cache_backend_is_rejected() -> None:
    cache = CacheConfig(backend="redis")  # type: ignore[arg-type]
    config = ResilienceConfig(name="test", cache=cache)

    with pytest.raises(ValueError, match="redis"):
        ResilientClient(config)
