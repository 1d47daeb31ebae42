"""HTTP client for the Instagram private Direct API."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, Self

from pydantic import ValidationError

from instarelay.adapters.http_resilience import ResilientClient
from instarelay.config.instagram import InstagramConfig, get_instagram_config

from .schema import PendingInboxResponse, StatusResponse, ThreadResponse, UserInfoResponse

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    import httpx
    from pydantic import BaseModel

    from instarelay.config.http_resilience import ResilienceConfig
    from instarelay.domain.ports.direct_api import DirectApi

log = getLogger(__name__)

_MAX_PENDING_PAGES = 5


class InstagramAPIError(RuntimeError):
    """Raised when the Instagram API returns an application-level error."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class InstagramDirectClient:
    """``DirectApi`` implementation backed by the private mobile API.

    Use as an async context manager; the underlying HTTP client stays open for
    the lifetime of the session.
    """

    config: InstagramConfig = field(default_factory=get_instagram_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False)

    async def __aenter__(self) -> Self:
        self._ensure_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def user_info(self, user_id: str) -> dict[str, object]:
        response = await self._get(f"users/{user_id}/info/", UserInfoResponse)
        return response.user.to_payload()

    async def thread(self, thread_id: str) -> dict[str, object]:
        response = await self._get(f"direct_v2/threads/{thread_id}/", ThreadResponse)
        return response.thread.to_payload()

    async def pending_threads(self) -> list[dict[str, object]]:
        threads: list[dict[str, object]] = []
        cursor: str | None = None
        for _page in range(_MAX_PENDING_PAGES):
            params = {"cursor": cursor} if cursor else None
            response = await self._get(
                "direct_v2/pending_inbox/", PendingInboxResponse, params=params
            )
            threads.extend(thread.to_payload() for thread in response.inbox.threads)
            if not response.inbox.has_older or not response.inbox.oldest_cursor:
                break
            cursor = response.inbox.oldest_cursor
        log.debug("Fetched %s pending threads", len(threads))
        return threads

    def _ensure_client(self) -> ResilientClient:
        if self._client is None:
            resilience = self.config.resilience
            headers = {**(resilience.default_headers or {}), **self.config.headers}
            self._client = self.client_factory(_with_headers(resilience, headers))
        return self._client

    async def _get[M: BaseModel](
        self,
        path: str,
        model: type[M],
        *,
        params: dict[str, str] | None = None,
    ) -> M:
        client = self._ensure_client()
        response = await client.get(path, params=params)
        payload = _decode(response)
        try:
            status = StatusResponse.model_validate(payload)
        except ValidationError as exc:
            raise InstagramAPIError(f"Unexpected Instagram response for {path}") from exc
        if status.status != "ok":
            log.error(f"Instagram API error for {path}: {status.message}")
            raise InstagramAPIError(status.message or "Instagram API request failed")
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise InstagramAPIError(f"Unexpected Instagram response for {path}") from exc


def _decode(response: httpx.Response) -> object:
    if response.status_code >= 400:  # noqa: PLR2004
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("status") == "fail":
            message = body.get("message")
            raise InstagramAPIError(
                str(message or "Instagram API request failed"), code=response.status_code
            )
        response.raise_for_status()
    try:
        return response.json()
    except ValueError as exc:
        raise InstagramAPIError("Instagram response is not JSON") from exc


def _with_headers(config: ResilienceConfig, headers: dict[str, str]) -> ResilienceConfig:
    return replace(config, default_headers=headers)


if TYPE_CHECKING:
    _api_check: DirectApi = InstagramDirectClient()
