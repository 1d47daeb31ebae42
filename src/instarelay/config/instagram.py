"""Instagram private API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

INSTAGRAM_BASE_URL = "https://i.instagram.com/api/v1/"
INSTAGRAM_TIMEOUT_SECONDS = 10.0
INSTAGRAM_APP_ID = "567067343352427"
DEFAULT_USER_AGENT = (
    "Instagram 275.0.0.27.98 Android (33/13; 420dpi; 1080x2400; samsung; SM-G991B; o1s; "
    "exynos2100; en_US; 458229237)"
)
# Entity payloads change quickly (membership, likes); keep cached responses short-lived.
INSTAGRAM_CACHE_TTL_SECONDS = 5.0


@dataclass(frozen=True)
class InstagramConfig:
    """Holds the session credentials used to resolve users and threads."""

    session_id: str
    resilience: ResilienceConfig
    user_agent: str = DEFAULT_USER_AGENT
    app_id: str = INSTAGRAM_APP_ID

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "X-IG-App-ID": self.app_id,
            "Cookie": f"sessionid={self.session_id}",
            "Accept": "application/json",
        }


def default_instagram_resilience(base_url: str = INSTAGRAM_BASE_URL) -> ResilienceConfig:
    return ResilienceConfig(
        name="instagram",
        base_url=base_url,
        timeout_seconds=INSTAGRAM_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        cache=CacheConfig(backend="memory", default_ttl_seconds=INSTAGRAM_CACHE_TTL_SECONDS),
    )


def get_instagram_config(*, resilience: ResilienceConfig | None = None) -> InstagramConfig:
    values = require_env_vars(("INSTARELAY_SESSION_ID",))
    base_url = optional_env_var("INSTARELAY_BASE_URL", INSTAGRAM_BASE_URL) or INSTAGRAM_BASE_URL
    user_agent = optional_env_var("INSTARELAY_USER_AGENT", DEFAULT_USER_AGENT) or DEFAULT_USER_AGENT
    return InstagramConfig(
        session_id=values["INSTARELAY_SESSION_ID"],
        resilience=resilience or default_instagram_resilience(base_url),
        user_agent=user_agent,
    )
