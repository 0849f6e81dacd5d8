"""Environment-based configuration for the card draw service.

Values are read once from the process environment (and an optional
``.env`` file) and cached. Tests that patch the environment should call
``clear_settings_cache()`` afterwards.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


DEFAULT_API_BASE = "https://www.flashfalcon.info"
DEFAULT_CARD_BACK = (
    "https://fflinebotstatic.s3.ap-northeast-1.amazonaws.com"
    "/default_records/card_style/default_card_back.png"
)
DEFAULT_DISPLAY_COUNT = 3
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_MAX_OPEN_DRAWS = 500


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        api_base: Base URL of the deck content service.
        client_sid: Client session id appended to GET requests, if any.
        request_timeout: Upstream request timeout in seconds.
        display_count: Number of face-down candidates per draw.
        default_card_back: Card back image used when a deck has none.
        log_level: Root logging level.
        cors_origins: Origins allowed by the CORS middleware.
        max_open_draws: Open draws kept before the least recently used is evicted.
    """

    api_base: str = DEFAULT_API_BASE
    client_sid: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    display_count: int = DEFAULT_DISPLAY_COUNT
    default_card_back: str = DEFAULT_CARD_BACK
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("http://localhost:5173",)
    max_open_draws: int = DEFAULT_MAX_OPEN_DRAWS


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables.

    Returns:
        Settings populated from ``CARDHACK_*`` variables.

    Raises:
        ValueError: If the display count or open-draw limit is not a positive integer.
    """
    display_count = int(os.getenv("CARDHACK_DISPLAY_COUNT", str(DEFAULT_DISPLAY_COUNT)))
    if display_count < 1:
        raise ValueError("CARDHACK_DISPLAY_COUNT must be at least 1")

    max_open_draws = int(os.getenv("CARDHACK_MAX_OPEN_DRAWS", str(DEFAULT_MAX_OPEN_DRAWS)))
    if max_open_draws < 1:
        raise ValueError("CARDHACK_MAX_OPEN_DRAWS must be at least 1")

    origins = os.getenv("CARDHACK_CORS_ORIGINS", "http://localhost:5173")

    return Settings(
        api_base=os.getenv("CARDHACK_API_BASE", DEFAULT_API_BASE).rstrip("/"),
        client_sid=os.getenv("CARDHACK_CLIENT_SID") or None,
        request_timeout=float(
            os.getenv("CARDHACK_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
        ),
        display_count=display_count,
        default_card_back=os.getenv("CARDHACK_DEFAULT_CARD_BACK", DEFAULT_CARD_BACK),
        log_level=os.getenv("CARDHACK_LOG_LEVEL", "INFO"),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        max_open_draws=max_open_draws,
    )


def clear_settings_cache() -> None:
    """Clear the cached settings.

    Useful for testing when environment variables change.
    """
    get_settings.cache_clear()
