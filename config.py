import os
from typing import Optional

from dotenv import load_dotenv
from flask import current_app
from pydantic import BaseModel

load_dotenv()

DEFAULT_ALLOWED_ORIGIN = "https://devcenter.vyral-studio.fr"
DEFAULT_FUNCTIONS_PREFIX = "/.netlify/functions"

SETTINGS_KEY = "WEBHOOK_PROXY_SETTINGS"


class RateLimitSettings(BaseModel):
    window_seconds: float
    max_requests: int


class Settings(BaseModel):
    """
    Runtime configuration of the proxy.

    The webhook URLs are secrets: they are read from here on every request and
    must never be logged or returned to the client. A missing URL is not an
    error until a request actually needs it.
    """

    allowed_origin: str = DEFAULT_ALLOWED_ORIGIN
    functions_prefix: str = DEFAULT_FUNCTIONS_PREFIX

    webhook_connexions: Optional[str] = None
    webhook_avis: Optional[str] = None

    connexion_rate_limit: RateLimitSettings = RateLimitSettings(
        window_seconds=60, max_requests=5
    )
    avis_rate_limit: RateLimitSettings = RateLimitSettings(
        window_seconds=5 * 60, max_requests=2
    )

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8888

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        return cls(
            allowed_origin=environ.get("ALLOWED_ORIGIN", DEFAULT_ALLOWED_ORIGIN),
            functions_prefix=environ.get(
                "FUNCTIONS_PREFIX", DEFAULT_FUNCTIONS_PREFIX
            ),
            webhook_connexions=environ.get("WEBHOOK_CONNEXIONS"),
            webhook_avis=environ.get("WEBHOOK_AVIS"),
            connexion_rate_limit=RateLimitSettings(
                window_seconds=environ.get("CONNEXION_RATE_LIMIT_WINDOW_SEC", 60),
                max_requests=environ.get("CONNEXION_RATE_LIMIT_MAX", 5),
            ),
            avis_rate_limit=RateLimitSettings(
                window_seconds=environ.get("AVIS_RATE_LIMIT_WINDOW_SEC", 5 * 60),
                max_requests=environ.get("AVIS_RATE_LIMIT_MAX", 2),
            ),
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
            host=environ.get("HOST", "0.0.0.0"),
            port=environ.get("PORT", 8888),
        )


def get_settings() -> Settings:
    """Settings of the application handling the current request."""
    return current_app.config[SETTINGS_KEY]
