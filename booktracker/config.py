import os
from collections.abc import Mapping
from dataclasses import dataclass

from booktracker.errors import ConfigurationError

DEFAULT_PORT = 4000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_API_URL = f"http://localhost:{DEFAULT_PORT}"


@dataclass(frozen=True)
class Settings:
    database_url: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def load_settings(environ: Mapping[str, str] = os.environ) -> Settings:
    """Read server settings from the environment.

    ``BOOKTRACKER_DATABASE_URL`` is required; everything else has a default.
    """
    database_url = environ.get("BOOKTRACKER_DATABASE_URL", "").strip()
    if not database_url:
        raise ConfigurationError("BOOKTRACKER_DATABASE_URL is not set")

    raw_port = environ.get("BOOKTRACKER_PORT", str(DEFAULT_PORT))
    try:
        port = int(raw_port)
    except ValueError:
        raise ConfigurationError(f"BOOKTRACKER_PORT must be an integer, got {raw_port!r}") from None

    return Settings(
        database_url=database_url,
        host=environ.get("BOOKTRACKER_HOST", DEFAULT_HOST),
        port=port,
        log_level=environ.get("BOOKTRACKER_LOG_LEVEL", "INFO"),
    )
