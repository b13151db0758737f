"""
Configuration management for the LUIS mail middleware.

Holds the process-wide LUIS endpoint and server settings. Values are read
from environment variables (and a .env file, if present) at import time and
can be replaced at runtime with configure().
"""

import os
import logging
import re
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from dotenv import load_dotenv

logger = logging.getLogger("config")

env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)
    logger.debug("Loaded .env file from %s", env_path)
else:
    load_dotenv()

# Where the host's settings page stores the user's endpoint
SETTINGS_NAMESPACE = "natural_language_middleware"
ENDPOINT_FIELD = "luis_endpoint"

_KEY_PARAM = re.compile(r"(subscription-key=)[^&]*", re.I)


class Config:
    """
    Centralized configuration for the LUIS middleware.

    The endpoint is a URL template such as
    https://<region>.api.cognitive.microsoft.com/luis/v2.0/apps/<appID>?subscription-key=<KEY>&q=
    and is used verbatim as the prefix of every query.
    """

    # LUIS Configuration
    LUIS_ENDPOINT: str = os.getenv("LUIS_ENDPOINT", "")
    LUIS_TIMEOUT: float = float(os.getenv("LUIS_TIMEOUT", "30.0"))

    # HTTP server
    SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
    SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))

    @classmethod
    def masked_endpoint(cls) -> str:
        """Endpoint with the subscription key hidden, for logs."""
        return _KEY_PARAM.sub(r"\1***", cls.LUIS_ENDPOINT)

    @classmethod
    def print_config(cls):
        """Print current configuration (useful for debugging)."""
        print("\nLUIS Mail Configuration:")
        print(f"  Endpoint: {cls.masked_endpoint() or '(not set)'}")
        print(f"  Timeout: {cls.LUIS_TIMEOUT}s")
        print(f"  Server: {cls.SERVER_HOST}:{cls.SERVER_PORT}")
        print()


def configure(settings: Union[Mapping[str, Any], Any, None]) -> None:
    """
    Set the endpoint used by subsequent analyses.

    Args:
        settings: mapping with an "endpoint" key (and optionally "timeout"),
                  or any object with an ``endpoint`` attribute
    """
    if settings is None:
        return
    if isinstance(settings, Mapping):
        endpoint: Optional[str] = settings.get("endpoint")
        timeout = settings.get("timeout")
    else:
        endpoint = getattr(settings, "endpoint", None)
        timeout = getattr(settings, "timeout", None)

    Config.LUIS_ENDPOINT = endpoint or ""
    if timeout is not None:
        Config.LUIS_TIMEOUT = float(timeout)
    logger.debug("LUIS endpoint configured: %s", Config.masked_endpoint() or "(empty)")
