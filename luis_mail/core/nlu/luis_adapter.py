"""
HTTP adapter for the LUIS.ai prediction API.

The LUIS endpoint already embeds the app id, subscription key and the
trailing ``q=`` parameter, so a query is built by appending the encoded
text to it.

API Expected:
    GET <endpoint><url-encoded subject>%20<url-encoded body>

    Response:
        {
            "topScoringIntent": {"intent": "...", "score": 0.9},
            "intents": [{"intent": "...", "score": 0.9}, ...],
            "entities": [{"type": "builtin.keyPhrase", "entity": "...", ...}, ...]
        }
"""

import logging
from typing import Any
from urllib.parse import quote
import httpx

logger = logging.getLogger("luis")


def build_query_url(endpoint: str, subject: str, body: str) -> str:
    """Append the encoded subject and body to the endpoint, joined by an encoded space."""
    return endpoint + quote(subject, safe="") + "%20" + quote(body, safe="")


async def query_async(url: str, timeout: float = 30.0) -> Any:
    """
    Issue a single prediction request.

    Args:
        url: Full query URL (see build_query_url)
        timeout: Request timeout in seconds

    Returns:
        Decoded JSON response

    Raises:
        httpx.HTTPError: On network errors or non-2xx responses
        ValueError: If the body is not valid JSON
    """
    async with httpx.AsyncClient(timeout=timeout) as client:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException:
            logger.error("LUIS request timed out after %.1fs", timeout)
            raise
        except httpx.HTTPStatusError as e:
            logger.error("LUIS server error: %s %s", e.response.status_code, e.response.text[:200])
            raise
        except httpx.RequestError as e:
            logger.error("LUIS network error: %s", e)
            raise

        return response.json()


class LuisAdapter:
    """
    Thin wrapper around query_async so the analyzer can be handed a fake in tests.

    Usage:
        adapter = LuisAdapter(timeout=10.0)
        data = await adapter.query(build_query_url(endpoint, "subject", "body"))
    """

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    async def query(self, url: str) -> Any:
        return await query_async(url, self.timeout)
