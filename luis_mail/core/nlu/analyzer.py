import logging
from typing import Optional

import httpx

from ..config import Config
from ..contracts import MailContext
from .luis_adapter import LuisAdapter, build_query_url
from .sanitize import strip_tags
from .types import Analysis, LuisFailure, LuisResult, LuisSuccess

log = logging.getLogger("analyzer")


def resolve_endpoint(ctx: MailContext) -> str:
    """The user's saved endpoint wins over the process-wide one."""
    return ctx.endpoint_override() or Config.LUIS_ENDPOINT


async def analyze(ctx: MailContext, adapter: Optional[LuisAdapter] = None) -> Analysis:
    """
    Send the email's subject and body to LUIS and cache the outcome on ctx.

    Always issues a request; use the accessors for cached reads. Failures are
    logged and returned as LuisFailure, never raised.
    """
    adapter = adapter or LuisAdapter(timeout=Config.LUIS_TIMEOUT)
    subject = strip_tags(ctx.subject)
    body = strip_tags(ctx.body)

    endpoint = resolve_endpoint(ctx)
    if not endpoint:
        log.error("LUIS endpoint not configured [%s]", ctx.corr_id)
        outcome: Analysis = LuisFailure("LUIS endpoint is not configured")
        ctx.analysis = outcome
        return outcome

    log.info("Analyzing email [%s]: subject=%d chars, body=%d chars", ctx.corr_id, len(subject), len(body))
    try:
        # quote() raises UnicodeEncodeError on lone surrogates
        url = build_query_url(endpoint, subject, body)
        data = await adapter.query(url)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        outcome = LuisSuccess(LuisResult(data))
        log.info("LUIS top intent [%s]: %s", ctx.corr_id, outcome.result.top_intent)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        log.error("LUIS API call failed [%s]: %s", ctx.corr_id, e)
        outcome = LuisFailure(str(e) or type(e).__name__, e)

    ctx.analysis = outcome
    return outcome
