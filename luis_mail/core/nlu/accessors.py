"""
Read helpers over a request's LUIS analysis.

Each accessor analyzes the email only if this context has no cached outcome,
so calling several of them costs one request.
"""

from typing import Any, Dict, List, Optional

from ..contracts import MailContext
from .analyzer import analyze
from .luis_adapter import LuisAdapter
from .types import Analysis, LuisAnalysisError, LuisFailure, LuisResult


def cached_analysis(ctx: MailContext) -> Optional[Analysis]:
    """Return the cached outcome for ctx without triggering a request."""
    return ctx.analysis


async def _result(ctx: MailContext, adapter: Optional[LuisAdapter]) -> LuisResult:
    outcome = cached_analysis(ctx)
    if outcome is None:
        outcome = await analyze(ctx, adapter)
    if isinstance(outcome, LuisFailure):
        raise LuisAnalysisError(outcome.message)
    return outcome.result


async def top_intent(ctx: MailContext, adapter: Optional[LuisAdapter] = None) -> Optional[str]:
    """The user's most likely intent."""
    return (await _result(ctx, adapter)).top_intent


async def all_intents(ctx: MailContext, adapter: Optional[LuisAdapter] = None) -> List[Dict[str, Any]]:
    """Every intent LUIS scored, in response order."""
    return (await _result(ctx, adapter)).intents


async def key_phrases(ctx: MailContext, adapter: Optional[LuisAdapter] = None) -> List[Dict[str, Any]]:
    """
    Entities of type builtin.keyPhrase.

    Key phrase extraction has to be enabled in Luis.ai under Build > Entities;
    without it the response has no entities at all and MissingCapabilityError
    is raised instead of returning an empty list.
    """
    return (await _result(ctx, adapter)).key_phrases
