import logging
from typing import Any, Optional

from .config import configure
from .contracts import MailContext
from .nlu.analyzer import analyze
from .nlu.luis_adapter import LuisAdapter
from .nlu.types import LuisFailure
from .pipeline import Next, Stage

SKILL_KEY = "luis"

log = logging.getLogger("middleware")


def luis_middleware(settings: Optional[Any] = None, adapter: Optional[LuisAdapter] = None) -> Stage:
    """
    Pipeline stage that runs every email through LUIS.

    The raw LUIS response lands in ctx.skills["luis"]; on failure that key
    holds {"status": "error", "message": ...} instead. The pipeline is
    continued exactly once either way.

    Args:
        settings: applied with configure() on every call, e.g. {"endpoint": "..."}
        adapter: LUIS adapter override (defaults to a new LuisAdapter per call)
    """

    async def luis(ctx: MailContext, call_next: Next) -> None:
        try:
            configure(settings)
            outcome = await analyze(ctx, adapter)
            if isinstance(outcome, LuisFailure):
                ctx.skills[SKILL_KEY] = outcome.descriptor()
            else:
                ctx.skills[SKILL_KEY] = outcome.result.raw
        except Exception as e:
            log.exception("LUIS middleware failed [%s]: %s", ctx.corr_id, e)
            ctx.skills[SKILL_KEY] = {"status": "error", "message": str(e)}

        await call_next()

    return luis
