"""Staged request pipeline: each stage gets the context and a call_next to continue."""

from typing import Awaitable, Callable, Optional
import logging

from .contracts import MailContext

Next = Callable[[], Awaitable[None]]
Stage = Callable[[MailContext, Next], Awaitable[None]]
Handler = Callable[[MailContext], Awaitable[None]]


class Pipeline:
    def __init__(self, *stages: Stage):
        self._stages: list[Stage] = list(stages)
        self._log = logging.getLogger("pipeline")

    def use(self, stage: Stage) -> "Pipeline":
        self._stages.append(stage)
        self._log.info("use: %s (total stages: %d)", getattr(stage, "__name__", str(stage)), len(self._stages))
        return self

    async def run(self, ctx: MailContext, handler: Optional[Handler] = None) -> bool:
        """
        Run every stage in order, then handler.

        Returns True if the request made it past the last stage.
        """
        reached_end = False

        async def dispatch(i: int) -> None:
            nonlocal reached_end
            if i == len(self._stages):
                reached_end = True
                if handler is not None:
                    await handler(ctx)
                return

            stage = self._stages[i]
            called = False

            async def call_next() -> None:
                nonlocal called
                if called:
                    raise RuntimeError(f"call_next() called more than once by {getattr(stage, '__name__', stage)}")
                called = True
                await dispatch(i + 1)

            await stage(ctx, call_next)
            if not called:
                self._log.warning("stage %s [%s] did not continue the pipeline",
                                  getattr(stage, "__name__", str(stage)), ctx.corr_id)

        await dispatch(0)
        return reached_end
