import asyncio
import json
import logging
from typing import Optional
from luis_mail.core.config import Config
from luis_mail.core.contracts import MailContext
from luis_mail.core.middleware import SKILL_KEY, luis_middleware
from luis_mail.core.nlu.luis_adapter import LuisAdapter
from luis_mail.core.pipeline import Next, Pipeline

log = logging.getLogger("app")


async def report(ctx: MailContext, call_next: Next) -> None:
    """Last stage: print what LUIS made of the email."""
    luis = ctx.skills.get(SKILL_KEY) or {}
    if luis.get("status") == "error":
        print(f"  LUIS error: {luis.get('message')}")
    else:
        top = (luis.get("topScoringIntent") or {}).get("intent")
        print(f"  Top intent: {top}")
        for intent in luis.get("intents") or []:
            print(f"    {intent.get('intent')}: {intent.get('score')}")
        phrases = [e.get("entity") for e in luis.get("entities") or [] if e.get("type") == "builtin.keyPhrase"]
        if phrases:
            print(f"  Key phrases: {json.dumps(phrases)}")
    await call_next()


def build_pipeline(settings: Optional[dict] = None, adapter: Optional[LuisAdapter] = None) -> Pipeline:
    return Pipeline(luis_middleware(settings, adapter), report)


def parse_line(line: str) -> MailContext:
    """'subject | body' -> MailContext. Without a '|' the whole line is the body."""
    subject, sep, body = line.partition("|")
    if not sep:
        subject, body = "", subject
    return MailContext(subject=subject.strip(), body=body.strip())


async def repl(pipeline: Pipeline) -> None:
    """Tiny REPL that pushes each line through the pipeline."""
    print("\nLUIS Mail Interactive Mode")
    print("Type 'subject | body' to analyze an email. Type 'quit' to exit.")

    while True:
        try:
            print("\n> ", end="", flush=True)
            # input in worker thread to keep event loop responsive
            user_input = await asyncio.to_thread(input)
            user_input = user_input.strip()

            if user_input.lower() in ["quit", "exit", "q"]:
                break

            if user_input:
                await pipeline.run(parse_line(user_input))

        except KeyboardInterrupt:
            break
        except EOFError:
            break


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    Config.print_config()
    if not Config.LUIS_ENDPOINT:
        log.warning("LUIS_ENDPOINT is not set; every analysis will fail")
    await repl(build_pipeline())
    print("Stopped.")


if __name__ == "__main__":
    asyncio.run(main())
