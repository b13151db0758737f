"""
FastAPI HTTP server for the LUIS mail middleware.

Exposes the middleware pipeline and the intent accessors over HTTP so an
email can be analyzed without embedding the package.
"""

import logging
from typing import Any, AsyncContextManager, Callable, Optional
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from luis_mail.core.config import ENDPOINT_FIELD, SETTINGS_NAMESPACE
from luis_mail.core.contracts import MailContext
from luis_mail.core.middleware import SKILL_KEY, luis_middleware
from luis_mail.core.nlu import accessors
from luis_mail.core.nlu.luis_adapter import LuisAdapter
from luis_mail.core.nlu.types import LuisAnalysisError, MissingCapabilityError
from luis_mail.core.pipeline import Pipeline

logger = logging.getLogger("server")


def _context_from_request(request: dict) -> MailContext:
    subject = request.get("subject") or ""
    body = request.get("body") or ""
    if not isinstance(subject, str) or not isinstance(body, str):
        raise HTTPException(status_code=400, detail="Subject and body must be strings")
    if not subject.strip() and not body.strip():
        raise HTTPException(status_code=400, detail="Subject and body cannot both be empty")

    stored: dict[str, Any] = {}
    if request.get("endpoint"):
        stored[SETTINGS_NAMESPACE] = {ENDPOINT_FIELD: request["endpoint"]}
    return MailContext(subject=subject, body=body, stored_data=stored)


def create_app(
    adapter: Optional[LuisAdapter] = None,
    lifespan: Optional[Callable[[FastAPI], AsyncContextManager]] = None,
) -> FastAPI:
    """
    Create FastAPI app.

    Args:
        adapter: LUIS adapter shared by all requests (a default one is created per request if None)
        lifespan: Optional lifespan context manager for startup/shutdown

    Returns:
        FastAPI app instance
    """
    app_kwargs = {
        "title": "LUIS Mail API",
        "description": "Intent and key phrase analysis of email text via LUIS.ai",
        "version": "0.1.0"
    }

    if lifespan:
        app_kwargs["lifespan"] = lifespan

    app = FastAPI(**app_kwargs)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict this
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    pipeline = Pipeline(luis_middleware(adapter=adapter))

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok", "service": "luis-mail"}

    @app.post("/api/luis/analyze")
    async def analyze_email(request: dict):
        """
        Run an email through the LUIS middleware.

        Accepts JSON with:
        {
            "subject": "email subject (may contain HTML)",
            "body": "email body (may contain HTML)",
            "endpoint": "optional LUIS endpoint overriding the configured one"
        }

        Returns the raw LUIS response, or an error descriptor, under "luis".
        """
        ctx = _context_from_request(request)
        await pipeline.run(ctx)
        return {"luis": ctx.skills.get(SKILL_KEY)}

    @app.post("/api/luis/top-intent")
    async def get_top_intent(request: dict):
        """Most likely intent of the email."""
        ctx = _context_from_request(request)
        try:
            return {"intent": await accessors.top_intent(ctx, adapter)}
        except LuisAnalysisError as e:
            raise HTTPException(status_code=502, detail=f"LUIS analysis failed: {e}")

    @app.post("/api/luis/intents")
    async def get_intents(request: dict):
        """All scored intents of the email."""
        ctx = _context_from_request(request)
        try:
            return {
                "top_intent": await accessors.top_intent(ctx, adapter),
                "intents": await accessors.all_intents(ctx, adapter),
            }
        except LuisAnalysisError as e:
            raise HTTPException(status_code=502, detail=f"LUIS analysis failed: {e}")

    @app.post("/api/luis/key-phrases")
    async def get_key_phrases(request: dict):
        """Key phrases LUIS extracted from the email."""
        ctx = _context_from_request(request)
        try:
            return {"key_phrases": await accessors.key_phrases(ctx, adapter)}
        except LuisAnalysisError as e:
            raise HTTPException(status_code=502, detail=f"LUIS analysis failed: {e}")
        except MissingCapabilityError as e:
            logger.warning("Key phrases requested but not enabled: %s", e)
            raise HTTPException(status_code=422, detail=str(e))

    return app
