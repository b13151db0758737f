import asyncio
import json
import logging
import typer
from luis_mail.app import main as app_main
from luis_mail.core.config import Config, configure
from luis_mail.core.contracts import MailContext
from luis_mail.core.nlu import accessors
from luis_mail.core.nlu.analyzer import analyze
from luis_mail.core.nlu.types import LuisAnalysisError, LuisFailure, MissingCapabilityError

app = typer.Typer(help="LUIS Mail CLI")


def _setup(endpoint: str | None, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    if endpoint:
        configure({"endpoint": endpoint})


@app.command("luis:analyze")
def luis_analyze(
    subject: str,
    body: str,
    endpoint: str = typer.Option(None, "--endpoint", "-e", help="LUIS endpoint URL (ends with q=)"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Print the raw LUIS response for SUBJECT and BODY."""
    _setup(endpoint, verbose)
    outcome = asyncio.run(analyze(MailContext(subject=subject, body=body)))
    if isinstance(outcome, LuisFailure):
        typer.echo(f"LUIS analysis failed: {outcome.message}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(outcome.result.raw, indent=2))


@app.command("luis:intent")
def luis_intent(
    subject: str,
    body: str,
    endpoint: str = typer.Option(None, "--endpoint", "-e", help="LUIS endpoint URL (ends with q=)"),
    all_intents: bool = typer.Option(False, "--all", "-a", help="List every scored intent"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Print the most likely intent (or all of them)."""
    _setup(endpoint, verbose)

    async def _intent():
        ctx = MailContext(subject=subject, body=body)
        typer.echo(await accessors.top_intent(ctx))
        if all_intents:
            for intent in await accessors.all_intents(ctx):
                typer.echo(f"  {intent.get('intent')}: {intent.get('score')}")

    try:
        asyncio.run(_intent())
    except LuisAnalysisError as e:
        typer.echo(f"LUIS analysis failed: {e}", err=True)
        raise typer.Exit(code=1)


@app.command("luis:key-phrases")
def luis_key_phrases(
    subject: str,
    body: str,
    endpoint: str = typer.Option(None, "--endpoint", "-e", help="LUIS endpoint URL (ends with q=)"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Print the key phrases LUIS found."""
    _setup(endpoint, verbose)
    try:
        phrases = asyncio.run(accessors.key_phrases(MailContext(subject=subject, body=body)))
    except (LuisAnalysisError, MissingCapabilityError) as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    for phrase in phrases:
        typer.echo(phrase.get("entity", ""))


@app.command("run")
def run():
    """Analyze emails typed at an interactive prompt."""
    asyncio.run(app_main())


@app.command("server")
def server(
    host: str = typer.Option(None, "--host", "-H", help="Host to bind to"),
    port: int = typer.Option(None, "--port", "-p", help="Port to bind to"),
    endpoint: str = typer.Option(None, "--endpoint", "-e", help="LUIS endpoint URL (ends with q=)"),
):
    """Start the HTTP API."""
    import uvicorn
    from luis_mail.server import create_app

    if host:
        Config.SERVER_HOST = host
    if port:
        Config.SERVER_PORT = port
    _setup(endpoint, verbose=True)

    typer.echo(f"Starting HTTP server on {Config.SERVER_HOST}:{Config.SERVER_PORT}")
    typer.echo("API endpoints available at:")
    typer.echo("   - POST /api/luis/analyze")
    typer.echo("   - POST /api/luis/top-intent")
    typer.echo("   - POST /api/luis/intents")
    typer.echo("   - POST /api/luis/key-phrases")
    typer.echo("   - GET  /health")

    uvicorn.run(
        create_app(),
        host=Config.SERVER_HOST,
        port=Config.SERVER_PORT,
        log_level="info"
    )


if __name__ == "__main__":
    app()
