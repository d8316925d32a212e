from __future__ import annotations

import asyncio
import json
import logging
import secrets
from datetime import datetime

import typer

from .cli_formatter import format_conversation_result, format_server_list, result_to_dict
from .config import AppConfig, LoggingConfig, RuntimeConfig
from .container import Container
from ..core.domain.models import ConversationResult
from ..infra.approval import auto_approve

try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

app = typer.Typer(add_completion=False, no_args_is_help=True)


def new_session_id() -> str:
    return f"{datetime.now():%Y%m%d-%H%M%S}-{secrets.token_hex(3)}"


async def console_approval(title: str, message: str) -> bool:
    """Ask on the terminal; the blocking prompt runs in a worker thread."""
    def _confirm() -> bool:
        typer.echo(f"\n{title}", err=True)
        return typer.confirm(message, default=False, err=True)

    return await asyncio.to_thread(_confirm)


def _build_container(
    *,
    session_id: str | None,
    log_level: str,
    console_output: bool,
    entra_id: bool = False,
) -> Container:
    base = AppConfig()
    config = base.model_copy(
        update={
            "azure": base.azure.model_copy(update={"use_entra_id": base.azure.use_entra_id or entra_id}),
            "runtime": RuntimeConfig(session_id=session_id),
            "logging": LoggingConfig(
                logger_name=base.logging.logger_name,
                console_output=console_output,
                level=log_level.upper(),
            ),
        }
    )
    container = Container()
    container.config.from_pydantic(config)
    container.init_resources()
    return container


def _emit(result: ConversationResult, json_output: bool) -> None:
    if json_output:
        typer.echo(json.dumps(result_to_dict(result), ensure_ascii=False, indent=2))
    else:
        typer.echo(format_conversation_result(result))
    if not result.succeeded:
        raise typer.Exit(code=1)


@app.command()
def send(
    prompt: str = typer.Argument(..., help="Prompt for the reasoning service"),
    model: str | None = typer.Option(None, "--model", help="Model name (overrides config)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Approve every tool call without asking"),
    entra_id: bool = typer.Option(False, "--entra-id", help="Azure: sign in with Entra ID instead of the API key"),
    session: str | None = typer.Option(None, "--session", help="Session id for the JSONL log"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Mirror log events to the console"),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Send a prompt with the configured remote tool servers attached."""
    level = logging._nameToLevel.get(log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", force=True)

    session_id = session or new_session_id()
    container = _build_container(
        session_id=session_id, log_level=log_level, console_output=verbose, entra_id=entra_id
    )
    if not json_output:
        typer.echo(f"Session: {session_id}", err=True)

    container.approval_notifier().subscribe(auto_approve if yes else console_approval)
    try:
        result = asyncio.run(container.send_uc().execute(prompt, model=model))
    finally:
        container.shutdown_resources()

    _emit(result, json_output)


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Prompt for the reasoning service"),
    model: str | None = typer.Option(None, "--model", help="Model name (overrides config)"),
    entra_id: bool = typer.Option(False, "--entra-id", help="Azure: sign in with Entra ID instead of the API key"),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Send a prompt without any tool servers."""
    container = _build_container(session_id=None, log_level="INFO", console_output=False, entra_id=entra_id)
    try:
        result = asyncio.run(container.ask_uc().execute(prompt, model=model))
    finally:
        container.shutdown_resources()

    _emit(result, json_output)


@app.command()
def servers(
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """List configured remote tool servers."""
    container = _build_container(session_id=None, log_level="INFO", console_output=False)
    try:
        rows = container.servers_uc().execute()
    finally:
        container.shutdown_resources()

    if json_output:
        typer.echo(json.dumps({"count": len(rows), "servers": rows}, ensure_ascii=False, indent=2))
    else:
        typer.echo(format_server_list(rows))


@app.command()
def logs(
    session: str = typer.Argument(None, help="Optional session id. If omitted, lists summaries of all runs."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Raw log lines, or per-tool call counts in the table."),
):
    """Show conversation logs - either for one session or a summary of all runs."""
    container = _build_container(session_id=None, log_level="INFO", console_output=False)
    try:
        lines = container.logs_uc().execute(session, verbose)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        container.shutdown_resources()

    for line in lines:
        typer.echo(line)


if __name__ == "__main__":
    app()
