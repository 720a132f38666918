"""Main CLI application using Typer."""
import asyncio
from enum import Enum

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ..actions import ActionKind
from ..conversation import create_conversation_store
from ..decisions import Decision
from ..errors import CodexWebError
from ..events import EventType, QueueEventChannel, StreamEvent
from ..logs import configure_logging
from ..session import SessionCoordinator, TurnOutcome
from .providers import get_backend, get_config_store, get_settings

app = typer.Typer(
    name="codexweb",
    help="Streaming chat backend with human-approved commands and patches",
    no_args_is_help=True,
    add_completion=True,
)
config_app = typer.Typer(help="Show or change the stored configuration", no_args_is_help=True)
app.add_typer(config_app, name="config")

console = Console()

SECRET_KEYS = {"apiKeyOpenAI", "apiKeyGemini", "apiKeyOpenRouter", "apiKeyXAI"}


class ReviewChoice(str, Enum):
    """How ``chat`` resolves proposals."""

    ASK = "ask"
    APPROVE = "approve"
    REJECT = "reject"


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (default: CODEXWEB_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Listen port (default: CODEXWEB_PORT)"),
):
    """Run the HTTP server."""
    import uvicorn

    from ..server import create_app

    settings = get_settings()
    configure_logging(settings.log_level)
    config_store = get_config_store(settings)
    backend = get_backend(settings, config_store, console)

    console.print(
        f"[green]Backend server listening on http://{host or settings.host}:{port or settings.port}[/green] "
        f"[dim]({backend.name} backend)[/dim]"
    )
    uvicorn.run(
        create_app(config_store, backend=backend),
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


@app.command()
def chat(
    prompt: str = typer.Argument(..., help="Prompt to send"),
    provider: str | None = typer.Option(None, "--provider", help="Provider (default: stored defaultProvider)"),
    model: str | None = typer.Option(None, "--model", "-m", help="Model (default: stored defaultModel)"),
    review: ReviewChoice = typer.Option(ReviewChoice.ASK, "--review", "-r", help="How to resolve proposals"),
    delay: float = typer.Option(0.0, "--delay", help="Step delay for the simulated backend"),
):
    """Run one turn in-process and review its proposals."""
    async def _chat():
        settings = get_settings()
        configure_logging("WARNING")
        config_store = get_config_store(settings)
        coordinator = SessionCoordinator(
            backend=get_backend(settings, config_store, console, delay=delay),
            store=create_conversation_store("memory"),
            config_store=config_store,
        )
        channel = QueueEventChannel(label="cli")
        turn = asyncio.create_task(coordinator.run_turn(channel, prompt, provider=provider, model=model))

        actions = []
        async for event in channel.events():
            _render(event)
            if event.type == EventType.ACTION:
                actions.append(event.payload["action"])
        result = await turn

        if result.outcome == TurnOutcome.FAILED:
            raise typer.Exit(code=1)

        for action in actions:
            approved = _review(action, review)
            try:
                confirmation = coordinator.reconciler.reconcile(
                    Decision(action_id=action["actionId"], message_id=action["messageId"], approved=approved),
                    session_id=result.session_id,
                )
            except CodexWebError as e:
                console.print(f"[red]Error: {e}[/red]")
                raise typer.Exit(code=1)
            console.print(f"[dim]{confirmation.confirmation}[/dim]")

    asyncio.run(_chat())


@config_app.command("show")
def config_show():
    """Print the stored configuration (API keys masked)."""
    record = get_config_store(get_settings()).get().to_wire()

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="bold cyan")
    table.add_column("Value")
    for key, value in record.items():
        table.add_row(key, _mask(value) if key in SECRET_KEYS else str(value))
    console.print(table)


@config_app.command("set")
def config_set(
    pairs: list[str] = typer.Argument(..., help="KEY=VALUE pairs, e.g. approvalMode=auto-edit"),
):
    """Update stored configuration values."""
    partial = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            console.print(f"[red]Error: expected KEY=VALUE, got {pair!r}[/red]")
            raise typer.Exit(code=1)
        partial[key] = value

    try:
        get_config_store(get_settings()).set(partial)
    except ValidationError as e:
        console.print(f"[red]Error: {e.errors()[0]['msg']}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Updated {', '.join(partial)}[/green]")


def _render(event: StreamEvent) -> None:
    if event.type == EventType.STATUS:
        style = "red" if event.payload.get("error") else "dim"
        console.print(f"[{style}]{event.payload['content']}[/{style}]")
    elif event.type == EventType.TEXT:
        console.print(event.payload["content"], end="", markup=False, highlight=False)
    elif event.type == EventType.ACTION:
        action = event.payload["action"]
        console.print()
        if action["contentType"] == ActionKind.COMMAND.value:
            console.print(Panel(Syntax(action["command"], "bash"), title="Proposed command", border_style="yellow"))
        else:
            console.print(Panel(
                Syntax(action["diffString"], "diff"),
                title=f"Proposed patch: {action['fileName']}",
                border_style="yellow",
            ))
    elif event.type == EventType.DONE:
        console.print()


def _review(action: dict, choice: ReviewChoice) -> bool:
    if choice == ReviewChoice.APPROVE:
        return True
    if choice == ReviewChoice.REJECT:
        return False
    label = action.get("command") or action.get("fileName")
    return typer.confirm(f"Approve {action['contentType']} {label}?", default=False)


def _mask(value: object) -> str:
    text = str(value)
    return text[:4] + "..." if len(text) > 8 else "***"
