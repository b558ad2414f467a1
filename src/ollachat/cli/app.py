"""Main CLI application using Typer."""
import asyncio
from enum import Enum

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ..catalog import ModelDirectory, format_model_size
from ..chat import ChatSession, Notice, Role, Severity
from ..logs import configure_logging
from ..settings import Settings, create_settings_store
from .providers import (
    console_notifier,
    get_base_url,
    get_client,
    get_default_model,
    get_session,
    get_settings,
)

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="ollachat",
    help="Chat with models served by a local Ollama server",
    no_args_is_help=True,
    add_completion=True,
)

settings_app = typer.Typer(help="Show or change persisted chat settings")
app.add_typer(settings_app, name="settings")

# Console for rich output
console = Console()

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


class SettingName(str, Enum):
    """Settings that can be changed from the command line."""

    THINKING = "thinking"
    STREAMING = "streaming"


def parse_flag(value: str) -> bool:
    """Parse a command line boolean such as 'on' or 'false'."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise typer.BadParameter(f"Expected true/false, got {value!r}")


def _run_settings(settings: Settings, stream: bool | None, think: bool | None) -> Settings:
    """Apply one-off overrides without touching the persisted values."""
    if stream is None and think is None:
        return settings
    overridden = Settings(create_settings_store("memory"))
    overridden.streaming_mode = settings.streaming_mode if stream is None else stream
    overridden.thinking_mode = settings.thinking_mode if think is None else think
    return overridden


class StreamPrinter:
    """Session listener that prints the newest assistant text as it grows."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self._message_id: str | None = None
        self._content_printed = 0
        self._thinking_printed = 0

    def __call__(self, session: ChatSession) -> None:
        if not session.messages:
            return
        message = session.messages[-1]
        if message.role != Role.ASSISTANT:
            return
        if message.id != self._message_id:
            self._message_id = message.id
            self._content_printed = 0
            self._thinking_printed = 0

        thinking = message.thinking or ""
        if len(thinking) > self._thinking_printed:
            self._console.print(thinking[self._thinking_printed:], style="dim italic", end="", markup=False, highlight=False)
            self._thinking_printed = len(thinking)

        if len(message.content) > self._content_printed:
            if self._content_printed == 0 and self._thinking_printed:
                self._console.print("\n", end="")
            self._console.print(message.content[self._content_printed:], end="", markup=False, highlight=False)
            self._content_printed = len(message.content)


@app.command()
def chat(
    url: str | None = typer.Option(
        None,
        "--url",
        "-u",
        help="Ollama server URL (default: $OLLAMA_URL or http://localhost:11434)"
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to select on startup (default: $OLLAMA_MODEL or the first listed)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive terminal chat interface."""
    async def _chat():
        from ..ui import run_textual_tui

        client = get_client(url)
        try:
            await run_textual_tui(
                client=client,
                settings=get_settings(),
                model=get_default_model(model),
                log_level=log_level,
            )
        finally:
            await client.close()
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Message to send"),
    url: str | None = typer.Option(None, "--url", "-u", help="Ollama server URL"),
    model: str | None = typer.Option(None, "--model", "-m", help="Model to use"),
    stream: bool | None = typer.Option(
        None,
        "--stream/--no-stream",
        help="Override the streaming setting for this run"
    ),
    think: bool | None = typer.Option(
        None,
        "--think/--no-think",
        help="Override the thinking setting for this run"
    ),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help="Log level"),
):
    """Send a single message and print the reply."""
    configure_logging(log_level)

    async def _ask() -> bool:
        notices: list[Notice] = []
        show_notice = console_notifier(console)

        def notifier(notice: Notice) -> None:
            notices.append(notice)
            show_notice(notice)

        async with get_client(url) as client:
            settings = _run_settings(get_settings(), stream, think)
            session = get_session(client, settings, model=model, notifier=notifier)

            if not session.selected_model:
                directory = ModelDirectory(client, notifier=notifier)
                session.selected_model = await directory.refresh()

            if session.selected_model:
                console.print(f"[dim]{session.selected_model}[/dim]")

            session.subscribe(StreamPrinter(console))
            await session.send_message(prompt)
            console.print()

        return not any(n.severity == Severity.ERROR for n in notices)

    try:
        ok = asyncio.run(_ask())
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted.[/dim]")
        raise typer.Exit(code=130)

    if not ok:
        raise typer.Exit(code=1)


@app.command()
def models(
    url: str | None = typer.Option(None, "--url", "-u", help="Ollama server URL"),
):
    """List the models installed on the Ollama server."""
    async def _models() -> ModelDirectory:
        async with get_client(url) as client:
            directory = ModelDirectory(client, notifier=console_notifier(console))
            await directory.refresh()
            return directory

    directory = asyncio.run(_models())

    if not directory.models:
        console.print(f"[yellow]No models found at {get_base_url(url)}[/yellow]")
        raise typer.Exit(code=1)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Name", style="cyan")
    table.add_column("Size", style="green", justify="right")
    table.add_column("Family", style="yellow")
    table.add_column("Parameters", style="magenta")
    table.add_column("Quantization", style="dim")

    for info in directory.models:
        details = info.details
        table.add_row(
            info.name,
            format_model_size(info.size),
            (details.family if details else None) or "-",
            (details.parameter_size if details else None) or "-",
            (details.quantization_level if details else None) or "-",
        )

    console.print(table)


@settings_app.command("show")
def settings_show():
    """Show the persisted settings."""
    settings = get_settings()

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="bold cyan", width=12)
    table.add_column("Value")
    table.add_row("thinking", "on" if settings.thinking_mode else "off")
    table.add_row("streaming", "on" if settings.streaming_mode else "off")
    table.add_row("backend", settings.store.backend_type)

    console.print(table)


@settings_app.command("set")
def settings_set(
    name: SettingName = typer.Argument(..., help="Setting to change"),
    value: str = typer.Argument(..., help="true/false (also on/off, yes/no, 1/0)"),
):
    """Change a persisted setting."""
    flag = parse_flag(value)
    settings = get_settings()

    if name == SettingName.THINKING:
        settings.thinking_mode = flag
    else:
        settings.streaming_mode = flag

    console.print(f"[green]{name.value} set to {'on' if flag else 'off'}[/green]")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
