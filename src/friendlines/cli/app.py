"""Main CLI application using Typer."""
import asyncio
from datetime import datetime

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..components import build_components
from ..config import get_settings
from ..errors import FriendlinesError
from ..interview.models import InterviewSession, SessionStatus
from ..logger import setup_logging

# Load environment variables
load_dotenv()

app = typer.Typer(
    name="friendlines",
    help="Friendlines AI Reporter: interview users and draft newsflashes",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()


def _print_draft(session: InterviewSession) -> None:
    draft = session.draft_newsflash
    if draft is None:
        return
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold cyan", width=12)
    table.add_column("Value")
    table.add_row("Headline", draft.headline)
    table.add_row("Details", draft.sub_headline)
    table.add_row("Category", draft.category)
    table.add_row("Severity", draft.severity)
    console.print(Panel(table, title="Draft newsflash", border_style="green"))


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings)
    uvicorn.run(
        "friendlines.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def chat(
    user_id: str = typer.Option("local-user", "--user", "-u", help="Caller user id"),
    interview_type: str = typer.Option("daily", "--type", "-t", help="daily, weekly or event"),
    language: str = typer.Option("en", "--language", "-l", help="en, he or es"),
):
    """Run an interview in the terminal against the configured provider."""
    settings = get_settings()
    setup_logging(settings)

    async def _chat():
        components = build_components(settings)
        service = components.service

        try:
            await components.open()
            session = await service.start_interview(user_id, interview_type, language)
            console.print(f"[dim]Session {session.id}[/dim]\n")

            while session.status == SessionStatus.ACTIVE:
                console.print(f"[bold magenta]Scoop:[/bold magenta] {session.messages[-1].content}")
                answer = await asyncio.to_thread(console.input, "[bold cyan]You:[/bold cyan] ")
                if answer.strip().lower() in ("/quit", "/exit"):
                    session = await service.cancel_interview(session.id, user_id)
                    console.print("[yellow]Interview cancelled.[/yellow]")
                    break
                if not answer.strip():
                    continue
                session = await service.send_message(session.id, user_id, answer)

            _print_draft(session)

        except FriendlinesError as e:
            console.print(f"[red]{e.kind}: {e.message}[/red]")
            raise typer.Exit(code=1)
        finally:
            await components.close()

    asyncio.run(_chat())


@app.command("add-user")
def add_user(
    user_id: str = typer.Argument(..., help="User id"),
    name: str = typer.Argument(..., help="Display name used by the reporter"),
):
    """Add or rename a user in the configured user directory."""
    settings = get_settings()

    async def _add_user():
        components = build_components(settings)
        try:
            await components.open()
            await components.users.put_user(user_id, name)
            console.print(f"[green]Saved {user_id} as {name}[/green]")
        finally:
            await components.close()

    asyncio.run(_add_user())


@app.command("purge-expired")
def purge_expired():
    """Delete sessions whose 24h ttl has passed."""
    settings = get_settings()

    async def _purge():
        components = build_components(settings)
        try:
            await components.open()
            removed = await components.store.purge_expired(datetime.now().astimezone())
            console.print(f"[green]Removed {removed} expired session(s)[/green]")
        finally:
            await components.close()

    asyncio.run(_purge())


if __name__ == "__main__":
    app()
