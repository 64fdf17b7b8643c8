import asyncio
import os
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
import uvicorn
from httpx import AsyncClient
from rich.console import Console
from rich.markup import escape
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from booktracker.app import create_app
from booktracker.client.api import ApiError, BookTrackerClient
from booktracker.client.state import TrackerState
from booktracker.config import DEFAULT_API_URL, load_settings
from booktracker.database import open_store
from booktracker.errors import ConfigurationError, StoreUnavailable
from booktracker.logging_config import setup_logging

T = TypeVar("T")

EMPTY_MESSAGE = "No books yet. Start by adding one!"

app = typer.Typer(help="Book Tracker: serve the API or manage books through it.", no_args_is_help=True)
console = Console()
err_console = Console(stderr=True)


def make_http_client(api_url: str) -> AsyncClient:
    return AsyncClient(base_url=api_url, timeout=10.0)


def _run(ctx: typer.Context, action: Callable[[BookTrackerClient], Awaitable[T]]) -> T:
    async def runner() -> T:
        async with make_http_client(ctx.obj) as http:
            return await action(BookTrackerClient(http))

    try:
        return asyncio.run(runner())
    except ApiError as e:
        console.print(f"[bold red]Request failed ({e.status}): {escape(str(e.detail))}[/]")
        raise typer.Exit(1)


def print_books(books: list[dict]) -> None:
    if not books:
        console.print(f"[italic]{EMPTY_MESSAGE}[/]")
        return
    table = Table(title="Book Tracker", header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("ID", style="dim", no_wrap=True)
    for number, book in enumerate(books, start=1):
        table.add_row(str(number), escape(book["title"]), escape(book["author"]), book["id"])
    console.print(table)


@app.callback()
def main(
    ctx: typer.Context,
    api_url: str = typer.Option(DEFAULT_API_URL, "--api-url", envvar="BOOKTRACKER_API_URL", help="Base URL of the API"),
):
    setup_logging(os.environ.get("BOOKTRACKER_LOG_LEVEL", "INFO"))
    ctx.obj = api_url


async def _check_store(database_url: str) -> None:
    engine = await open_store(database_url)
    await engine.dispose()


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Listen address (default BOOKTRACKER_HOST)"),
    port: int | None = typer.Option(None, help="Listen port (default BOOKTRACKER_PORT)"),
):
    """Run the API server."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        err_console.print(f"[bold red]{e}[/]")
        raise typer.Exit(1)
    try:
        asyncio.run(_check_store(settings.database_url))
    except StoreUnavailable as e:
        err_console.print(f"[bold red]{escape(str(e))}[/]")
        raise typer.Exit(1)
    uvicorn.run(
        create_app(settings),
        host=host if host is not None else settings.host,
        port=port if port is not None else settings.port,
    )


@app.command("list")
def list_command(ctx: typer.Context):
    """List all books."""
    print_books(_run(ctx, lambda client: client.list_books()))


@app.command()
def add(ctx: typer.Context, title: str, author: str):
    """Add a book."""
    book = _run(ctx, lambda client: client.create_book(title, author))
    console.print(f"[green]Added:[/] {escape(book['title'])} by {escape(book['author'])} ({book['id']})")


@app.command()
def edit(
    ctx: typer.Context,
    book_id: str,
    title: str | None = typer.Option(None, help="New title"),
    author: str | None = typer.Option(None, help="New author"),
):
    """Change the title and/or author of a book."""
    fields = {k: v for k, v in {"title": title, "author": author}.items() if v is not None}
    if not fields:
        console.print("[yellow]Nothing to change: pass --title and/or --author.[/]")
        raise typer.Exit(1)
    book = _run(ctx, lambda client: client.update_book(book_id, **fields))
    console.print(f"[green]Updated:[/] {escape(book['title'])} by {escape(book['author'])}")


@app.command()
def delete(ctx: typer.Context, book_id: str):
    """Delete a book."""
    result = _run(ctx, lambda client: client.delete_book(book_id))
    console.print(f"[green]{result['message']}[/]")


def _ask(label: str, current: str) -> str:
    if current:
        return Prompt.ask(label, default=current)
    return Prompt.ask(label)


def _pick(state: TrackerState) -> dict | None:
    if not state.books:
        console.print(f"[italic]{EMPTY_MESSAGE}[/]")
        return None
    number = IntPrompt.ask("Book #")
    if not 1 <= number <= len(state.books):
        console.print("[red]No such book.[/]")
        return None
    return state.books[number - 1]


async def _tracker(client: BookTrackerClient) -> None:
    state = TrackerState(client)
    await state.mount()
    while True:
        print_books(state.books)
        action = Prompt.ask(
            f"(s) {state.submit_label}  (e) Edit  (d) Delete  (c) Cancel edit  (q) Quit",
            choices=["s", "e", "d", "c", "q"],
            default="q",
        )
        if action == "q":
            return
        if action == "c":
            state.cancel_edit()
        elif action == "e":
            book = _pick(state)
            if book is not None:
                state.edit(book)
                console.print(f"Editing [bold]{escape(book['title'])}[/]")
        elif action == "d":
            book = _pick(state)
            if book is not None and not await state.delete(book["id"]):
                console.print("[red]Could not delete the book.[/]")
        else:
            state.title = _ask("Book Title", state.title)
            state.author = _ask("Author", state.author)
            if not state.title.strip() or not state.author.strip():
                console.print("[yellow]Title and author are both required.[/]")
            elif await state.submit() is None:
                console.print("[red]Could not save the book.[/]")


@app.command()
def tracker(ctx: typer.Context):
    """Interactive list-and-form view over the API."""
    _run(ctx, _tracker)
