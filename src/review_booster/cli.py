"""Command-line entry points for managing the review store."""

import json
import logging
import os
from pathlib import Path
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.markup import escape

from .config import StoreConfig, get_settings
from .errors import StoreError
from .models import ClientDetails
from .store import ReviewStore

app = typer.Typer(help="Manage client review pages, their reviews and QR codes.")


def _store(ctx: typer.Context) -> ReviewStore:
    return ctx.obj


def _fail(exc: Exception) -> NoReturn:
    rprint(f"[red]{escape(str(exc))}[/red]")
    raise typer.Exit(code=1)


def _details(
    name: Optional[str],
    review_link: Optional[str],
    logo: Optional[str],
    primary: Optional[str],
    secondary: Optional[str],
) -> ClientDetails:
    """Build a details record from whichever options were given."""
    fields = {
        "client_name": name,
        "google_review_link": review_link,
        "logo_url": logo,
        "primary_color": primary,
        "secondary_color": secondary,
    }
    return ClientDetails(**{k: v for k, v in fields.items() if v is not None})


@app.callback()
def main_callback(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Directory holding client documents and seed files (overrides REVIEW_DATA_DIR).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log store activity."),
):
    """Open the store every subcommand works on."""
    settings = get_settings()
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)
    config = settings.store_config()
    if data_dir is not None:
        config = StoreConfig(
            data_root=data_dir.expanduser().resolve(),
            default_seed_file=config.default_seed_file,
        )
    ctx.obj = ReviewStore(config, base_url=settings.base_url())


@app.command("data-files")
def data_files_command(ctx: typer.Context):
    """List the JSON files (clients and seed files) in the data directory."""
    try:
        names = _store(ctx).list_data_files()
    except StoreError as exc:
        _fail(exc)
    for name in names:
        rprint(escape(name))


@app.command("clients")
def clients_command(ctx: typer.Context):
    """List every client id with its display name."""
    try:
        summaries = _store(ctx).list_clients()
    except StoreError as exc:
        _fail(exc)
    if not summaries:
        rprint("[yellow]No clients yet.[/yellow]")
    for summary in summaries:
        rprint(f"[cyan]{escape(summary.client_id)}[/cyan]  {escape(summary.client_name)}")


@app.command("create")
def create_command(
    ctx: typer.Context,
    client_id: str = typer.Argument(..., help="Alphanumeric id, 3-50 characters."),
    name: str = typer.Option(..., "--name", help="Display name."),
    review_link: str = typer.Option(..., "--review-link", help="Google review URL."),
    primary: str = typer.Option(..., "--primary", help="Primary colour, #RRGGBB."),
    secondary: str = typer.Option(..., "--secondary", help="Secondary colour, #RRGGBB."),
    logo: str = typer.Option("", "--logo", help="Logo URL (optional)."),
    seed: Optional[str] = typer.Option(
        None, "--seed", help="Seed file in the data directory for the initial reviews."
    ),
):
    """Create a client, seeding its reviews from a seed file."""
    try:
        details = _details(name, review_link, logo, primary, secondary)
        document = _store(ctx).create_client(client_id, details, seed)
    except (StoreError, ValidationError) as exc:
        _fail(exc)
    rprint(
        f"[green]Created {escape(document.client_id)} "
        f"with {len(document.reviews)} reviews[/green]"
    )


@app.command("show")
def show_command(ctx: typer.Context, client_id: str):
    """Print a client's details (without the review list)."""
    try:
        detail = _store(ctx).get_client_detail(client_id)
    except StoreError as exc:
        _fail(exc)
    typer.echo(json.dumps(detail, ensure_ascii=False, indent=2))


@app.command("update")
def update_command(
    ctx: typer.Context,
    client_id: str,
    name: Optional[str] = typer.Option(None, "--name"),
    review_link: Optional[str] = typer.Option(None, "--review-link"),
    primary: Optional[str] = typer.Option(None, "--primary"),
    secondary: Optional[str] = typer.Option(None, "--secondary"),
    logo: Optional[str] = typer.Option(None, "--logo"),
):
    """Change detail fields; options left out keep their current value."""
    store = _store(ctx)
    try:
        current = store.get_client(client_id)
        details = _details(
            name if name is not None else current.client_name,
            review_link if review_link is not None else current.google_review_link,
            logo,
            primary if primary is not None else current.primary_color,
            secondary if secondary is not None else current.secondary_color,
        )
        store.update_client(client_id, details)
    except (StoreError, ValidationError) as exc:
        _fail(exc)
    rprint(f"[green]Updated {escape(client_id)}[/green]")


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    client_id: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
):
    """Delete a client document."""
    if not yes:
        typer.confirm(f"Delete client {client_id}?", abort=True)
    try:
        _store(ctx).delete_client(client_id)
    except StoreError as exc:
        _fail(exc)
    rprint(f"[green]Deleted {escape(client_id)}[/green]")


@app.command("reviews")
def reviews_command(ctx: typer.Context, client_id: str):
    """List a client's reviews, newest first."""
    try:
        reviews = _store(ctx).list_reviews(client_id)
    except StoreError as exc:
        _fail(exc)
    for review in reviews:
        typer.echo(review)


@app.command("add-review")
def add_review_command(ctx: typer.Context, client_id: str, text: str):
    """Add a review to the front of a client's list."""
    if not 5 <= len(text) <= 500:
        raise typer.BadParameter("review text must be 5-500 characters.")
    try:
        _store(ctx).add_review(client_id, text)
    except StoreError as exc:
        _fail(exc)
    rprint("[green]Review added.[/green]")


@app.command("delete-review")
def delete_review_command(ctx: typer.Context, client_id: str, text: str):
    """Remove the first review whose text matches exactly."""
    try:
        _store(ctx).delete_review(client_id, text)
    except StoreError as exc:
        _fail(exc)
    rprint("[green]Review deleted.[/green]")


@app.command("random-review")
def random_review_command(ctx: typer.Context, client_id: str):
    """Print one review picked at random."""
    try:
        review = _store(ctx).random_review(client_id)
    except StoreError as exc:
        _fail(exc)
    typer.echo(review)


@app.command("qr")
def qr_command(
    ctx: typer.Context,
    client_id: str,
    out: Path = typer.Option(..., "--out", "-o", help="Where to write the PNG."),
):
    """Write a QR code for the client's review page."""
    try:
        image = _store(ctx).generate_qr(client_id)
    except StoreError as exc:
        _fail(exc)
    out.write_bytes(image.image_bytes)
    rprint(f"[cyan]Wrote QR for {escape(image.url)} to {escape(str(out))}[/cyan]")


@app.command("export")
def export_command(
    ctx: typer.Context,
    out: Path = typer.Argument(..., help="JSON file to write, keyed by client id."),
):
    """Bundle every valid client document into one JSON file."""
    try:
        bundle = _store(ctx).export_clients()
    except StoreError as exc:
        _fail(exc)
    out.write_text(json.dumps(bundle, ensure_ascii=False, indent=2), encoding="utf-8")
    rprint(f"[green]Exported {len(bundle)} clients to {escape(str(out))}[/green]")


@app.command("serve")
def serve_command(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host"),
    port: Optional[int] = typer.Option(None, "--port"),
    reload: bool = typer.Option(False, "--reload"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    # The server process reads its store location from the environment.
    os.environ["REVIEW_DATA_DIR"] = str(_store(ctx).config.data_root)
    uvicorn.run(
        "review_booster.server:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


def main():
    app()


if __name__ == "__main__":
    main()
