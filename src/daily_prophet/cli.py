"""Command-line entry points: scheduled tick, manual refresh, inspection, serving."""

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich import print as rprint

from .cache import EditionCache, build_cache
from .config import configure_logging, get_settings
from .errors import SectionNotFound, UpstreamServiceError
from .sections import section

app = typer.Typer(help="Generate and inspect the daily edition.")


def _cache() -> EditionCache:
    settings = get_settings()
    configure_logging(settings.log_level)
    return build_cache(settings)


def _write_output(out_path: Path, data: Any) -> None:
    out_path.write_text(
        json.dumps(data, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


@app.command("tick")
def tick_command():
    """
    Scheduled entry point: make sure today's edition exists in the store.

    Point cron (or any scheduler) at this command once a day.
    """
    cache = _cache()
    today = cache.today()
    cached = cache.peek(today)
    if cached is not None:
        rprint(
            f"[cyan]Edition {today} already cached "
            f"(created {cached.created_at.isoformat()}).[/cyan]"
        )
        return
    try:
        # peek already found nothing fresh; skip a second read.
        record = cache.force_refresh(today)
    except UpstreamServiceError as exc:
        rprint(f"[red]Generation failed for {today}: {exc}[/red]")
        raise typer.Exit(code=1)
    rprint(f"[green]Generated edition {today} at {record.created_at.isoformat()}.[/green]")


@app.command("refresh")
def refresh_command():
    """Regenerate today's edition even when a fresh one is cached."""
    cache = _cache()
    today = cache.today()
    try:
        record = cache.force_refresh(today)
    except UpstreamServiceError as exc:
        rprint(f"[red]Generation failed for {today}: {exc}[/red]")
        raise typer.Exit(code=1)
    rprint(f"[green]Regenerated edition {today} at {record.created_at.isoformat()}.[/green]")


@app.command("show")
def show_command(
    section_name: Optional[str] = typer.Option(
        None,
        "--section",
        "-s",
        help="Only print one section, e.g. overview, magic or news2.",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write JSON to this path instead of printing it.",
    ),
):
    """Print today's edition (generating it if needed)."""
    cache = _cache()
    today = cache.today()
    try:
        record = cache.get_or_create(today)
    except UpstreamServiceError as exc:
        rprint(f"[red]Generation failed for {today}: {exc}[/red]")
        raise typer.Exit(code=1)

    data: Any = record.payload
    if section_name:
        template = cache.generator.template
        try:
            data = section(
                record.payload,
                section_name,
                sections=template.sections,
                list_field=template.list_field,
            )
        except SectionNotFound as exc:
            rprint(f"[red]{exc}[/red]")
            raise typer.Exit(code=1)

    if out:
        _write_output(out, data)
        rprint(f"[cyan]Wrote output to {out}[/cyan]")
    else:
        typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


@app.command("serve")
def serve_command(
    host: str = typer.Option("0.0.0.0", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes (development)."),
):
    """Run the HTTP service."""
    import uvicorn

    configure_logging(get_settings().log_level)
    uvicorn.run("daily_prophet.server:app", host=host, port=port, reload=reload)


def main():
    app()


if __name__ == "__main__":
    main()
