import json
import sys
from pathlib import Path
from typing import cast

import typer
from rich.console import Console
from rich.table import Table

from ..chunking import split_markdown, verify_chunks
from ..core.config import Settings
from ..core.errors import ConfigurationError
from ..core.logging import LogFormat, log, setup_logging
from ..core.models import SplitOptions
from ..ingest import build_chunk_records, load_markdown

app = typer.Typer(add_completion=False, help="Recursive Markdown chunker")


@app.callback()
def _init(
    ctx: typer.Context,
    config_file: str | None = typer.Option(
        None,
        "--config",
        help="Config file (.markchunk.yaml auto-discovered)",
    ),
    log_format: str | None = typer.Option(None, "--log-format", help="Logging format: json|plain|auto"),
    log_level: str | None = typer.Option(None, "--log-level", help="Minimum log level"),
) -> None:
    settings = Settings.load_config(config_file)
    fmt = log_format or settings.LOG_FORMAT
    setup_logging(
        format_type=cast(LogFormat, fmt) if fmt in ("json", "plain", "auto") else "auto",
        level=log_level or settings.LOG_LEVEL,
    )
    ctx.obj = settings


def _options(ctx: typer.Context, **overrides) -> SplitOptions:
    """Resolve split options or exit with code 2 listing every problem.

    Flags left at ``None`` were not given and keep the configured value.
    """
    settings: Settings = ctx.obj
    try:
        return settings.split_options(**{k: v for k, v in overrides.items() if v is not None})
    except ConfigurationError as e:
        for problem in e.problems:
            typer.echo(f"❌ {problem}", err=True)
        raise typer.Exit(2) from e


def _read(path: Path) -> str:
    try:
        return load_markdown(path)
    except OSError as e:
        typer.echo(f"❌ Cannot read {path}: {e}", err=True)
        raise typer.Exit(1) from e


@app.command()
def version() -> None:
    from .. import __version__

    typer.echo(__version__)


@app.command()
def config(ctx: typer.Context) -> None:
    """Print the effective settings (file -> env precedence applied)."""
    for k, v in ctx.obj.model_dump().items():
        typer.echo(f"{k}={v}")


@app.command()
def split(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Markdown file to split"),
    max_chars: int | None = typer.Option(None, "--max-chars", help="Target maximum chunk size"),
    min_chars: int | None = typer.Option(None, "--min-chars", help="Minimum chunk size before merging"),
    overlap: int | None = typer.Option(None, "--overlap", help="Characters carried back from the previous chunk"),
    header_level: list[int] | None = typer.Option(
        None, "--header-level", help="Header level used for splitting (repeatable)"
    ),
    id_prefix: str | None = typer.Option(None, "--id-prefix", help="Prefix for unique ids"),
    trim: bool | None = typer.Option(
        None, "--trim/--no-trim", help="Strip surrounding whitespace from chunk content"
    ),
    source: str = typer.Option("", "--source", help="Source name recorded on every record"),
    out: Path | None = typer.Option(None, "--out", help="Write NDJSON here instead of stdout"),
) -> None:
    """
    Split a Markdown file and emit one JSON record per chunk (NDJSON).

    Each record carries the chunk fields plus ``contentHash`` and ``source``.
    """
    options = _options(
        ctx,
        max_chars=max_chars,
        min_chars=min_chars,
        overlap=overlap,
        header_levels=tuple(header_level) if header_level else None,
        id_prefix=id_prefix,
        trim=trim,
    )
    text = _read(file)
    chunks = split_markdown(text, options)
    records = build_chunk_records(chunks, source=source, page_name=file.stem)

    lines = [json.dumps(record, ensure_ascii=False) for record in records]
    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        typer.echo(f"✅ Wrote {len(lines)} chunks to {out}", err=True)
    else:
        for line in lines:
            typer.echo(line)

    log.info("cli.split.done", file=str(file), chunks=len(chunks))


@app.command()
def verify(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Markdown file to split and verify"),
    max_chars: int | None = typer.Option(None, "--max-chars", help="Target maximum chunk size"),
    min_chars: int | None = typer.Option(None, "--min-chars", help="Minimum chunk size before merging"),
    overlap: int | None = typer.Option(None, "--overlap", help="Characters carried back from the previous chunk"),
    trim: bool | None = typer.Option(
        None, "--trim/--no-trim", help="--no-trim keeps whitespace so reconstruction is checked"
    ),
) -> None:
    """Split a file, print the verification report as JSON, exit 1 on FAIL."""
    options = _options(
        ctx,
        max_chars=max_chars,
        min_chars=min_chars,
        overlap=overlap,
        trim=trim,
    )
    text = _read(file)
    chunks = split_markdown(text, options)
    report = verify_chunks(text, chunks, options)

    typer.echo(json.dumps(report, indent=2))
    if report["status"] != "PASS":
        log.warning("cli.verify.failed", file=str(file))
        raise typer.Exit(1)


@app.command()
def inspect(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Markdown file to split"),
    max_chars: int | None = typer.Option(None, "--max-chars", help="Target maximum chunk size"),
    overlap: int | None = typer.Option(None, "--overlap", help="Characters carried back from the previous chunk"),
) -> None:
    """Show the chunk layout of a file as a table."""
    options = _options(ctx, max_chars=max_chars, overlap=overlap)
    chunks = split_markdown(_read(file), options)

    table = Table(title=f"{file.name}: {len(chunks)} chunks", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Unique ID", style="green")
    table.add_column("Title")
    table.add_column("Span", justify="right")
    table.add_column("Chars", justify="right")
    table.add_column("Header path")
    table.add_column("Source")

    for i, chunk in enumerate(chunks):
        table.add_row(
            str(i),
            chunk.unique_id,
            chunk.title,
            f"{chunk.start_char}-{chunk.end_char}",
            f"{len(chunk.content):,}",
            " > ".join(chunk.header_path) or "-",
            chunk.source_link or "-",
        )

    Console(file=sys.stdout).print(table)


if __name__ == "__main__":
    app()
