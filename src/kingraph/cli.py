"""CLI interface for KinGraph."""
from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, get_args

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from kingraph.config import MatchingConfig, load_extraction_config
from kingraph.confidence import score_confidence
from kingraph.exceptions import ConfigurationError, RecordValidationError
from kingraph.extraction import extract_individual
from kingraph.highlight import highlight as render_highlight
from kingraph.linkage import EntityMatcher
from kingraph.logging import LogLevel, configure_logging
from kingraph.models import IndividualPool, IndividualRecord, record_to_json
from kingraph.validation import validate_record

app = typer.Typer(
    name="kingraph",
    help="Extract provenance-annotated genealogical records from HTML and link them",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    log_level: str = typer.Option(
        None, "--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL"
    ),
):
    """Load .env settings and configure logging."""
    load_dotenv()
    level = log_level or os.getenv("KINGRAPH_LOG_LEVEL")
    if not level:
        return
    level = level.upper()
    if level not in get_args(LogLevel):
        raise typer.BadParameter(f"Unknown log level: {level}", param_hint="--log-level")
    configure_logging(level)  # type: ignore[arg-type]


def _fail_validation(error: RecordValidationError) -> None:
    typer.echo("Extraction result failed validation:", err=True)
    for issue in error.issues:
        typer.echo(f" - {issue.path}: {issue.message}", err=True)
    raise typer.Exit(1)


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"Cannot read {path}: {e}", err=True)
        raise typer.Exit(1)


def _load_record(path: Path) -> IndividualRecord:
    """Read a record file; accepts the ``{record, confidence}`` wrapper too."""
    data = _load_json(path)
    if isinstance(data, dict) and "record" in data and "sourceHtml" not in data:
        data = data["record"]
    try:
        return validate_record(data)
    except RecordValidationError as e:
        _fail_validation(e)
        raise


@app.command()
def extract(
    input_path: Path = typer.Option(
        None, "--input", "-i", help="HTML file to read instead of stdin"
    ),
    source_url: str = typer.Option(None, "--source-url", help="URL of the source page"),
    config_path: Path = typer.Option(
        None, "--config", "-c", help="YAML or JSON file with extra labels and vocabularies"
    ),
    with_confidence: bool = typer.Option(
        False, "--with-confidence", help="Wrap output as {record, confidence}"
    ),
):
    """Extract a record from HTML and print it as JSON."""
    html = input_path.read_text(encoding="utf-8") if input_path else sys.stdin.read()
    if not html.strip():
        typer.echo("No HTML input provided on stdin.", err=True)
        raise typer.Exit(1)

    config = None
    if config_path:
        try:
            config = load_extraction_config(config_path)
        except ConfigurationError as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(2)

    record = extract_individual(html, config=config, source_url=source_url)
    try:
        record = validate_record(record)
    except RecordValidationError as e:
        _fail_validation(e)

    payload: dict[str, Any] = record_to_json(record)
    if with_confidence:
        payload = {"record": payload, "confidence": score_confidence(record)}
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def match(
    record_path: Path = typer.Argument(..., help="Record JSON produced by 'extract'"),
    pool_path: Path = typer.Argument(..., help="JSON snapshot {individuals, records}"),
    as_json: bool = typer.Option(False, "--json", help="Print candidates as JSON"),
):
    """Rank stored individuals against an extracted record."""
    record = _load_record(record_path)
    try:
        pool = IndividualPool.model_validate(_load_json(pool_path))
    except ValidationError as e:
        typer.echo(f"Invalid individual pool {pool_path}: {e}", err=True)
        raise typer.Exit(1)

    matcher = EntityMatcher(MatchingConfig.from_env())
    ranked = matcher.rank(record, pool)
    decision = matcher.decide(record, pool)

    if as_json:
        payload = {
            "decision": decision.value,
            "candidates": [candidate.to_json_dict() for candidate in ranked],
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    names = {individual.id: individual.name for individual in pool.individuals}
    table = Table(title="Match candidates")
    table.add_column("Individual", style="cyan")
    table.add_column("Name")
    table.add_column("Score", justify="right")
    table.add_column("Name sim.", justify="right")
    table.add_column("Birth", justify="right")
    table.add_column("Death", justify="right")
    table.add_column("Parents", justify="right")
    table.add_column("Latest record")

    def _fmt(value: float | None) -> str:
        return "-" if value is None else f"{value:.2f}"

    for candidate in ranked:
        parts = candidate.components
        table.add_row(
            candidate.individual_id,
            names.get(candidate.individual_id, ""),
            f"{candidate.score:.3f}",
            _fmt(parts.name),
            _fmt(parts.birth_year),
            _fmt(parts.death_year),
            _fmt(parts.parents),
            candidate.latest_record_ref or "-",
        )

    console.print(table)
    console.print(f"[bold]Decision:[/bold] {decision.value}")


@app.command()
def highlight(
    record_path: Path = typer.Argument(..., help="Record JSON produced by 'extract'"),
    output: Path = typer.Option(None, "--output", "-o", help="Write HTML here instead of stdout"),
):
    """Render the record's source HTML with cited spans marked."""
    record = _load_record(record_path)
    rendered = render_highlight(record.source_html, record.provenance)
    if output:
        output.write_text(rendered, encoding="utf-8")
        console.print(f"[green]Highlighted HTML saved to {output}[/green]")
    else:
        typer.echo(rendered)


if __name__ == "__main__":
    app()
