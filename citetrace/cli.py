"""Command-line interface for citetrace."""

import dataclasses
import json
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from citetrace.annotate.annotator import Template, annotate
from citetrace.bundle_paths import get_project_root
from citetrace.citations import Citation, CitationType
from citetrace.errors import ReporterDataError
from citetrace.extractor.pipeline import extract_citations
from citetrace.reader.pdf_reader import read_document
from citetrace.resolver.scope import ScopeStrategy
from citetrace.utils.logging import setup_logging
from config.settings import Settings

console = Console()


def _load_settings(**overrides) -> Settings:
    load_dotenv(get_project_root() / ".env", override=False)
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def _read_input(input_file: str) -> str:
    path = Path(input_file)
    try:
        return read_document(path)
    except Exception as e:
        console.print(f"[red]Error:[/red] could not read {path}: {e}")
        raise SystemExit(1)


def _run_extraction(text: str, settings: Settings, resolve: bool) -> list[Citation]:
    try:
        options = settings.extract_options(resolve=resolve)
    except ReporterDataError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    return extract_citations(text, options)


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx):
    """Extract legal citations from documents.

    \b
    Finds case, statute, journal, neutral, public law, Federal Register and
    Statutes at Large citations, plus Id., supra and short-form case
    references, and reports where each one sits in the original text.

    \b
    INPUT:
      Plain text, HTML or PDF files.

    \b
    SETUP:
      Optional CITETRACE_* settings in .env or the environment, e.g.
      CITETRACE_SCOPE_STRATEGY=none or CITETRACE_VALIDATE_REPORTERS=true.

    \b
    COMMANDS:
      extract   - List the citations in a document
      annotate  - Wrap citations in markup

    \b
    Run 'citetrace COMMAND --help' for details on each command.
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--resolve/--no-resolve", default=True, help="Link short forms to their antecedents")
@click.option(
    "--scope",
    type=click.Choice([s.value for s in ScopeStrategy]),
    default=None,
    help="Scope boundary for short-form resolution",
)
@click.option("--validate/--no-validate", default=None, help="Check reporters against reporter data")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def extract(input_file: str, resolve: bool, scope: str | None, validate: bool | None, as_json: bool, verbose: bool):
    """List the citations found in INPUT_FILE.

    \b
    Examples:
      citetrace extract opinion.txt
      citetrace extract brief.pdf --scope none
      citetrace extract opinion.html --validate --json
    """
    settings = _load_settings(scope_strategy=scope, validate_reporters=validate)
    setup_logging(verbose, settings.log_dir)
    text = _read_input(input_file)
    citations = _run_extraction(text, settings, resolve)

    if as_json:
        click.echo(json.dumps([dataclasses.asdict(c) for c in citations], indent=2, default=str))
        return

    if not citations:
        console.print("[yellow]No citations found.[/yellow]")
        return

    table = Table(title=f"Citations in {Path(input_file).name}")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Citation")
    table.add_column("Original span", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Details")

    for i, citation in enumerate(citations):
        span = citation.span
        table.add_row(
            str(i),
            citation.type.value,
            citation.text,
            f"{span.original_start}-{span.original_end}",
            f"{citation.confidence:.2f}",
            _details(citation),
        )
    console.print(table)

    unresolved = [
        c for c in citations
        if getattr(c, "resolution", None) is not None and not c.resolution.resolved
    ]
    if unresolved:
        console.print(f"[yellow]{len(unresolved)} short-form citation(s) unresolved[/yellow]")


@cli.command("annotate")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, help="Output file (default: print to stdout)")
@click.option("--before", default='<span class="citation">', show_default=True, help="Markup before each citation")
@click.option("--after", default="</span>", show_default=True, help="Markup after each citation")
@click.option("--full-span", is_flag=True, help="Wrap case names and parentheticals too")
@click.option("--no-escape", is_flag=True, help="Do not HTML-escape citation text")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def annotate_cmd(
    input_file: str,
    output: str | None,
    before: str,
    after: str,
    full_span: bool,
    no_escape: bool,
    verbose: bool,
):
    """Wrap every citation in INPUT_FILE with markup.

    \b
    Examples:
      citetrace annotate opinion.html -o opinion.annotated.html
      citetrace annotate opinion.txt --before "[[" --after "]]" --no-escape
    """
    settings = _load_settings()
    setup_logging(verbose, settings.log_dir)
    text = _read_input(input_file)
    citations = _run_extraction(text, settings, resolve=False)

    result = annotate(
        text,
        citations,
        template=Template(before=before, after=after),
        use_full_span=full_span,
        auto_escape=not no_escape,
    )

    if output is None:
        click.echo(result.text)
    else:
        Path(output).write_text(result.text, encoding="utf-8")
        console.print(f"[green]✓[/green] Annotated {len(citations) - len(result.skipped)} citation(s) -> [bold]{output}[/bold]")
    if result.skipped:
        console.print(f"[yellow]{len(result.skipped)} citation(s) skipped (overlapping or inside markup)[/yellow]")


def _details(citation: Citation) -> str:
    kind = citation.type
    if kind is CitationType.CASE:
        parts = [citation.case_name or ""]
        if citation.court or citation.year:
            parts.append(f"({' '.join(str(p) for p in (citation.court, citation.year) if p)})")
        if citation.group_id:
            parts.append(f"group {citation.group_id}")
        return " ".join(p for p in parts if p)
    if kind is CitationType.STATUTE:
        return f"{citation.code} § {citation.section}"
    if kind in (CitationType.ID, CitationType.SUPRA, CitationType.SHORT_FORM_CASE):
        resolution = citation.resolution
        if resolution is None:
            return ""
        if resolution.resolved:
            return f"-> #{resolution.resolved_to} ({resolution.confidence:.2f})"
        return f"unresolved: {resolution.failure_reason}"
    return ""


if __name__ == "__main__":
    cli()
