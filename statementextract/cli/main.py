"""Main CLI entry point for statementextract."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme
from typer import Typer

from statementextract.exceptions import EmptyStatementError, UnknownParserError
from statementextract.parsers_core.autodiscover import get_default_registry
from statementextract.parsers_core.models import ParseContext, ParseResult, StatementPeriod
from statementextract.utils.config import CLI_DEFAULTS, load_parsing_options
from statementextract.utils.logging_config import configure_logging
from statementextract.utils.parsing_utils import from_minor_units

custom_theme = Theme(
    {
        "fieldname": "cyan",
        "value": "magenta",
        "comment": "green",
        "normal": "white",
    }
)
console = Console(theme=custom_theme)

app = Typer(
    help="""statementextract - Convert bank statement text into transactions.

This tool helps you:
1. Detect which institution a statement comes from
2. Extract dated, signed transactions from statement text or CSV exports
3. Export the results as a table, JSON or CSV

Use --help with any command for detailed information.
"""
)

DATE_FORMATS = ["%Y-%m-%d", "%d/%m/%Y"]


def _read_statement(path: Path) -> str:
    return path.read_text(encoding=CLI_DEFAULTS["encoding"])


def _default_config() -> Optional[Path]:
    candidate = Path.cwd() / CLI_DEFAULTS["config_filename"]
    return candidate if candidate.exists() else None


def _money(cents: Optional[int]) -> str:
    if cents is None:
        return ""
    return f"{from_minor_units(cents):,.2f}"


def _print_result(result: ParseResult):
    if result.transactions:
        title = f"{result.bank_name or 'Statement'} ({result.parser_name})"
        table = Table(title=title)
        table.add_column("Line", style="comment", justify="right")
        table.add_column("Date", style="fieldname")
        table.add_column("Description", style="normal")
        table.add_column("Amount", style="value", justify="right")
        table.add_column("Balance", justify="right")
        table.add_column("Type")
        for t in result.transactions[: CLI_DEFAULTS["preview_rows"]]:
            table.add_row(
                str(t.line_number or ""),
                t.transaction_date.isoformat(),
                escape(t.description),
                _money(t.amount),
                _money(t.balance),
                t.transaction_type.value,
            )
        console.print(table)
        hidden = len(result.transactions) - CLI_DEFAULTS["preview_rows"]
        if hidden > 0:
            console.print(f"[comment]... {hidden} more transactions[/comment]")
        console.print(
            f"[green]✓ {len(result.transactions)} transactions, "
            f"net {_money(result.total_amount)} {result.currency}[/green]"
        )

    for warning in result.warnings:
        console.print(f"[yellow]warning: {escape(str(warning))}[/yellow]")
    for error in result.errors:
        console.print(f"[red]error: {escape(str(error))}[/red]")


@app.command(name="parse")
def parse_command(
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Statement text or CSV file"
    ),
    start: Optional[datetime] = typer.Option(
        None, "--start", formats=DATE_FORMATS, help="Statement period start"
    ),
    end: Optional[datetime] = typer.Option(
        None, "--end", formats=DATE_FORMATS, help="Statement period end"
    ),
    parser: Optional[str] = typer.Option(
        None, "--parser", "-p", help="Parser to try before auto-detection"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="YAML config file"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    csv_path: Optional[Path] = typer.Option(
        None, "--csv", help="Also write the transactions to this CSV file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Extract transactions from a statement."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    if (start is None) != (end is None):
        raise typer.BadParameter("--start and --end must be given together")
    try:
        period = StatementPeriod(start=start.date(), end=end.date()) if start else None
        options = load_parsing_options(config or _default_config())
    except (ValidationError, ValueError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(2)

    context = ParseContext(statement_period=period, options=options)
    try:
        result = get_default_registry().parse(_read_statement(file), context, preferred=parser)
    except EmptyStatementError as e:
        console.print(f"[red]{file}: {escape(str(e))}[/red]")
        raise typer.Exit(2)
    except UnknownParserError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(2)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        _print_result(result)

    if csv_path and result.transactions:
        result.to_dataframe().to_csv(csv_path, index=False)
        if not as_json:
            console.print(f"[green]✓ Wrote {csv_path}[/green]")

    if not result.success:
        raise typer.Exit(1)


@app.command(name="detect")
def detect_command(
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Statement text or CSV file"
    ),
):
    """Show which parser would handle a statement."""
    configure_logging(logging.WARNING)
    text = _read_statement(file)
    if not text.strip():
        console.print(f"[red]{file}: statement text is empty[/red]")
        raise typer.Exit(2)
    parser = get_default_registry().select_parser(text)
    if parser is None:
        console.print("[red]No parser recognises this statement.[/red]")
        raise typer.Exit(1)
    suffix = " (fallback)" if parser.is_fallback else ""
    console.print(f"[fieldname]{parser.name}[/fieldname]{suffix}: {parser.description}")


@app.command(name="parsers")
def list_parsers_command():
    """List registered parsers in probe order."""
    registry = get_default_registry()
    table = Table(title="Parsers")
    table.add_column("Name", style="cyan")
    table.add_column("Institution", style="magenta")
    table.add_column("Priority", justify="right")
    table.add_column("Description", style="green")
    for name in registry.list_parsers():
        parser_cls = registry.get_parser(name)
        priority = "fallback" if parser_cls.is_fallback else str(parser_cls.priority)
        table.add_row(name, parser_cls.bank_name or "-", priority, parser_cls.description)
    console.print(table)


if __name__ == "__main__":
    app()
