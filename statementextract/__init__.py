"""
statementextract: turn bank statement text into normalized transactions.

    from statementextract import parse_statement, StatementPeriod
    result = parse_statement(text, statement_period=StatementPeriod(start=..., end=...))
    for t in result.transactions:
        print(t.date, t.description, t.amount)
"""

from typing import Optional

from statementextract.exceptions import (
    EmptyStatementError,
    StatementExtractError,
    UnknownParserError,
)
from statementextract.parsers_core.autodiscover import get_default_registry
from statementextract.parsers_core.base import BaseParser
from statementextract.parsers_core.dates import normalize_date
from statementextract.parsers_core.models import (
    Diagnostic,
    DiagnosticKind,
    ParseContext,
    ParseResult,
    ParsingOptions,
    StatementPeriod,
    Transaction,
    TransactionType,
)
from statementextract.parsers_core.registry import ParserRegistry

__version__ = "0.1.0"


def parse_statement(
    text: str,
    context: Optional[ParseContext] = None,
    *,
    statement_period: Optional[StatementPeriod] = None,
    preferred: Optional[str] = None,
    registry: Optional[ParserRegistry] = None,
) -> ParseResult:
    """
    Parse statement text with the bundled parsers.

    ``statement_period`` is a shortcut for ParseContext(statement_period=...)
    and is ignored when a context is given.
    """
    if context is None:
        context = ParseContext(statement_period=statement_period)
    registry = registry or get_default_registry()
    return registry.parse(text, context, preferred=preferred)


def select_parser(text: str, registry: Optional[ParserRegistry] = None) -> Optional[BaseParser]:
    """The parser that auto-detection would run first for this text."""
    registry = registry or get_default_registry()
    return registry.select_parser(text)


__all__ = [
    "BaseParser",
    "Diagnostic",
    "DiagnosticKind",
    "EmptyStatementError",
    "ParseContext",
    "ParseResult",
    "ParserRegistry",
    "ParsingOptions",
    "StatementExtractError",
    "StatementPeriod",
    "Transaction",
    "TransactionType",
    "UnknownParserError",
    "normalize_date",
    "parse_statement",
    "select_parser",
]
