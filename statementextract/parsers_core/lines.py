"""Ephemeral records passed from the line matchers to the result assembler."""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from statementextract.parsers_core.models import TransactionType


@dataclass(frozen=True)
class RawLine:
    """One non-blank line of statement text and its 1-based line number."""

    number: int
    text: str


@dataclass(frozen=True)
class ParsedDateCandidate:
    """A matched date; the year is a placeholder unless printed on the line."""

    value: date
    has_explicit_year: bool


@dataclass(frozen=True)
class LineMatch:
    """
    What a line matcher recovered from a transaction line, before validation.
    Amounts stay as printed text; the assembler converts them.
    """

    line: RawLine
    date: ParsedDateCandidate
    description: str
    amount_text: str
    sign: int
    transaction_type: TransactionType
    balance_text: Optional[str] = None
    balance_negative: bool = False


def split_lines(text: str) -> List[RawLine]:
    return [
        RawLine(number, line.strip())
        for number, line in enumerate(text.splitlines(), start=1)
        if line.strip()
    ]
