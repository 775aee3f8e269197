"""
CSV Transaction Export Parser

- Parses CSV transaction exports downloaded from online banking (any institution)
- Detects the export by its header row: a date column, a description column and
  either a signed Amount column or separate Debit/Credit columns
- A short preamble before the header (account name, export date) is allowed
- Signed amounts are taken as printed: negative is money out
- Optional Balance column becomes the running balance
- Rows that cannot be read are reported as warnings with their line number
"""

import logging
import re
from io import StringIO
from typing import Dict, List, Optional, Tuple

import pandas as pd

from statementextract.parsers_core.assembler import assemble_result
from statementextract.parsers_core.base import BaseParser
from statementextract.parsers_core.lines import LineMatch, ParsedDateCandidate, RawLine
from statementextract.parsers_core.models import (
    Diagnostic,
    DiagnosticKind,
    ParseContext,
    ParseResult,
)
from statementextract.parsers_core.registry import default_registry
from statementextract.utils.config import PARSER_PRIORITIES
from statementextract.utils.parsing_utils import (
    classify_transaction,
    clean_description,
    find_date,
    parse_amount,
    parse_date_text,
)

logger = logging.getLogger(__name__)

HEADER_ALIASES = {
    "date": {"date", "transaction date", "posted date", "effective date", "value date"},
    "description": {
        "description",
        "details",
        "transaction details",
        "narrative",
        "memo",
        "payee",
        "merchant",
    },
    "amount": {"amount", "amount (aud)", "transaction amount"},
    "debit": {"debit", "debits", "debit amount", "withdrawal", "withdrawals", "money out"},
    "credit": {"credit", "credits", "credit amount", "deposit", "deposits", "money in"},
    "balance": {"balance", "running balance"},
}

# How many non-blank lines may precede the header row
MAX_PREAMBLE_LINES = 10


def _resolve_columns(columns) -> Optional[Dict[str, str]]:
    """Map each role (date, description, amount...) to the export's column name."""
    found = {}
    for column in columns:
        key = str(column).strip().strip('"').lower()
        for role, aliases in HEADER_ALIASES.items():
            if role not in found and key in aliases:
                found[role] = column
                break
    has_amount = "amount" in found or ("debit" in found and "credit" in found)
    if "date" in found and "description" in found and has_amount:
        return found
    return None


def _find_header(lines: List[str]) -> Optional[Tuple[int, Dict[str, str]]]:
    """Return (1-based line number, column map) of the header row."""
    seen = 0
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        seen += 1
        if seen > MAX_PREAMBLE_LINES:
            break
        if "," not in line:
            continue
        try:
            columns = pd.read_csv(StringIO(line), nrows=0).columns
        except (pd.errors.ParserError, pd.errors.EmptyDataError):
            continue
        mapping = _resolve_columns(columns)
        if mapping:
            return number, mapping
    return None


def _cell_amount(cell: str) -> Optional[Tuple[str, bool]]:
    """
    Normalize an amount cell to "1234.50" style text plus a negative flag.
    Returns None for an empty cell.
    """
    text = (cell or "").strip()
    if not text:
        return None
    negative = bool(
        text.startswith("-")
        or text.endswith("-")
        or (text.startswith("(") and text.endswith(")"))
        or re.search(r"\bDR\b", text, re.IGNORECASE)
    )
    cleaned = re.sub(r"\b(?:DR|CR)\b|[\s$()+\-]", "", text, flags=re.IGNORECASE)
    if re.fullmatch(r"[\d,]*\d", cleaned):
        cleaned += ".00"
    elif re.fullmatch(r"[\d,]*\d\.\d", cleaned):
        cleaned += "0"
    return cleaned, negative


def _is_zero(amount_text: str) -> bool:
    try:
        return parse_amount(amount_text) == 0
    except ValueError:
        return False


class CSVExportParser(BaseParser):
    """
    Parser for CSV transaction exports. Unlike the text statement parsers it
    reads whole rows with pandas instead of matching lines with patterns.
    """

    name = "csv_export"
    bank_name = ""
    description = "Parser for CSV transaction exports with a date/description/amount header."
    priority = PARSER_PRIORITIES["csv_export"]

    @classmethod
    def can_parse(cls, text: str, **kwargs) -> bool:
        if not text:
            return False
        return _find_header(text.splitlines()) is not None

    def parse(self, text: str, context: Optional[ParseContext] = None) -> ParseResult:
        context = context or ParseContext()
        options = context.options
        period, warnings = self.resolve_period(text, context)
        year = self.default_year(context, period)

        lines = text.splitlines()
        header = _find_header(lines)
        matches: List[LineMatch] = []
        if header is not None:
            header_number, columns = header
            width = len(pd.read_csv(StringIO(lines[header_number - 1]), nrows=0).columns)
            df = pd.read_csv(
                StringIO("\n".join(lines[header_number - 1 :])),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
                engine="python",
                # Keep one row per line so row positions map back to line numbers
                on_bad_lines=lambda bad_line: bad_line[:width],
            ).fillna("")
            logger.debug("CSV export has %d rows under header line %d", len(df), header_number)

            for idx, row in enumerate(df.to_dict(orient="records")):
                number = header_number + idx + 1
                raw = RawLine(number, lines[number - 1].strip() if number <= len(lines) else "")
                if not any(str(value).strip() for value in row.values()):
                    continue
                match, problem = self._match_row(raw, row, columns, year, options)
                if problem:
                    warnings.append(
                        Diagnostic(
                            kind=DiagnosticKind.MALFORMED_LINE,
                            reason=f"{problem}: {raw.text!r}",
                            line_number=number,
                        )
                    )
                elif match is not None:
                    matches.append(match)

        return assemble_result(
            matches,
            parser_name=self.name,
            bank_name=self.bank_name,
            statement_period=period,
            options=options,
            warnings=warnings,
        )

    def _match_row(self, raw, row, columns, year, options):
        """Returns (LineMatch, None) or (None, reason)."""
        date_cell = str(row[columns["date"]]).strip()
        token = find_date(date_cell, year, options.two_digit_year_pivot)
        if token is not None:
            candidate = ParsedDateCandidate(token.value, token.has_explicit_year)
        else:
            value = parse_date_text(date_cell, options.two_digit_year_pivot)
            if value is None:
                return None, f"unrecognised date '{date_cell}'"
            candidate = ParsedDateCandidate(value, True)

        if "amount" in columns:
            amount = _cell_amount(row[columns["amount"]])
        else:
            debit = _cell_amount(row[columns["debit"]])
            credit = _cell_amount(row[columns["credit"]])
            if debit is not None and not _is_zero(debit[0]):
                amount = (debit[0], True)
            elif credit is not None:
                amount = (credit[0], False)
            else:
                amount = debit
        if amount is None:
            return None, "missing amount"
        amount_text, negative = amount

        balance = None
        if "balance" in columns:
            balance = _cell_amount(row[columns["balance"]])

        description = clean_description(
            str(row[columns["description"]]), options.description_max_length
        )
        transaction_type, sign = classify_transaction(description, negative, not negative)
        return (
            LineMatch(
                line=raw,
                date=candidate,
                description=description,
                amount_text=amount_text,
                sign=sign,
                transaction_type=transaction_type,
                balance_text=balance[0] if balance else None,
                balance_negative=balance[1] if balance else False,
            ),
            None,
        )


default_registry.register_parser(CSVExportParser.name, CSVExportParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return CSVExportParser().parse(text, context)
