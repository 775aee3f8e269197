"""
Up Bank Statement Parser

- Parses text extracted from Up Bank (up.com.au) Spending and Saver statements
- Lines look like "15 Jan Round Up Transfer 1.00 100.00": day and month, description,
  amount and running balance
- Round Ups and Saver transfers are outgoing transfers, not spending
- "Instant Transfer" and "Cover from" notes are skipped; they repeat a transaction
  already listed
- Emoji in merchant names are kept as printed
"""

import re
from typing import Optional

from statementextract.parsers_core.base import TextStatementParser
from statementextract.parsers_core.models import ParseContext, ParseResult, TransactionType
from statementextract.parsers_core.registry import default_registry
from statementextract.utils.config import PARSER_PRIORITIES
from statementextract.utils.parsing_utils import (
    ACCOUNT_NAME_PATTERNS,
    ACCOUNT_NUMBER_PATTERNS,
    direction_rule,
)


class UpParser(TextStatementParser):
    """Parser for Up Bank statements."""

    name = "up"
    bank_name = "Up Bank"
    description = "Parser for Up Bank Spending and Saver account statements."
    priority = PARSER_PRIORITIES["up"]

    # "Up" is also an English word, so every marker is multi-token or a domain
    identifiers = (
        re.compile(r"\bUp Bank\b"),
        re.compile(r"\bUp Banking\b"),
        re.compile(r"\bUp (?:Saver|Everyday)\b"),
        re.compile(r"\bup\.com\.au\b", re.IGNORECASE),
    )
    identifier_exclusions = (re.compile(r"\b[Tt]op[\s-]?[Uu]p\b"),)
    skip_patterns = (
        re.compile(r"^Instant\s+Transfer", re.IGNORECASE),
        re.compile(r"^Cover\s+from", re.IGNORECASE),
    )
    direction_rules = (
        direction_rule(r"\bround[\s-]?up\b", TransactionType.TRANSFER, -1),
        direction_rule(r"\btransfer\s+to\s+saver\b", TransactionType.TRANSFER, -1),
        direction_rule(r"\btransfer\s+from\s+saver\b", TransactionType.TRANSFER, 1),
    )
    account_name_patterns = tuple(ACCOUNT_NAME_PATTERNS) + (
        re.compile(r"\b(Up (?:Saver|Everyday))\b"),
    )
    account_number_patterns = tuple(ACCOUNT_NUMBER_PATTERNS)


default_registry.register_parser(UpParser.name, UpParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return UpParser().parse(text, context)
