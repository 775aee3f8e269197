"""
AustralianSuper Member Statement Parser

- Parses the transaction history of AustralianSuper member statements
- Same contribution, fee, insurance and rollover rules as the other
  superannuation funds
- Only the fund's proper name counts as a marker: "Australian
  superannuation" in general text does not
"""

import re
from typing import Optional

from statementextract.parsers_core.base import TextStatementParser
from statementextract.parsers_core.models import ParseContext, ParseResult
from statementextract.parsers_core.registry import default_registry
from statementextract.utils.config import PARSER_PRIORITIES
from statementextract.utils.parsing_utils import (
    MEMBER_NUMBER_PATTERNS,
    SUPER_DIRECTION_RULES,
    SUPER_SKIP_PATTERNS,
)


class AustralianSuperParser(TextStatementParser):
    name = "australian_super"
    bank_name = "AustralianSuper"
    description = "Parser for AustralianSuper member statements."
    priority = PARSER_PRIORITIES["australian_super"]

    identifiers = (
        re.compile(r"\bAustralian ?Super\b"),
        re.compile(r"\baustraliansuper\.com\b", re.IGNORECASE),
    )
    skip_patterns = tuple(SUPER_SKIP_PATTERNS) + (
        re.compile(r"^You(?:'re| are)\s+invested\s+in", re.IGNORECASE),
    )
    direction_rules = tuple(SUPER_DIRECTION_RULES)
    account_name_patterns = (
        re.compile(
            r"Account\s+Type[:\s]+(Accumulation|Choice Income|Retirement|Division\s+\d+)",
            re.IGNORECASE,
        ),
        re.compile(r"\b((?:Accumulation|Super|Pension) Account)\b"),
    )
    account_number_patterns = tuple(MEMBER_NUMBER_PATTERNS) + (
        re.compile(r"Your\s+member\s+number[: \t]+(\d{6,12})\b", re.IGNORECASE),
    )


default_registry.register_parser(AustralianSuperParser.name, AustralianSuperParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return AustralianSuperParser().parse(text, context)
