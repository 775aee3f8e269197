"""
UniSuper Member Statement Parser

- Parses the transaction history of UniSuper accumulation and pension
  member statements
- Employer SG, salary sacrifice and personal contributions are income
- Administration fees, insurance premiums and contributions tax are expenses
- Account type (Accumulation, Defined Benefit, Pension) is reported as the
  account name; the member number as the account number
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


class UniSuperParser(TextStatementParser):
    name = "unisuper"
    bank_name = "UniSuper"
    description = "Parser for UniSuper superannuation member statements."
    priority = PARSER_PRIORITIES["unisuper"]

    identifiers = (
        re.compile(r"\bUni[Ss]uper\b"),
        re.compile(r"\bunisuper\.com\.au\b", re.IGNORECASE),
        re.compile(r"\bUniversal Super Holdings\b", re.IGNORECASE),
    )
    skip_patterns = tuple(SUPER_SKIP_PATTERNS)
    direction_rules = tuple(SUPER_DIRECTION_RULES)
    account_name_patterns = (
        re.compile(r"Account\s+Type[:\s]+(Accumulation|Defined Benefit|Pension)", re.IGNORECASE),
        re.compile(r"\b(Accumulation \d|Personal Account)\b"),
    )
    account_number_patterns = tuple(MEMBER_NUMBER_PATTERNS) + (
        re.compile(r"Member[: \t]+(\d{6,12})\b", re.IGNORECASE),
    )


default_registry.register_parser(UniSuperParser.name, UniSuperParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return UniSuperParser().parse(text, context)
