"""
Rest Super Member Statement Parser

- Parses the transaction history section of Rest (Retail Employees
  Superannuation Trust) member statements
- Contributions and rollovers in are income to the member account
- Administration fees, insurance premiums and contributions tax are expenses
- Investment returns carry their own sign: a negative return is printed with a
  minus or in brackets and is recorded as an expense
- The member number is reported as the account number (last four digits only)
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


class RestSuperParser(TextStatementParser):
    name = "rest_super"
    bank_name = "Rest Super"
    description = "Parser for Rest superannuation member statements."
    priority = PARSER_PRIORITIES["rest_super"]

    # "rest" is an English word; only the fund's proper names count
    identifiers = (
        re.compile(r"\bRest Super(?:annuation)?\b"),
        re.compile(r"\bRetail Employees Superannuation\b", re.IGNORECASE),
        re.compile(r"\brest\.com\.au\b", re.IGNORECASE),
    )
    skip_patterns = tuple(SUPER_SKIP_PATTERNS)
    direction_rules = tuple(SUPER_DIRECTION_RULES)
    account_name_patterns = (
        re.compile(r"\b(Rest (?:Super|Pension|Corporate))\b"),
    )
    account_number_patterns = tuple(MEMBER_NUMBER_PATTERNS)


default_registry.register_parser(RestSuperParser.name, RestSuperParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return RestSuperParser().parse(text, context)
