"""
ING Australia Statement Parser

- Parses text extracted from ING Orange Everyday, Savings Maximiser and
  Orange One statements
- Lines carry the full date ("14/02/2024 Salary Deposit ACME 3,200.00 4,100.55")
  so year correction rarely applies
"""

import re
from typing import Optional

from statementextract.parsers_core.base import TextStatementParser
from statementextract.parsers_core.models import ParseContext, ParseResult, TransactionType
from statementextract.parsers_core.registry import default_registry
from statementextract.utils.config import PARSER_PRIORITIES
from statementextract.utils.parsing_utils import ACCOUNT_NAME_PATTERNS, direction_rule


class INGParser(TextStatementParser):
    name = "ing"
    bank_name = "ING"
    description = "Parser for ING Australia Orange Everyday and Savings Maximiser statements."
    priority = PARSER_PRIORITIES["ing"]

    identifiers = (
        re.compile(r"\bING\b"),
        re.compile(r"\bING Direct\b", re.IGNORECASE),
        re.compile(r"\bing\.com\.au\b", re.IGNORECASE),
        re.compile(r"\bOrange (?:Everyday|One)\b"),
        re.compile(r"\bSavings Maximiser\b"),
    )
    skip_patterns = (
        re.compile(r"^Transaction\s+List", re.IGNORECASE),
        re.compile(r"^Bonus\s+Interest", re.IGNORECASE),
        re.compile(r"^Interest\s+Earned", re.IGNORECASE),
    )
    direction_rules = (
        direction_rule(r"\bATM\s+rebate\b", TransactionType.INCOME, 1),
    )
    account_name_patterns = tuple(ACCOUNT_NAME_PATTERNS) + (
        re.compile(r"\b(Orange Everyday|Savings Maximiser|Orange One)\b"),
    )


default_registry.register_parser(INGParser.name, INGParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return INGParser().parse(text, context)
