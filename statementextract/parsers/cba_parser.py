"""
Commonwealth Bank (CBA) Statement Parser

- Parses text extracted from CommBank / NetBank transaction statements
  (Smart Access, Complete Access, Goal Saver, NetBank Saver)
- Lines look like "03 Jan Woolworths Sydney 45.20 1,954.80", sometimes with
  a trailing DR/CR marker on the amount or balance
"""

import re
from typing import Optional

from statementextract.parsers_core.base import TextStatementParser
from statementextract.parsers_core.models import ParseContext, ParseResult
from statementextract.parsers_core.registry import default_registry
from statementextract.utils.config import PARSER_PRIORITIES
from statementextract.utils.parsing_utils import ACCOUNT_NAME_PATTERNS


class CBAParser(TextStatementParser):
    name = "cba"
    bank_name = "Commonwealth Bank"
    description = "Parser for Commonwealth Bank (CommBank) account statements."
    priority = PARSER_PRIORITIES["cba"]

    identifiers = (
        re.compile(r"\bCommonwealth Bank\b", re.IGNORECASE),
        re.compile(r"\bCommBank\b", re.IGNORECASE),
        re.compile(r"\bcommbank\.com\.au\b", re.IGNORECASE),
        re.compile(r"\bNetBank\b"),
        re.compile(r"\bCBA\b"),
        re.compile(r"\b(?:Smart|Complete) Access\b"),
        re.compile(r"\bGoal Saver\b"),
    )
    skip_patterns = (
        re.compile(r"^Transaction\s+Details", re.IGNORECASE),
        re.compile(r"^Your\s+Transactions", re.IGNORECASE),
        re.compile(r"^Account\s+Summary", re.IGNORECASE),
        re.compile(r"^Rewards\s+Points", re.IGNORECASE),
    )
    account_name_patterns = tuple(ACCOUNT_NAME_PATTERNS) + (
        re.compile(
            r"\b(Smart Access|Goal Saver|NetBank Saver|Complete Access|Streamline)\b"
        ),
    )


default_registry.register_parser(CBAParser.name, CBAParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return CBAParser().parse(text, context)
