"""
Bendigo Bank Statement Parser

Parses text extracted from Bendigo Bank and Rural Bank statements (Complete,
Easy, Pink and Business accounts).
"""

import re
from typing import Optional

from statementextract.parsers_core.base import TextStatementParser
from statementextract.parsers_core.models import ParseContext, ParseResult
from statementextract.parsers_core.registry import default_registry
from statementextract.utils.config import PARSER_PRIORITIES
from statementextract.utils.parsing_utils import ACCOUNT_NAME_PATTERNS


class BendigoParser(TextStatementParser):
    name = "bendigo"
    bank_name = "Bendigo Bank"
    description = "Parser for Bendigo Bank and Rural Bank statements."
    priority = PARSER_PRIORITIES["bendigo"]

    identifiers = (
        re.compile(r"\bBendigo Bank\b", re.IGNORECASE),
        re.compile(r"\bBendigo and Adelaide\b", re.IGNORECASE),
        re.compile(r"\bbendigobank\.com\.au\b", re.IGNORECASE),
        re.compile(r"\bBendigo (?:e-Banking|Complete|Easy|Pink)\b"),
        re.compile(r"\bRural Bank\b"),
    )
    skip_patterns = (
        re.compile(r"^Transaction\s+Details", re.IGNORECASE),
        re.compile(r"^Reference\s+Number", re.IGNORECASE),
        re.compile(r"^Cheque\s+Number", re.IGNORECASE),
    )
    account_name_patterns = tuple(ACCOUNT_NAME_PATTERNS) + (
        re.compile(r"\bBendigo\s+(Complete|Easy|Pink|Business)\b"),
    )


default_registry.register_parser(BendigoParser.name, BendigoParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return BendigoParser().parse(text, context)
