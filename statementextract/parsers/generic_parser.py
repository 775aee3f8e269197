"""
Generic fallback parser.

Runs when no institution parser recognises the text. It has no markers of its
own and reads any line that starts with a date and carries at least one
amount, using the shared direction rules only.
"""

from typing import Optional

from statementextract.parsers_core.base import TextStatementParser
from statementextract.parsers_core.lines import split_lines
from statementextract.parsers_core.models import ParseContext, ParseResult
from statementextract.parsers_core.registry import default_registry
from statementextract.utils.config import PARSER_PRIORITIES
from statementextract.utils.parsing_utils import (
    extract_amounts,
    find_leading_date,
    should_skip_line,
)


class GenericParser(TextStatementParser):
    name = "generic"
    bank_name = ""
    description = "Fallback parser for date / description / amount statement lines."
    priority = PARSER_PRIORITIES["generic"]
    is_fallback = True

    @classmethod
    def can_parse(cls, text: str, **kwargs) -> bool:
        """True if at least one line looks like a transaction."""
        if not text:
            return False
        for raw in split_lines(text):
            if should_skip_line(raw.text):
                continue
            found = find_leading_date(raw.text, default_year=2000)
            if found is not None and extract_amounts(found[1]):
                return True
        return False

    @classmethod
    def marker_position(cls, text: str) -> Optional[int]:
        return 0 if cls.can_parse(text) else None


default_registry.register_parser(GenericParser.name, GenericParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return GenericParser().parse(text, context)
