"""
ANZ Statement Parser

ANZ statements print separate Withdrawals, Deposits and Balance columns:

    12 MAR  EFTPOS WOOLWORTHS 1234    45.20   0.00   1,954.80
    13 MAR  PAY/SALARY FROM ACME      0.00  3,200.00  5,154.80

When three amounts are found on a line, the first non-zero one of the first
two columns is the transaction amount and the column tells the direction.
Lines with fewer amounts are handled like any other statement.
"""

import re
from dataclasses import replace
from typing import List, Optional, Tuple

from statementextract.parsers_core.base import TextStatementParser
from statementextract.parsers_core.models import ParseContext, ParseResult
from statementextract.parsers_core.registry import default_registry
from statementextract.utils.config import PARSER_PRIORITIES
from statementextract.utils.parsing_utils import (
    ACCOUNT_NAME_PATTERNS,
    AmountToken,
    parse_amount,
)


def _is_zero(token: AmountToken) -> bool:
    try:
        return parse_amount(token.text) == 0
    except ValueError:
        # Malformed amounts are reported by the assembler
        return False


class ANZParser(TextStatementParser):
    name = "anz"
    bank_name = "ANZ"
    description = "Parser for ANZ statements with withdrawal/deposit/balance columns."
    priority = PARSER_PRIORITIES["anz"]

    identifiers = (
        re.compile(r"\bANZ\b"),
        re.compile(r"\bAustralia and New Zealand Banking\b", re.IGNORECASE),
        re.compile(r"\banz\.com\.au\b", re.IGNORECASE),
    )
    account_name_patterns = tuple(ACCOUNT_NAME_PATTERNS) + (
        re.compile(r"\bANZ\s+(Access Advantage|Online Saver|Plus|Save|Everyday|Smart Choice)\b"),
    )

    def select_amounts(
        self, amounts: List[AmountToken]
    ) -> Tuple[AmountToken, Optional[AmountToken]]:
        if len(amounts) < 3:
            return super().select_amounts(amounts)

        withdrawal, deposit, balance = amounts[-3:]
        if withdrawal.is_debit or withdrawal.is_credit or deposit.is_debit or deposit.is_credit:
            # Explicit markers beat column position
            return super().select_amounts(amounts)
        if not _is_zero(withdrawal):
            return replace(withdrawal, is_debit=True), balance
        return replace(deposit, is_credit=True), balance


default_registry.register_parser(ANZParser.name, ANZParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return ANZParser().parse(text, context)
