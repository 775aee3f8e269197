"""
Raiz Invest Statement Parser

Raiz is a micro-investing account, so the usual bank keywords do not apply:
- Deposits, round-ups, recurring investments and top-ups are money moving in
  from the linked bank account (incoming transfers)
- Dividends, distributions and returns are income
- Withdrawals and redemptions move money back out (outgoing transfers)
- Fees are expenses
- Anything else is treated as an incoming transfer
"""

import re
from typing import List, Optional

from statementextract.parsers_core.base import TextStatementParser
from statementextract.parsers_core.models import ParseContext, ParseResult, TransactionType
from statementextract.parsers_core.registry import default_registry
from statementextract.utils.config import PARSER_PRIORITIES
from statementextract.utils.parsing_utils import DirectionRule, direction_rule


class RaizParser(TextStatementParser):
    name = "raiz"
    bank_name = "Raiz Invest"
    description = "Parser for Raiz Invest micro-investing statements."
    priority = PARSER_PRIORITIES["raiz"]

    # "Round Up" appears on most bank statements, so it is not a Raiz marker
    identifiers = (
        re.compile(r"\bRaiz\b"),
        re.compile(r"\braizinvest\.com\.au\b", re.IGNORECASE),
        re.compile(r"\bMicro-investing\b", re.IGNORECASE),
    )
    skip_patterns = (
        re.compile(r"^Portfolio\s+Summary", re.IGNORECASE),
        re.compile(r"^Investment\s+Breakdown", re.IGNORECASE),
        re.compile(r"^Asset\s+Allocation", re.IGNORECASE),
        re.compile(r"^ETF\s+Holdings", re.IGNORECASE),
    )
    direction_rules = (
        direction_rule(
            r"deposit|round[\s-]?up|recurring|transfer\s+in|top[\s-]?up",
            TransactionType.TRANSFER,
            1,
        ),
        direction_rule(
            r"dividend|distribution|return|interest|rebate", TransactionType.INCOME, 1
        ),
        direction_rule(r"withdraw|transfer\s+out|redemption", TransactionType.TRANSFER, -1),
        direction_rule(r"\bfees?\b|charge|management|admin", TransactionType.EXPENSE, -1),
        direction_rule(r"", TransactionType.TRANSFER, 1),
    )
    account_name_patterns = (
        re.compile(r"Portfolio[:\s]+([A-Za-z ]+?)\s*(?:$|Account)", re.MULTILINE),
        re.compile(r"\b(Raiz Rewards|Raiz Plus|Emerald|Sapphire|Aggressive|Conservative)\b"),
    )

    @property
    def rules(self) -> List[DirectionRule]:
        # Bank keywords such as "purchase" mean the opposite on an investment account
        return list(self.direction_rules)


default_registry.register_parser(RaizParser.name, RaizParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return RaizParser().parse(text, context)
