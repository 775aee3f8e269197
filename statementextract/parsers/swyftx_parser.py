"""
Swyftx Crypto Exchange Statement Parser

- Parses transaction history exported from Swyftx (swyftx.com.au)
- Lines look like "12/03/2024 Instant Buy BTC 0.00150000 BTC 150.00 AUD": the
  AUD value is the transaction amount; crypto quantities are kept in the
  description
- AUD deposits are incoming transfers and withdrawals outgoing transfers
- Sells and staking rewards are income, buys and fees are expenses
- Anything else is treated as a crypto purchase
- Portfolio and tax summaries are skipped
"""

import re
from dataclasses import replace
from typing import List, Optional, Tuple

from statementextract.parsers_core.base import TextStatementParser
from statementextract.parsers_core.models import ParseContext, ParseResult, TransactionType
from statementextract.parsers_core.registry import default_registry
from statementextract.utils.config import PARSER_PRIORITIES
from statementextract.utils.parsing_utils import AmountToken, DirectionRule, direction_rule

AUD_AMOUNT = re.compile(r"(?<![\w.,])\$?\s?(\d[\d,]*\.\d{2})\s*AUD\b", re.IGNORECASE)


class SwyftxParser(TextStatementParser):
    name = "swyftx"
    bank_name = "Swyftx"
    description = "Parser for Swyftx crypto exchange transaction statements."
    priority = PARSER_PRIORITIES["swyftx"]

    identifiers = (
        re.compile(r"\bSwyftx\b", re.IGNORECASE),
        re.compile(r"\bswyftx\.com(?:\.au)?\b", re.IGNORECASE),
    )
    skip_patterns = (
        re.compile(r"^Portfolio\s+Summary", re.IGNORECASE),
        re.compile(r"^Asset\s+Holdings", re.IGNORECASE),
        re.compile(r"^Tax\s+Report", re.IGNORECASE),
        re.compile(r"^Staking\s+Rewards\s+Summary", re.IGNORECASE),
    )
    direction_rules = (
        direction_rule(
            r"deposit|bank\s+transfer|\bpayid\b|\bosko\b", TransactionType.TRANSFER, 1
        ),
        direction_rule(r"\bsell\b|\bsold\b", TransactionType.INCOME, 1),
        direction_rule(r"\bstak(?:e|ing)\b|\bearn\b|\brewards?\b", TransactionType.INCOME, 1),
        direction_rule(r"withdraw|bank\s+payout", TransactionType.TRANSFER, -1),
        direction_rule(r"\bbuy\b|purchase", TransactionType.EXPENSE, -1),
        direction_rule(r"\bfees?\b|\bspread\b", TransactionType.EXPENSE, -1),
        direction_rule(r"", TransactionType.EXPENSE, -1),
    )
    account_name_patterns = ()
    account_number_patterns = (
        re.compile(r"User\s*ID[: \t]+(\d{4,})", re.IGNORECASE),
        re.compile(r"Account\s*ID[: \t]+(\d{4,})", re.IGNORECASE),
    )

    @property
    def rules(self) -> List[DirectionRule]:
        # "transfer to" or "purchase" mean different things on an exchange
        return list(self.direction_rules)

    def select_amounts(
        self, amounts: List[AmountToken]
    ) -> Tuple[AmountToken, Optional[AmountToken]]:
        # Exchange statements carry no running balance
        return amounts[0], None

    def match_line(self, raw, default_year, options):
        match = super().match_line(raw, default_year, options)
        if match is None:
            return None
        aud = AUD_AMOUNT.search(raw.text)
        if aud is not None:
            match = replace(match, amount_text=aud.group(1))
        return match

    def clean_description(self, text, options):
        return super().clean_description(
            re.sub(r"(\d\.\d{2})\s*AUD\b", r"\1", text, flags=re.IGNORECASE), options
        )


default_registry.register_parser(SwyftxParser.name, SwyftxParser)


def main(text: str, context: Optional[ParseContext] = None) -> ParseResult:
    """Canonical entrypoint for contract-based integration."""
    return SwyftxParser().parse(text, context)
