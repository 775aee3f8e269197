import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Pattern, Sequence, Tuple

from statementextract.parsers_core.models import (
    Diagnostic,
    DiagnosticKind,
    ParseContext,
    ParseResult,
    ParsingOptions,
    StatementPeriod,
    TransactionType,
)
from statementextract.parsers_core.assembler import assemble_result
from statementextract.parsers_core.lines import (
    LineMatch,
    ParsedDateCandidate,
    RawLine,
    split_lines,
)
from statementextract.utils.parsing_utils import (
    ACCOUNT_NAME_PATTERNS,
    ACCOUNT_NUMBER_PATTERNS,
    SHARED_DIRECTION_RULES,
    AmountToken,
    DirectionRule,
    classify_transaction,
    clean_description,
    extract_account_info,
    extract_amounts,
    extract_statement_period,
    find_leading_date,
    should_skip_line,
)

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """
    Contract shared by every statement parser.

    can_parse must stay a cheap, side-effect free check so the registry can
    probe every parser. parse is a pure function of its inputs.
    """

    name: str = ""
    bank_name: str = ""
    description: str = ""
    priority: int = 100
    is_fallback: bool = False

    @classmethod
    @abstractmethod
    def can_parse(cls, text: str, **kwargs) -> bool:
        """Return True if the text looks like a statement this parser handles."""

    @classmethod
    def marker_position(cls, text: str) -> Optional[int]:
        """
        Offset of the earliest institution marker in the text, or None if the
        parser does not recognise it. The registry prefers the parser whose
        marker comes first.
        """
        return 0 if cls.can_parse(text) else None

    @abstractmethod
    def parse(self, text: str, context: Optional[ParseContext] = None) -> ParseResult:
        """Extract transactions from statement text."""

    def resolve_period(
        self, text: str, context: ParseContext
    ) -> Tuple[Optional[StatementPeriod], List[Diagnostic]]:
        """Caller's statement period, or the one printed in the header."""
        if context.statement_period is not None:
            return context.statement_period, []

        found = extract_statement_period(text, context.options.two_digit_year_pivot)
        if found is None:
            return None, []
        start, end = found
        if start > end:
            return None, [
                Diagnostic(
                    kind=DiagnosticKind.INVALID_STATEMENT_PERIOD,
                    reason=f"Ignoring statement period {start} to {end}: start is after end",
                )
            ]
        return StatementPeriod(start=start, end=end), []

    @staticmethod
    def default_year(context: ParseContext, period: Optional[StatementPeriod]) -> int:
        if context.default_year is not None:
            return context.default_year
        if period is not None:
            return period.end.year
        return date.today().year


class TextStatementParser(BaseParser):
    """
    Line-based parser for text extracted from a statement PDF. Subclasses
    describe an institution with class attributes and only override
    match_line or select_amounts when the layout needs it.
    """

    # Detection markers. Short names must be word anchored and case sensitive.
    identifiers: Sequence[Pattern] = ()
    # Phrases that veto a marker they overlap, e.g. "Top up" over "Up"
    identifier_exclusions: Sequence[Pattern] = ()
    skip_patterns: Sequence[Pattern] = ()
    # Institution rules, tried before SHARED_DIRECTION_RULES
    direction_rules: Sequence[DirectionRule] = ()
    account_name_patterns: Sequence[Pattern] = tuple(ACCOUNT_NAME_PATTERNS)
    account_number_patterns: Sequence[Pattern] = tuple(ACCOUNT_NUMBER_PATTERNS)

    @classmethod
    def can_parse(cls, text: str, **kwargs) -> bool:
        return cls.marker_position(text) is not None

    @classmethod
    def marker_position(cls, text: str) -> Optional[int]:
        if not text:
            return None
        earliest = None
        for pattern in cls.identifiers:
            for match in pattern.finditer(text):
                if earliest is not None and match.start() >= earliest:
                    break
                if not cls._excluded(text, match.start(), match.end()):
                    earliest = match.start()
                    break
        return earliest

    @classmethod
    def _excluded(cls, text: str, start: int, end: int) -> bool:
        for exclusion in cls.identifier_exclusions:
            for found in exclusion.finditer(text):
                if found.start() >= end:
                    break
                if found.end() > start:
                    return True
        return False

    @property
    def rules(self) -> List[DirectionRule]:
        return list(self.direction_rules) + list(SHARED_DIRECTION_RULES)

    def parse(self, text: str, context: Optional[ParseContext] = None) -> ParseResult:
        context = context or ParseContext()
        period, diagnostics = self.resolve_period(text, context)
        year = self.default_year(context, period)

        matches = []
        for raw in split_lines(text):
            match = self.match_line(raw, year, context.options)
            if match is not None:
                matches.append(match)
        logger.debug("%s matched %d transaction lines", self.name, len(matches))

        account_name, account_number = extract_account_info(
            text, self.account_name_patterns, self.account_number_patterns
        )
        return assemble_result(
            matches,
            parser_name=self.name,
            bank_name=self.bank_name,
            statement_period=period,
            options=context.options,
            warnings=diagnostics,
            account_name=account_name,
            account_number=account_number,
        )

    def match_line(
        self, raw: RawLine, default_year: int, options: ParsingOptions
    ) -> Optional[LineMatch]:
        """
        Recognise one transaction line: a leading date followed by at least one
        amount. Anything else is boilerplate and yields None.
        """
        if should_skip_line(raw.text, self.skip_patterns):
            return None

        found = find_leading_date(
            raw.text,
            default_year,
            window=options.date_search_window,
            pivot=options.two_digit_year_pivot,
        )
        if found is None:
            return None
        token, remaining = found
        # Institution notes are often printed after the date column
        if any(p.search(remaining) for p in self.skip_patterns):
            return None

        amounts = extract_amounts(remaining)
        if not amounts:
            return None
        amount, balance = self.select_amounts(amounts)

        description = self.clean_description(remaining, options)
        transaction_type, sign = self.classify(description, amount)
        return LineMatch(
            line=raw,
            date=ParsedDateCandidate(token.value, token.has_explicit_year),
            description=description,
            amount_text=amount.text,
            sign=sign,
            transaction_type=transaction_type,
            balance_text=balance.text if balance else None,
            balance_negative=balance.is_debit if balance else False,
        )

    def select_amounts(
        self, amounts: List[AmountToken]
    ) -> Tuple[AmountToken, Optional[AmountToken]]:
        """With two or more amounts the last one is the running balance."""
        if len(amounts) >= 2:
            return amounts[-2], amounts[-1]
        return amounts[0], None

    def classify(self, description: str, amount: AmountToken) -> Tuple[TransactionType, int]:
        return classify_transaction(
            description, amount.is_debit, amount.is_credit, self.rules
        )

    def clean_description(self, text: str, options: ParsingOptions) -> str:
        return clean_description(text, options.description_max_length)

