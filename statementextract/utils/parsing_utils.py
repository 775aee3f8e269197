"""
parsing_utils.py

Shared building blocks for the text statement parsers: date and amount tokens,
description cleanup, boilerplate line detection, direction (sign) rules,
statement period and account detail lookup.

Australian statement conventions are assumed: day-first dates and dollar
amounts with two decimal places.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional, Pattern, Sequence, Tuple

from dateutil import parser as dateutil_parser

from statementextract.parsers_core.models import TransactionType

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_MONTH_WORD = (
    r"(Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|"
    r"Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\b\.?"
)

# Order matters when two patterns match at the same position.
DATE_PATTERNS = {
    # YYYY-MM-DD
    "iso": re.compile(r"(?<!\d)(\d{4})-(\d{2})-(\d{2})(?!\d)"),
    # DD/MM/YYYY or DD/MM/YY
    "slash": re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})(?!\d)"),
    # DD-MM-YYYY or DD-MM-YY
    "dash": re.compile(r"(?<!\d)(\d{1,2})-(\d{1,2})-(\d{4}|\d{2})(?!\d)"),
    # DD MMM, DD MMM YYYY, DD Month YY
    "month_name": re.compile(
        r"(?<!\d)(\d{1,2})\s+" + _MONTH_WORD + r"(?:,?\s+(\d{4}|\d{2})(?![\d.,:/]))?",
        re.IGNORECASE,
    ),
}

AMOUNT_PATTERN = re.compile(
    r"(?<![\w.,])(\(?-?\$?\s?-?\d[\d,]*\.\d{2}\)?)(?![\d,])(?:\s*(DR|CR|D|C)\b)?",
    re.IGNORECASE,
)
_WELL_FORMED_AMOUNT = re.compile(r"^(?:\d{1,3}(?:,\d{3})+|\d+)\.\d{2}$")

# Common statement lines to skip (headers, footers, summaries)
SKIP_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in [
        r"^Date\s+(Description|Transaction|Details)",
        r"^Transaction\s+Date",
        r"^Opening\s+Balance",
        r"^Closing\s+Balance",
        r"^Balance\s+Carried\s+Forward",
        r"^Balance\s+Brought\s+Forward",
        r"^Statement\s+(Period|Number)",
        r"^Page\s+\d+",
        r"^BSB\s*:",
        r"^Account\s+(Number|No\.?)\s*:",
        r"^Credit\s+Limit",
        r"^Available\s+(Balance|Credit|Funds)",
        r"^Pending\s+Transactions?",
        r"^Total\s+(Debits?|Credits?)",
        r"^Interest\s+Rate",
        r"^ABN\s*:",
        r"^\s*Debit\s+Credit\s+Balance",
        r"^\s*Date\s+Debit\s+Credit",
    ]
]

# Balance summary rows, skipped even when they start with a date
BALANCE_LINE_PATTERN = re.compile(
    r"\b(?:opening|closing)\s+balance\b|\bbalance\s+(?:brought|carried)\s+forward\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class DateToken:
    value: date
    has_explicit_year: bool
    start: int
    end: int


@dataclass(frozen=True)
class AmountToken:
    """An amount as printed, with any debit/credit marker found next to it."""

    text: str
    is_debit: bool
    is_credit: bool
    position: int


@dataclass(frozen=True)
class DirectionRule:
    """
    Maps a description pattern to a transaction type and a sign:
    -1 for money leaving the account, +1 for money arriving.
    """

    pattern: Pattern
    transaction_type: TransactionType
    sign: int


def direction_rule(regex: str, transaction_type: TransactionType, sign: int) -> DirectionRule:
    return DirectionRule(re.compile(regex, re.IGNORECASE), transaction_type, sign)


# Most specific first; parsers put their own rules ahead of these.
SHARED_DIRECTION_RULES = [
    direction_rule(
        r"\b(?:transfer|tfr|xfer)\b.*\bto\s+(?:my|own|self|savings?|saver|cheque)\b",
        TransactionType.TRANSFER,
        -1,
    ),
    direction_rule(
        r"\b(?:transfer|tfr|xfer)\b.*\bfrom\s+(?:my|own|self|savings?|saver|cheque)\b",
        TransactionType.TRANSFER,
        1,
    ),
    direction_rule(
        r"\binternal\s+transfer\b|\baccount\s+transfer\b|\bbetween\s+accounts?\b"
        r"|\bsweep\b|\bround[\s-]?up\b|\b(?:savings|goal|pocket|saver)\s+transfer\b"
        r"|\blink(?:ed)?\s+account\b",
        TransactionType.TRANSFER,
        -1,
    ),
    direction_rule(
        r"\bwithdr[ae]w(?:al)?\b|\bpurchase\b|\bbought\b|\b(?:payment|paid|sent)\s+to\b"
        r"|\bdebit\b|\btransfer\s+(?:out|to)\b|\beftpos\b|\batm\b|\bfees?\b|\bcharges?\b"
        r"|\bbpay\b|\bbill\s+payment\b|\bpay\s+anyone\b|\b(?:osko|npp|paypal)\s+(?:payment|to)\b"
        r"|\bsubscription\b|\bloan\s+repayment\b|\bmortgage\b|\brent\s+payment\b"
        r"|\butility\b|\belectricity\b|\b(?:gas|water|phone|internet)\s+bill\b|\binsurance\b",
        TransactionType.EXPENSE,
        -1,
    ),
    direction_rule(
        r"\bdeposit(?:ed)?\b|\bcredit(?:ed)?\b|\btransfer\s+(?:in|from)\b|\breceived\s+from\b"
        r"|\bsalary\b|\bwages?\b|\bpayroll\b|\bpay\s*(?:roll|slip)\b|\bincome\b"
        r"|\binterest\s+(?:paid|credit|earned)\b|\bbonus\s+interest\b|\brefund\b|\brebate\b"
        r"|\bcash\s?back\b|\bdividend\b|\bdistribution\b|\bclaim\s+paid\b|\breimbursement\b"
        r"|\bpension\b|\bcentrelink\b|\bgovernment\s+payment\b|\ballowance\b"
        r"|\bincoming\s+transfer\b|\b(?:osko|npp)\s+from\b|\bpaypal\s+received\b|\bsold\b"
        r"|\bsale\s+proceeds\b|\breversal\b",
        TransactionType.INCOME,
        1,
    ),
]


def expand_year(year: int, pivot: int = 50) -> int:
    if year < 100:
        return year + (1900 if year > pivot else 2000)
    return year


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    if not 1900 <= year <= 2100:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _previous_leap_year(year: int) -> int:
    while not calendar.isleap(year):
        year -= 1
    return year


def _token_from_match(kind, match, default_year, pivot) -> Optional[DateToken]:
    if kind == "iso":
        value = _build_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        explicit = True
    elif kind in ("slash", "dash"):
        year = expand_year(int(match.group(3)), pivot)
        value = _build_date(year, int(match.group(2)), int(match.group(1)))
        explicit = True
    else:
        month = MONTHS[match.group(2)[:3].lower()]
        day = int(match.group(1))
        explicit = match.group(3) is not None
        year = expand_year(int(match.group(3)), pivot) if explicit else default_year
        if year is None:
            return None
        value = _build_date(year, month, day)
        if value is None and not explicit and (month, day) == (2, 29):
            # The placeholder year has no 29 Feb; the normalizer re-anchors it
            value = _build_date(_previous_leap_year(year), month, day)
    if value is None:
        return None
    return DateToken(value, explicit, match.start(), match.end())


def find_date(text: str, default_year: int, pivot: int = 50) -> Optional[DateToken]:
    """Return the earliest valid date token in text, or None."""
    best = None
    for kind, pattern in DATE_PATTERNS.items():
        for match in pattern.finditer(text):
            if best is not None and match.start() >= best.start:
                break
            token = _token_from_match(kind, match, default_year, pivot)
            if token is not None:
                best = token
                break
    return best


def find_leading_date(
    line: str, default_year: int, window: int = 20, pivot: int = 50
) -> Optional[Tuple[DateToken, str]]:
    """
    Find a date that starts within the first ``window`` characters of the line.
    Returns the token and the line text with the date removed. A second date
    directly after the first (a value or posted date) is dropped as well.
    """
    token = find_date(line, default_year, pivot)
    if token is None or token.start >= window:
        return None
    remaining = (line[: token.start] + " " + line[token.end :]).strip()
    second = find_date(remaining, default_year, pivot)
    if second is not None and second.start == 0:
        remaining = remaining[second.end :].strip()
    return token, remaining


def has_explicit_year(line: str, pivot: int = 50) -> bool:
    """True when any date printed on the line carries its own year."""
    for kind, pattern in DATE_PATTERNS.items():
        for match in pattern.finditer(line):
            token = _token_from_match(kind, match, 2000, pivot)
            if token is not None and token.has_explicit_year:
                return True
    return False


def parse_date_text(text: str, pivot: int = 50) -> Optional[date]:
    """
    Parse a free-standing date that includes its year, e.g. a statement period
    bound. Falls back to dateutil (day first) for long forms.
    """
    token = find_date(text, default_year=None, pivot=pivot) if text else None
    if token is not None and token.has_explicit_year:
        return token.value
    try:
        return dateutil_parser.parse(text, dayfirst=True).date()
    except (ValueError, OverflowError):
        return None


def extract_amounts(text: str) -> List[AmountToken]:
    """Find every amount token in text, left to right."""
    amounts = []
    for match in AMOUNT_PATTERN.finditer(text):
        raw = match.group(1)
        indicator = (match.group(2) or "").upper()
        negative = "-" in raw or (raw.startswith("(") and raw.endswith(")"))
        amounts.append(
            AmountToken(
                text=raw,
                is_debit=indicator in ("DR", "D") or negative,
                is_credit=indicator in ("CR", "C"),
                position=match.start(),
            )
        )
    return amounts


def parse_amount(amount_str: str) -> Decimal:
    """
    Parse a printed amount into an absolute Decimal.

    Raises:
        ValueError: if the text is not a well-formed amount
    """
    cleaned = re.sub(r"[\s$()\-]", "", str(amount_str))
    if not _WELL_FORMED_AMOUNT.match(cleaned):
        raise ValueError(f"malformed amount '{amount_str}'")
    try:
        return Decimal(cleaned.replace(",", ""))
    except InvalidOperation as e:
        raise ValueError(f"malformed amount '{amount_str}'") from e


def to_minor_units(amount: Decimal) -> int:
    """Convert a Decimal amount to integer cents, rounding half up."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(cents: int) -> Decimal:
    return Decimal(cents) / 100


def clean_description(text: str, max_length: int = 200) -> str:
    """Remove amount tokens and markers, collapse whitespace and truncate."""
    description = AMOUNT_PATTERN.sub("", text)
    description = re.sub(r"\s+", " ", description).strip()
    if len(description) > max_length:
        description = description[: max_length - 3] + "..."
    return description


def should_skip_line(line: str, extra_patterns: Sequence[Pattern] = ()) -> bool:
    if BALANCE_LINE_PATTERN.search(line):
        return True
    return any(p.search(line) for p in SKIP_PATTERNS) or any(
        p.search(line) for p in extra_patterns
    )


def classify_transaction(
    text: str,
    explicitly_debit: bool,
    explicitly_credit: bool,
    rules: Sequence[DirectionRule] = SHARED_DIRECTION_RULES,
) -> Tuple[TransactionType, int]:
    """
    Work out the transaction type and sign. An explicit DR/CR marker or minus
    sign decides the sign; otherwise the first matching rule does. Lines that
    match nothing are treated as spending.
    """
    matched = next((r for r in rules if r.pattern.search(text)), None)

    if explicitly_debit:
        sign = -1
    elif explicitly_credit:
        sign = 1
    else:
        sign = matched.sign if matched else -1

    if matched and (
        matched.sign == sign or matched.transaction_type == TransactionType.TRANSFER
    ):
        return matched.transaction_type, sign
    return (TransactionType.INCOME if sign > 0 else TransactionType.EXPENSE), sign


PERIOD_PATTERNS = [
    re.compile(
        r"Statement\s+(?:Period|for)[:\s]+(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})\s*(?:to|-)\s*(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})",
        re.IGNORECASE,
    ),
    re.compile(
        r"(\d{1,2}\s+[A-Za-z]{3,9}\.?,?\s+\d{4})\s*(?:to|-|–)\s*(\d{1,2}\s+[A-Za-z]{3,9}\.?,?\s+\d{4})",
        re.IGNORECASE,
    ),
    re.compile(
        r"Period[:\s]+(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})\s*(?:to|-)\s*(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})",
        re.IGNORECASE,
    ),
    re.compile(
        r"From\s+(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})\s+To\s+(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})",
        re.IGNORECASE,
    ),
]


def extract_statement_period(text: str, pivot: int = 50) -> Optional[Tuple[date, date]]:
    """
    Look for the statement period printed in the header. Returns (start, end)
    exactly as printed; the caller decides what to do with a reversed range.
    """
    for pattern in PERIOD_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        start = parse_date_text(match.group(1), pivot)
        end = parse_date_text(match.group(2), pivot)
        if start and end:
            return start, end
    return None


def extract_account_info(
    text: str,
    name_patterns: Sequence[Pattern] = (),
    number_patterns: Sequence[Pattern] = (),
) -> Tuple[Optional[str], Optional[str]]:
    """
    Return (account name, last four digits of the account number).
    Each pattern must capture the wanted value in group 1.
    """
    name = None
    for pattern in name_patterns:
        match = pattern.search(text)
        if match and match.group(1):
            name = match.group(1).strip()
            break

    number = None
    for pattern in number_patterns:
        match = pattern.search(text)
        if match and match.group(1):
            digits = re.sub(r"\D", "", match.group(1))
            if len(digits) >= 4:
                number = digits[-4:]
                break
    return name, number


# Account details printed in most Australian statement headers
ACCOUNT_NAME_PATTERNS = [
    re.compile(r"Account\s+Name[:\s]+([A-Z][A-Za-z ]+?)\s*(?:$|Account|BSB)", re.MULTILINE),
]
ACCOUNT_NUMBER_PATTERNS = [
    re.compile(r"Account\s+(?:Number|No\.?)[: \t]+([\d -]*\d{4})\b", re.IGNORECASE),
    re.compile(r"Account[: \t]+[*xX]{4,}\s?(\d{4})\b", re.IGNORECASE),
    re.compile(
        r"BSB[: \t]+\d{3}[ -]?\d{3}[ ,]+(?:Account|Acc)[: \t]+([\d ]*\d{4})\b",
        re.IGNORECASE,
    ),
]


# Superannuation member statements. Tax on contributions must win over the
# contribution rule.
SUPER_DIRECTION_RULES = [
    direction_rule(
        r"\b(?:contributions?\s+tax|tax\s+on\s+contributions?|tax\s+surcharge)\b",
        TransactionType.EXPENSE,
        -1,
    ),
    direction_rule(
        r"\b(?:admin(?:istration)?|management|member)\s+fees?\b|\bfees?\b",
        TransactionType.EXPENSE,
        -1,
    ),
    direction_rule(r"\binsurance\b|\bpremiums?\b", TransactionType.EXPENSE, -1),
    direction_rule(
        r"\brollover\s+(?:out|to)\b|\bbenefit\s+payment\b|\blump\s*sum\b",
        TransactionType.TRANSFER,
        -1,
    ),
    direction_rule(r"\brollover\s+(?:in|from)\b", TransactionType.TRANSFER, 1),
    direction_rule(
        r"\bcontributions?\b|\bsuper(?:annuation)?\s+guarantee\b|\bSG\b"
        r"|\bsalary\s+sacrifice\b|\bco[- ]?contribution\b",
        TransactionType.INCOME,
        1,
    ),
    direction_rule(
        r"\binvestment\s+(?:earnings?|returns?)\b|\bcredited\s+earnings?\b",
        TransactionType.INCOME,
        1,
    ),
]

SUPER_SKIP_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in [
        r"^Member\s+(?:Number|No\.?|ID)",
        r"^Investment\s+(?:Option|Choice)",
        r"^Insurance\s+Cover",
        r"^(?:Un)?restricted\s+Non[- ]Preserved",
        r"^Preserved",
    ]
]

MEMBER_NUMBER_PATTERNS = [
    re.compile(r"Member\s+(?:Number|No\.?|ID)[: \t]+(\d{6,12})\b", re.IGNORECASE),
]
