"""
Result assembler.

Turns line matches into validated Transactions. A record is either complete
and valid or it is dropped with a warning naming its line; a Transaction is
never half built.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from statementextract.parsers_core.dates import resolve_date
from statementextract.parsers_core.lines import LineMatch
from statementextract.parsers_core.models import (
    Diagnostic,
    DiagnosticKind,
    ParseResult,
    ParsingOptions,
    StatementPeriod,
    Transaction,
)
from statementextract.utils.parsing_utils import parse_amount, to_minor_units

logger = logging.getLogger(__name__)


def _malformed(match: LineMatch, reason: str) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.MALFORMED_LINE,
        reason=f"{reason}: {match.line.text!r}",
        line_number=match.line.number,
    )


def build_transaction(
    match: LineMatch,
    period: Optional[StatementPeriod],
    options: ParsingOptions,
) -> Tuple[Optional[Transaction], List[Diagnostic]]:
    """Validate one match. Returns the Transaction (or None) and any warnings."""
    if not match.description.strip():
        return None, [_malformed(match, "empty description")]

    try:
        magnitude = to_minor_units(parse_amount(match.amount_text))
    except ValueError as e:
        return None, [_malformed(match, str(e))]
    if magnitude == 0:
        return None, [_malformed(match, "zero amount")]

    balance = None
    if match.balance_text is not None:
        try:
            balance = to_minor_units(parse_amount(match.balance_text))
        except ValueError as e:
            return None, [_malformed(match, f"balance {e}")]
        if match.balance_negative:
            balance = -balance

    warnings = []
    if match.date.has_explicit_year:
        day = match.date.value
    else:
        resolution = resolve_date(
            match.date.value, match.line.text, period, options.two_digit_year_pivot
        )
        day = resolution.value
        if resolution.unresolved:
            warnings.append(
                Diagnostic(
                    kind=DiagnosticKind.AMBIGUOUS_DATE_UNRESOLVED,
                    reason=(
                        f"{day.strftime('%d %b')} does not fall inside the statement "
                        f"period {period.start} to {period.end}; using {day.isoformat()}"
                    ),
                    line_number=match.line.number,
                )
            )

    try:
        transaction = Transaction(
            transaction_date=day,
            description=match.description,
            amount=magnitude if match.sign > 0 else -magnitude,
            balance=balance,
            transaction_type=match.transaction_type,
            line_number=match.line.number,
            raw_text=match.line.text,
        )
    except ValidationError as e:
        return None, [_malformed(match, f"invalid record ({e.error_count()} errors)")]
    return transaction, warnings


def assemble_result(
    matches: Iterable[LineMatch],
    *,
    parser_name: str,
    bank_name: str,
    statement_period: Optional[StatementPeriod],
    options: ParsingOptions,
    warnings: Sequence[Diagnostic] = (),
    account_name: Optional[str] = None,
    account_number: Optional[str] = None,
) -> ParseResult:
    """Build the ParseResult for one parser run, in source line order."""
    transactions: List[Transaction] = []
    all_warnings: List[Diagnostic] = list(warnings)

    for match in matches:
        transaction, line_warnings = build_transaction(match, statement_period, options)
        all_warnings.extend(line_warnings)
        if transaction is not None:
            transactions.append(transaction)

    errors: List[Diagnostic] = []
    if not transactions:
        errors.append(
            Diagnostic(
                kind=DiagnosticKind.NO_TRANSACTIONS_FOUND,
                reason=(
                    "No transactions found in the document. Please ensure this is "
                    f"a valid {bank_name or 'bank'} statement."
                ),
            )
        )

    if all_warnings:
        logger.info(
            "%s: %d transactions, %d warnings",
            parser_name,
            len(transactions),
            len(all_warnings),
        )

    return ParseResult(
        success=bool(transactions),
        transactions=transactions,
        warnings=all_warnings,
        errors=errors,
        parser_name=parser_name,
        bank_name=bank_name or None,
        account_name=account_name,
        account_number=account_number,
        statement_period=statement_period,
        currency=options.currency,
    )
