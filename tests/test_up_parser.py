from datetime import date

import pytest

from statementextract.parsers.up_parser import UpParser, main as up_main
from statementextract.parsers_core.models import (
    DiagnosticKind,
    ParseContext,
    StatementPeriod,
    TransactionType,
)


@pytest.mark.parametrize(
    "text",
    [
        "Please top up your account before Friday",
        "Top Up Bank transfer received",
        "Your payment status update is ready",
        "Quick update: pick up the dry cleaning",
        "UP BANK",
        "Set up Banking alerts",
    ],
)
def test_can_parse_rejects_unrelated_up(text):
    assert not UpParser.can_parse(text)


@pytest.mark.parametrize(
    "text",
    [
        "Up Bank\nSpending Account Statement",
        "Statement issued by up.com.au",
        "Up Saver - Holiday",
        "Up Banking transaction history",
        "Up Bank. Top up anytime\nSpending Account Statement",
    ],
)
def test_can_parse_accepts_up_headers(text):
    assert UpParser.can_parse(text)


def test_round_up_transfer_end_to_end(up_statement):
    result = up_main(up_statement)

    assert result.success
    assert len(result.transactions) >= 1
    first = result.transactions[0]
    assert "Round Up Transfer" in first.description
    assert first.amount == -100
    assert first.balance == 10000
    assert first.transaction_type == TransactionType.TRANSFER
    assert first.transaction_date == date(2025, 1, 15)


def test_up_statement_details(up_statement):
    result = UpParser().parse(up_statement)

    assert result.parser_name == "up"
    assert result.bank_name == "Up Bank"
    assert result.account_name == "Jane Citizen"
    assert result.account_number == "5678"
    assert result.statement_period == StatementPeriod(
        start=date(2025, 1, 1), end=date(2025, 1, 31)
    )
    assert [t.description for t in result.transactions] == [
        "Round Up Transfer",
        "Woolworths Metro 🛒",
        "Salary ACME Pty Ltd",
    ]
    assert [t.amount for t in result.transactions] == [-100, -2500, 250000]
    assert [t.line_number for t in result.transactions] == [8, 9, 11]
    assert result.transactions[2].transaction_type == TransactionType.INCOME
    assert result.warnings == []


def test_instant_transfer_and_cover_lines_are_skipped():
    text = "Up Bank\n02 Feb Cover from Savings 10.00 20.00\n03 Feb Bakery 4.50 15.50\n"
    result = UpParser().parse(text, ParseContext(default_year=2025))
    assert [t.description for t in result.transactions] == ["Bakery"]


def test_malformed_line_is_reported_not_fatal(up_statement):
    text = up_statement.replace(
        "Instant Transfer Completed", "17 Jan Coffee 4,5.00 70.50"
    )
    result = UpParser().parse(text)

    assert result.success
    assert len(result.transactions) == 3
    (warning,) = result.warnings
    assert warning.kind == DiagnosticKind.MALFORMED_LINE
    assert warning.line_number == 10


def test_caller_period_overrides_header(up_statement):
    """A December line in a January statement is pulled into the prior year."""
    text = up_statement.replace("Instant Transfer Completed", "31 Dec Late fee 5.00 70.00")
    period = StatementPeriod(start=date(2024, 12, 20), end=date(2025, 1, 31))
    result = UpParser().parse(text, ParseContext(statement_period=period))

    late = next(t for t in result.transactions if t.description == "Late fee")
    assert late.transaction_date == date(2024, 12, 31)
    assert late.transaction_type == TransactionType.EXPENSE


def test_date_outside_period_is_kept_with_warning(up_statement):
    text = up_statement.replace("Instant Transfer Completed", "20 Jun Mystery 5.00 70.00")
    result = UpParser().parse(text)

    mystery = next(t for t in result.transactions if t.description == "Mystery")
    assert mystery.transaction_date == date(2025, 6, 20)
    assert [w.kind for w in result.warnings] == [DiagnosticKind.AMBIGUOUS_DATE_UNRESOLVED]


def test_reversed_header_period_is_ignored():
    text = "Up Bank\nStatement Period: 31/01/2025 - 01/01/2025\n15 Jan Bakery 4.50 95.50\n"
    result = UpParser().parse(text, ParseContext(default_year=2025))

    assert result.statement_period is None
    assert result.transactions[0].transaction_date == date(2025, 1, 15)
    assert result.warnings[0].kind == DiagnosticKind.INVALID_STATEMENT_PERIOD


def test_no_transaction_lines():
    result = UpParser().parse("Up Bank\nNothing to see here\n")
    assert not result.success
    assert result.errors[0].kind == DiagnosticKind.NO_TRANSACTIONS_FOUND
    assert "Up Bank" in result.errors[0].reason


def test_leap_day_is_placed_in_the_leap_year():
    """29 Feb has no placeholder in 2025, the period end year."""
    text = "Up Bank\n29 Feb Coffee 4.50 10.00\n01 Mar Tea 3.00 7.00\n"
    period = StatementPeriod(start=date(2024, 2, 15), end=date(2025, 2, 14))
    result = UpParser().parse(text, ParseContext(statement_period=period))

    assert [(t.transaction_date, t.description) for t in result.transactions] == [
        (date(2024, 2, 29), "Coffee"),
        (date(2024, 3, 1), "Tea"),
    ]
    assert result.warnings == []


def test_leap_day_outside_any_leap_year_is_reported():
    text = "Up Bank\n29 Feb Coffee 4.50 10.00\n"
    period = StatementPeriod(start=date(2025, 2, 1), end=date(2025, 3, 31))
    result = UpParser().parse(text, ParseContext(statement_period=period))

    (coffee,) = result.transactions
    assert (coffee.transaction_date.month, coffee.transaction_date.day) == (2, 29)
    assert [w.kind for w in result.warnings] == [DiagnosticKind.AMBIGUOUS_DATE_UNRESOLVED]
