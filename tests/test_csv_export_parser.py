from datetime import date

from statementextract import parse_statement
from statementextract.parsers.csv_export_parser import CSVExportParser
from statementextract.parsers_core.models import DiagnosticKind, TransactionType

SIGNED_EXPORT = """Account,Everyday Savings
Date,Description,Amount,Balance
15/01/2025,Woolworths Metro,-25.00,975.00
16/01/2025,Salary ACME,"2,500.00","3,475.00"
17/01/2025,Broken row,abc,
,,,
18/01/2025,Refund Kmart,10,3485
"""

DEBIT_CREDIT_EXPORT = """Date,Narrative,Debit Amount,Credit Amount,Balance
03/02/2024,EFTPOS Coles,54.10,,1945.90
04/02/2024,Transfer from savings,,200.00,2145.90
"""


def test_can_parse_needs_a_header_row():
    assert CSVExportParser.can_parse(SIGNED_EXPORT)
    assert CSVExportParser.can_parse(DEBIT_CREDIT_EXPORT)
    assert not CSVExportParser.can_parse("Up Bank\n15 Jan Coffee 4.50 1,000.00\n")
    assert not CSVExportParser.can_parse("Date,Description\n01/01/2025,Coffee\n")


def test_signed_amount_export():
    result = CSVExportParser().parse(SIGNED_EXPORT)

    assert result.success
    assert result.parser_name == "csv_export"
    assert [t.amount for t in result.transactions] == [-2500, 250000, 1000]
    assert [t.balance for t in result.transactions] == [97500, 347500, 348500]
    assert [t.line_number for t in result.transactions] == [3, 4, 7]
    assert result.transactions[0].transaction_date == date(2025, 1, 15)
    assert result.transactions[1].transaction_type == TransactionType.INCOME


def test_unreadable_rows_are_warnings():
    result = CSVExportParser().parse(SIGNED_EXPORT)

    (warning,) = result.warnings
    assert warning.kind == DiagnosticKind.MALFORMED_LINE
    assert warning.line_number == 5


def test_debit_and_credit_columns():
    result = CSVExportParser().parse(DEBIT_CREDIT_EXPORT)

    coles, transfer = result.transactions
    assert coles.amount == -5410
    assert coles.transaction_type == TransactionType.EXPENSE
    assert transfer.amount == 20000
    assert transfer.transaction_type == TransactionType.TRANSFER
    assert transfer.balance == 214590


def test_bad_date_is_reported():
    text = "Date,Description,Amount\nsometime,Coffee,-4.50\n01/02/2024,Tea,-3.00\n"
    result = CSVExportParser().parse(text)

    assert [t.description for t in result.transactions] == ["Tea"]
    assert result.warnings[0].line_number == 2
    assert "unrecognised date" in result.warnings[0].reason


def test_registry_prefers_csv_export():
    result = parse_statement(SIGNED_EXPORT)
    assert result.parser_name == "csv_export"
