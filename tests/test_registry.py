from datetime import date

import pytest

from statementextract import parse_statement, select_parser
from statementextract.exceptions import EmptyStatementError, UnknownParserError
from statementextract.parsers.generic_parser import GenericParser
from statementextract.parsers.up_parser import UpParser
from statementextract.parsers_core.base import BaseParser
from statementextract.parsers_core.models import (
    Diagnostic,
    DiagnosticKind,
    ParseContext,
    ParseResult,
    Transaction,
)
from statementextract.parsers_core.registry import ParserRegistry


class AlwaysFails(BaseParser):
    name = "always_fails"
    priority = 1

    @classmethod
    def can_parse(cls, text, **kwargs):
        return True

    def parse(self, text, context=None):
        return ParseResult(
            success=False,
            parser_name=self.name,
            errors=[Diagnostic(kind=DiagnosticKind.NO_TRANSACTIONS_FOUND, reason="nothing")],
        )


class AlwaysWorks(BaseParser):
    name = "always_works"
    priority = 2

    @classmethod
    def can_parse(cls, text, **kwargs):
        return True

    def parse(self, text, context=None):
        return ParseResult(
            success=True,
            parser_name=self.name,
            transactions=[
                Transaction(transaction_date=date(2025, 1, 1), description="Coffee", amount=-450)
            ],
        )


class RecognisesButEmpty(BaseParser):
    name = "recognises_but_empty"
    bank_name = "Example Bank"
    priority = 1

    @classmethod
    def can_parse(cls, text, **kwargs):
        return True

    def parse(self, text, context=None):
        return ParseResult(
            success=False,
            parser_name=self.name,
            bank_name=self.bank_name,
            errors=[Diagnostic(kind=DiagnosticKind.NO_TRANSACTIONS_FOUND, reason="nothing")],
        )


class NoisyFallback(BaseParser):
    name = "noisy_fallback"
    is_fallback = True

    @classmethod
    def can_parse(cls, text, **kwargs):
        return True

    def parse(self, text, context=None):
        return ParseResult(
            success=False,
            parser_name=self.name,
            warnings=[
                Diagnostic(kind=DiagnosticKind.MALFORMED_LINE, reason="bad", line_number=n)
                for n in (1, 2)
            ],
            errors=[Diagnostic(kind=DiagnosticKind.NO_TRANSACTIONS_FOUND, reason="nothing")],
        )


class BrokenProbe(BaseParser):
    name = "broken_probe"
    priority = 0

    @classmethod
    def can_parse(cls, text, **kwargs):
        raise RuntimeError("boom")

    def parse(self, text, context=None):
        raise AssertionError("a parser whose probe failed must not run")


def _registry(*parser_classes):
    registry = ParserRegistry()
    for parser_cls in parser_classes:
        registry.register_parser(parser_cls.name, parser_cls)
    return registry


def test_default_registry_order(registry):
    assert registry.list_parsers() == [
        "csv_export",
        "up",
        "raiz",
        "swyftx",
        "cba",
        "anz",
        "ing",
        "bendigo",
        "rest_super",
        "unisuper",
        "australian_super",
        "generic",
    ]


def test_fallback_is_listed_last_whatever_its_priority():
    class EarlyFallback(GenericParser):
        name = "early_fallback"
        priority = 0

    registry = _registry(EarlyFallback, UpParser)
    assert registry.list_parsers() == ["up", "early_fallback"]


def test_first_registration_wins():
    registry = _registry(AlwaysWorks)
    registry.register_parser("always_works", AlwaysFails)
    assert registry.get_parser("always_works") is AlwaysWorks


def test_detect_and_select(registry, up_statement, grocery_list):
    assert registry.detect_parser(up_statement) == "up"
    assert isinstance(select_parser(up_statement), UpParser)
    assert registry.detect_parser(grocery_list) is None
    assert isinstance(select_parser(grocery_list), GenericParser)


def test_successful_result_beats_failed_one():
    result = _registry(AlwaysFails, AlwaysWorks).parse("anything")
    assert result.success
    assert result.parser_name == "always_works"


def test_probe_errors_count_as_not_recognised():
    result = _registry(BrokenProbe, AlwaysWorks).parse("anything")
    assert result.parser_name == "always_works"


def test_parse_statement_uses_detected_parser(up_statement):
    result = parse_statement(up_statement)
    assert result.success
    assert result.parser_name == "up"
    assert "Round Up Transfer" in result.transactions[0].description


def test_unrelated_text_fails_gracefully(grocery_list):
    result = parse_statement(grocery_list)

    assert not result.success
    assert result.transactions == []
    assert result.errors
    assert result.errors[0].kind == DiagnosticKind.NO_PARSER_MATCHED
    assert "Unable to detect bank format" in result.errors[0].reason
    assert "Milk" in result.errors[0].reason


def test_no_parsers_at_all():
    result = ParserRegistry().parse("Milk\nEggs")
    assert not result.success
    assert [e.kind for e in result.errors] == [DiagnosticKind.NO_PARSER_MATCHED]


def test_recognised_but_empty_statement():
    result = parse_statement("Up Bank\nThanks for banking with us\n")

    assert not result.success
    assert result.errors[0].kind == DiagnosticKind.NO_TRANSACTIONS_FOUND
    assert "Up Bank" in result.errors[0].reason
    assert result.parser_name == "up"


def test_unknown_institution_uses_fallback(year_end_period):
    result = parse_statement(
        "Local Credit Union\n20 Dec Groceries 25.00 1000.00\n",
        statement_period=year_end_period,
    )

    assert result.success
    assert result.parser_name == "generic"
    (groceries,) = result.transactions
    assert groceries.transaction_date == date(2024, 12, 20)
    assert groceries.amount == -2500
    assert groceries.balance == 100000


def test_explicit_year_survives_end_to_end(year_end_period):
    result = parse_statement(
        "Local Credit Union\n20 Dec 2025 Groceries 25.00 1000.00\n",
        statement_period=year_end_period,
    )
    assert result.transactions[0].transaction_date == date(2025, 12, 20)
    assert result.warnings == []


def test_preferred_parser_runs_first(up_statement):
    result = parse_statement(up_statement, preferred="generic")
    assert result.parser_name == "generic"
    assert result.success


def test_preferred_parser_that_does_not_recognise_falls_back(up_statement):
    result = parse_statement(up_statement, preferred="anz")
    assert result.parser_name == "up"


def test_unknown_preferred_parser_raises(up_statement):
    with pytest.raises(UnknownParserError) as excinfo:
        parse_statement(up_statement, preferred="westpac")
    assert "westpac" in str(excinfo.value)
    assert "up" in excinfo.value.available


@pytest.mark.parametrize("text", ["", "   \n\t\n", None])
def test_empty_text_raises(text):
    with pytest.raises(EmptyStatementError):
        parse_statement(text)


def test_parsing_is_idempotent(up_statement):
    context = ParseContext(default_year=2025)
    first = parse_statement(up_statement, context)
    second = parse_statement(up_statement, context)
    assert first == second
    assert first.model_dump() == second.model_dump()


def test_failure_keeps_the_recognising_parser_over_a_noisier_fallback():
    result = _registry(RecognisesButEmpty, NoisyFallback).parse("anything")

    assert not result.success
    assert result.errors[0].kind == DiagnosticKind.NO_TRANSACTIONS_FOUND
    assert result.parser_name == "recognises_but_empty"
    assert result.bank_name == "Example Bank"


def test_bank_in_header_beats_bank_mentioned_in_a_transaction(registry):
    text = (
        "Bendigo Bank\n"
        "Bendigo Complete Account\n"
        "05/03/2024 Transfer to ING Savings Maximiser 120.00 880.00\n"
    )
    assert registry.detect_parser(text) == "bendigo"

    result = parse_statement(text)
    assert result.parser_name == "bendigo"
    assert result.bank_name == "Bendigo Bank"
    assert result.transactions[0].amount == -12000


def test_rollover_from_another_fund_does_not_change_the_fund(registry):
    text = (
        "AustralianSuper\n"
        "01/08/2023 Rollover from UniSuper 5,000.00 25,000.00\n"
    )
    assert registry.detect_parser(text) == "australian_super"
    assert parse_statement(text).parser_name == "australian_super"
