from datetime import date

import pytest

from statementextract.parsers_core.models import StatementPeriod


def pytest_sessionstart(session):
    """
    Called after the Session object has been created and
    before performing test collection and execution.
    """
    from statementextract.parsers_core.autodiscover import get_default_registry

    print("Populating parser registry for test session...")
    get_default_registry()
    print("Parser registry populated.")


UP_STATEMENT = """Up Bank
Spending Account Statement
Account Name: Jane Citizen
BSB: 633 123 Account: 12345678
Statement Period: 01/01/2025 - 31/01/2025
Date Description Amount Balance
Opening Balance 99.00
15 Jan Round Up Transfer 1.00 100.00
16 Jan Woolworths Metro 🛒 25.00 75.00
Instant Transfer Completed
18 Jan Salary ACME Pty Ltd 2,500.00 2,575.00
Closing Balance 2,575.00
"""

GROCERY_LIST = """Milk
Eggs
Bread
2 apples
"""


@pytest.fixture
def registry():
    from statementextract.parsers_core.autodiscover import get_default_registry

    return get_default_registry()


@pytest.fixture
def up_statement():
    return UP_STATEMENT


@pytest.fixture
def grocery_list():
    return GROCERY_LIST


@pytest.fixture
def year_end_period():
    """A statement period that spans new year."""
    return StatementPeriod(start=date(2024, 12, 15), end=date(2025, 1, 15))
