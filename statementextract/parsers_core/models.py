from datetime import date
from enum import Enum
from typing import List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class DiagnosticKind(str, Enum):
    NO_PARSER_MATCHED = "no_parser_matched"
    NO_TRANSACTIONS_FOUND = "no_transactions_found"
    MALFORMED_LINE = "malformed_line"
    AMBIGUOUS_DATE_UNRESOLVED = "ambiguous_date_unresolved"
    INVALID_STATEMENT_PERIOD = "invalid_statement_period"


class StatementPeriod(BaseModel):
    """
    The inclusive date range a statement claims to cover, usually printed in
    its header. Supplied by the caller or recovered from the header text.
    """

    model_config = ConfigDict(frozen=True)

    start: date = Field(..., description="First day covered (inclusive)")
    end: date = Field(..., description="Last day covered (inclusive)")

    @model_validator(mode="after")
    def _check_order(self):
        if self.start > self.end:
            raise ValueError(
                f"statement period start {self.start} is after end {self.end}"
            )
        return self

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class ParsingOptions(BaseModel):
    """Tunables shared by every parser. Defaults live in utils.config."""

    model_config = ConfigDict(frozen=True)

    description_max_length: int = Field(200, ge=4)
    date_search_window: int = Field(20, ge=1)
    two_digit_year_pivot: int = Field(50, ge=0, le=99)
    currency: str = "AUD"


class ParseContext(BaseModel):
    """
    Caller-supplied context for one parse call.

    - statement_period: when omitted the parser tries the statement header
    - default_year: year given to dates printed without one, before they are
      re-anchored against the statement period
    """

    model_config = ConfigDict(frozen=True)

    statement_period: Optional[StatementPeriod] = None
    default_year: Optional[int] = Field(None, ge=1900, le=2100)
    options: ParsingOptions = Field(default_factory=ParsingOptions)


class Transaction(BaseModel):
    """
    A single normalized transaction. Amounts are integer minor units (cents):
    money out of the account is negative, money in is positive.
    """

    model_config = ConfigDict(frozen=True)

    transaction_date: date = Field(..., description="Transaction date, year corrected")
    description: str = Field(..., min_length=1, description="Trimmed statement text")
    amount: StrictInt = Field(..., description="Signed amount in minor units")
    balance: Optional[StrictInt] = Field(
        None, description="Running balance after this transaction, in minor units"
    )
    transaction_type: TransactionType = TransactionType.EXPENSE
    line_number: Optional[int] = Field(None, description="1-based source line")
    raw_text: Optional[str] = Field(None, description="Original line, for debugging")

    @field_validator("description", mode="before")
    @classmethod
    def _strip_description(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def date(self) -> date:
        return self.transaction_date


class Diagnostic(BaseModel):
    """A non-fatal problem found while parsing, tied to a line where possible."""

    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    reason: str
    line_number: Optional[int] = None

    def __str__(self):
        if self.line_number is None:
            return self.reason
        return f"line {self.line_number}: {self.reason}"


class ParseResult(BaseModel):
    """
    Canonical output of every parser.
    - success: true only when at least one transaction was extracted
    - transactions: in source line order, duplicates preserved
    - warnings: per-line problems that did not stop the parse
    - errors: reasons the parse produced nothing
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    transactions: List[Transaction] = Field(default_factory=list)
    warnings: List[Diagnostic] = Field(default_factory=list)
    errors: List[Diagnostic] = Field(default_factory=list)
    parser_name: Optional[str] = None
    bank_name: Optional[str] = None
    account_name: Optional[str] = None
    account_number: Optional[str] = Field(
        None, description="Last four digits of the account number only"
    )
    statement_period: Optional[StatementPeriod] = None
    currency: str = "AUD"

    @model_validator(mode="after")
    def _success_matches_transactions(self):
        if self.success != bool(self.transactions):
            raise ValueError("success must be true exactly when transactions exist")
        return self

    @property
    def total_amount(self) -> int:
        return sum(t.amount for t in self.transactions)

    def to_dataframe(self) -> pd.DataFrame:
        """Flatten the transactions into a DataFrame, one row per transaction."""
        columns = [
            "transaction_date",
            "description",
            "amount",
            "balance",
            "transaction_type",
            "line_number",
        ]
        rows = [
            {
                "transaction_date": t.transaction_date,
                "description": t.description,
                "amount": t.amount,
                "balance": t.balance,
                "transaction_type": t.transaction_type.value,
                "line_number": t.line_number,
            }
            for t in self.transactions
        ]
        df = pd.DataFrame(rows, columns=columns)
        df["source"] = self.parser_name
        df["currency"] = self.currency
        return df
