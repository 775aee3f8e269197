"""
Exceptions raised by statementextract.

Only structural problems with the call itself are raised. Anything wrong with
the statement content is reported as a Diagnostic on the ParseResult.
"""


class StatementExtractError(Exception):
    """Base class for all statementextract errors."""


class EmptyStatementError(StatementExtractError, ValueError):
    """Raised when the statement text is missing or blank."""


class UnknownParserError(StatementExtractError, KeyError):
    """Raised when a parser name is requested that was never registered."""

    def __init__(self, name: str, available=None):
        self.name = name
        self.available = list(available or [])
        super().__init__(name)

    def __str__(self):
        supported = ", ".join(self.available) or "none"
        return f"Unsupported parser: '{self.name}'. Supported: {supported}"
