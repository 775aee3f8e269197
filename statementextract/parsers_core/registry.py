import logging
from typing import Dict, List, Optional, Tuple, Type

from statementextract.exceptions import EmptyStatementError, UnknownParserError
from statementextract.parsers_core.base import BaseParser
from statementextract.parsers_core.models import (
    Diagnostic,
    DiagnosticKind,
    ParseContext,
    ParseResult,
)

logger = logging.getLogger(__name__)


def first_non_blank_line(text: str, limit: int = 80) -> str:
    for line in text.splitlines():
        if line.strip():
            line = line.strip()
            return line if len(line) <= limit else line[: limit - 3] + "..."
    return ""


class ParserRegistry:
    """
    Ordered collection of statement parsers.

    Institution parsers are probed in ascending priority (registration order
    breaks ties); fallback parsers always come last. Among the parsers that
    recognise a text, the one whose marker appears first runs first. The
    registry is filled once at startup and only read afterwards.
    """

    def __init__(self):
        self._parsers: Dict[str, Type[BaseParser]] = {}

    def register_parser(self, name: str, parser_cls: Type[BaseParser]):
        if name in self._parsers:
            logger.debug("Parser %s already registered, keeping the first", name)
            return
        logger.debug("Registering parser: %s -> %s", name, parser_cls.__name__)
        self._parsers[name] = parser_cls

    def get_parser(self, name: str) -> Optional[Type[BaseParser]]:
        return self._parsers.get(name)

    def _ordered(self) -> List[Tuple[str, Type[BaseParser]]]:
        position = {name: i for i, name in enumerate(self._parsers)}
        return sorted(
            self._parsers.items(),
            key=lambda item: (
                bool(getattr(item[1], "is_fallback", False)),
                getattr(item[1], "priority", 100),
                position[item[0]],
            ),
        )

    def list_parsers(self) -> List[str]:
        """Registered parser names in probe order."""
        return [name for name, _ in self._ordered()]

    def _specific(self):
        return [(n, c) for n, c in self._ordered() if not getattr(c, "is_fallback", False)]

    def _fallbacks(self):
        return [(n, c) for n, c in self._ordered() if getattr(c, "is_fallback", False)]

    @staticmethod
    def _probe(name: str, parser_cls: Type[BaseParser], text: str) -> bool:
        try:
            return bool(parser_cls.can_parse(text))
        except Exception as e:
            logger.warning("Parser %s errored while probing: %s", name, e)
            return False

    @staticmethod
    def _locate(name: str, parser_cls: Type[BaseParser], text: str) -> Optional[int]:
        try:
            return parser_cls.marker_position(text)
        except Exception as e:
            logger.warning("Parser %s errored while probing: %s", name, e)
            return None

    def _recognising(self, text: str) -> List[Tuple[str, Type[BaseParser]]]:
        """
        Institution parsers that recognise the text, earliest marker first.
        A statement that mentions another bank in a transaction line still
        goes to the institution named in its header. Probe order breaks ties.
        """
        found = []
        for name, parser_cls in self._specific():
            position = self._locate(name, parser_cls, text)
            if position is not None:
                found.append((position, name, parser_cls))
        found.sort(key=lambda item: item[0])
        return [(name, parser_cls) for _, name, parser_cls in found]

    def detect_parser(self, text: str) -> Optional[str]:
        """
        Returns the name of the institution parser whose marker appears first
        in the text. Returns None if no parser matches.
        """
        recognising = self._recognising(text)
        return recognising[0][0] if recognising else None

    def select_parser(self, text: str) -> Optional[BaseParser]:
        """The parser that would run first for this text, or None."""
        name = self.detect_parser(text)
        if name is None:
            fallbacks = self._fallbacks()
            if not fallbacks:
                return None
            name = fallbacks[0][0]
        return self._parsers[name]()

    def parse(
        self,
        text: str,
        context: Optional[ParseContext] = None,
        preferred: Optional[str] = None,
    ) -> ParseResult:
        """
        Parse statement text with the first parser that both recognises it and
        extracts at least one transaction.

        Args:
            text: Statement text already extracted from the source document
            context: Statement period and options supplied by the caller
            preferred: Name of a parser to try before auto-detection

        Raises:
            EmptyStatementError: if the text is missing or blank
            UnknownParserError: if ``preferred`` is not a registered parser
        """
        if text is None or not str(text).strip():
            raise EmptyStatementError("Statement text is empty")
        context = context or ParseContext()

        # Results of parsers that recognised the text, then of the fallbacks
        attempts: List[ParseResult] = []
        fallback_attempts: List[ParseResult] = []

        if preferred:
            preferred_cls = self.get_parser(preferred)
            if preferred_cls is None:
                raise UnknownParserError(preferred, self.list_parsers())
            if self._probe(preferred, preferred_cls, text):
                result = preferred_cls().parse(text, context)
                if result.success:
                    return result
                attempts.append(result)
            else:
                logger.info(
                    "Preferred parser %s does not recognise this text, auto-detecting",
                    preferred,
                )

        for name, parser_cls in self._recognising(text):
            if name == preferred:
                continue
            logger.info("Parsing with %s", name)
            result = parser_cls().parse(text, context)
            if result.success:
                return result
            logger.info("%s recognised the text but found no transactions", name)
            attempts.append(result)

        for name, parser_cls in self._fallbacks():
            if name == preferred:
                continue
            logger.info("Falling back to %s", name)
            result = parser_cls().parse(text, context)
            if result.success:
                return result
            fallback_attempts.append(result)

        return self._failure(text, attempts, fallback_attempts)

    @staticmethod
    def _failure(
        text: str, attempts: List[ParseResult], fallback_attempts: List[ParseResult]
    ) -> ParseResult:
        first_line = first_non_blank_line(text)
        recognised = bool(attempts)
        if recognised:
            headline = Diagnostic(
                kind=DiagnosticKind.NO_TRANSACTIONS_FOUND,
                reason=(
                    "The statement format was recognised but no transaction lines "
                    f"could be read. First line: {first_line!r}"
                ),
            )
        else:
            headline = Diagnostic(
                kind=DiagnosticKind.NO_PARSER_MATCHED,
                reason=(
                    "Unable to detect bank format. Please select your bank manually or "
                    "ensure you uploaded a valid bank statement. "
                    f"First line: {first_line!r}"
                ),
            )

        # Keep the diagnostics of the attempt that got furthest, preferring
        # the parsers that recognised the text over the fallback
        best = max(attempts or fallback_attempts, key=lambda r: len(r.warnings), default=None)
        return ParseResult(
            success=False,
            transactions=[],
            warnings=list(best.warnings) if best else [],
            errors=[headline] + (list(best.errors) if best else []),
            parser_name=best.parser_name if best and recognised else None,
            bank_name=best.bank_name if best and recognised else None,
            statement_period=best.statement_period if best else None,
        )


# Filled by autodiscover_parsers(); see get_default_registry()
default_registry = ParserRegistry()
