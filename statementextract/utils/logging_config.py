import logging
import sys


def configure_logging(level=logging.INFO):
    """
    Configure logging for command line use.
    The parsing core only ever logs through module loggers; hosts embedding
    the library configure logging their own way.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    logging.getLogger("statementextract").setLevel(level)

    return logging.getLogger("statementextract")
