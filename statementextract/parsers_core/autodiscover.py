"""
Parser Autodiscovery Utility

This module provides autodiscover_parsers(), which imports every module in
statementextract.parsers so that each module's register_parser call runs and
the default registry is fully populated.

Usage:
    from statementextract.parsers_core.autodiscover import get_default_registry
    registry = get_default_registry()
    print(registry.list_parsers())
"""

import importlib
import logging
import pkgutil
from functools import lru_cache

from statementextract.parsers_core.registry import ParserRegistry, default_registry

logger = logging.getLogger(__name__)


def autodiscover_parsers(registry: ParserRegistry = default_registry) -> ParserRegistry:
    """
    Import all parser modules in statementextract.parsers (except __init__).
    Returns the registry for inspection.
    """
    import statementextract.parsers

    package = statementextract.parsers
    for module_info in sorted(pkgutil.iter_modules(package.__path__), key=lambda m: m.name):
        modname = f"{package.__name__}.{module_info.name}"
        logger.debug("Importing parser module: %s", modname)
        importlib.import_module(modname)
    logger.debug("Registered parsers: %s", registry.list_parsers())
    return registry


@lru_cache(maxsize=None)
def get_default_registry() -> ParserRegistry:
    """The default registry, populated on first use."""
    return autodiscover_parsers(default_registry)
