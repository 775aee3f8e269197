"""
Bundled statement parsers. Importing a module registers its parser with the
default registry; see statementextract.parsers_core.autodiscover.
"""
