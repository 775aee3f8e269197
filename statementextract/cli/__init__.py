"""Command line interface for statementextract."""
