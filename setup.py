"""
Setup script for statementextract

Allows editable install for hosts that embed the parsing core:
    pip install -e .[test]

This ensures statementextract modules (including every bundled parser) are
importable, and installs the ``statementextract`` command.
"""

from setuptools import setup, find_packages

# Use include pattern to ensure all subpackages (like parsers) are included
setup(
    name="statementextract",
    version="0.1.0",
    packages=find_packages(include=["statementextract", "statementextract.*"]),
    install_requires=[
        "pandas>=2.0.0",
        "PyYAML>=6.0.0",
        "pydantic>=2.0.0",
        "python-dateutil>=2.8.0",
        "typer>=0.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "statementextract=statementextract.cli.main:app",
        ],
    },
    python_requires=">=3.9",
    author="Statement Extract Team",
    description="Bank statement parsing core: institution parsers, registry and date normalization",
    include_package_data=True,
)
