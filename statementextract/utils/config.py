# statementextract/utils/config.py

import yaml

from statementextract.parsers_core.models import ParsingOptions

# Defaults for every parser. Override per run with a YAML file, see
# load_parsing_options().
PARSING_DEFAULTS = {
    "description_max_length": 200,
    # A transaction date must start within this many characters of the line start
    "date_search_window": 20,
    # Two-digit years above the pivot are 19xx, the rest 20xx
    "two_digit_year_pivot": 50,
    "currency": "AUD",
}

# Probe order of the bundled parsers (lower runs first). The fallback parser
# always runs last regardless of its priority.
PARSER_PRIORITIES = {
    "csv_export": 10,
    "up": 20,
    "raiz": 25,
    "swyftx": 27,
    "cba": 30,
    "anz": 40,
    "ing": 50,
    "bendigo": 60,
    "rest_super": 70,
    "unisuper": 72,
    "australian_super": 74,
    "generic": 1000,
}

CLI_DEFAULTS = {
    "config_filename": "statementextract.yaml",
    "encoding": "utf-8",
    "preview_rows": 50,
}


def load_yaml_config(path):
    """Read a YAML config file and return its mapping (empty for an empty file)."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at top level")
    return data


def load_parsing_options(path=None) -> ParsingOptions:
    """
    Build ParsingOptions from PARSING_DEFAULTS, overlaid with the ``parsing``
    section of a YAML file when a path is given.

    Example file:

        parsing:
          description_max_length: 120
          currency: NZD
    """
    settings = dict(PARSING_DEFAULTS)
    if path:
        overrides = load_yaml_config(path).get("parsing") or {}
        unknown = set(overrides) - set(PARSING_DEFAULTS)
        if unknown:
            raise ValueError(
                f"Unknown parsing options in {path}: {', '.join(sorted(unknown))}"
            )
        settings.update(overrides)
    return ParsingOptions(**settings)
