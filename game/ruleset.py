# Configuration: colors, code length, display glyphs.
from .errors import ConfigurationError

# Largest pattern universe the solver accepts (32-bit unsigned range).
MAX_PATTERN_COUNT = 2**32 - 1

DEFAULT_RULES = {
    "name": "classic",  # Identifier for this ruleset
    "code_length": 4,  # Number of holes in the code
    "colors": [
        "P",
        "R",
        "G",
        "Y",
        "B",
    ],  # Default color set (Purple, Red, Green, Yellow, Blue)
    "display": {
        "emoji_map": {  # Optional, for CLI rendering
            "P": "🟣",
            "R": "🔴",
            "G": "🟢",
            "Y": "🟡",
            "B": "🔵",
            "BK": "⚫",  # exact match peg
            "W": "⚪",  # color match peg
        }
    },
}


def make_rules(code_length, colors, name: str = "custom") -> dict:
    """
    Build a ruleset dict from external configuration.

    Args:
        code_length (int | str): Number of holes. Strings are parsed.
        colors (str | list[str]): Ordered alphabet of color symbols.
        name (str): Identifier for the ruleset.
    Returns:
        dict: A ruleset shaped like DEFAULT_RULES.
    Raises:
        ConfigurationError: If any value is unusable.
    """

    try:
        length = int(code_length)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Hole count must be a positive integer, got {code_length!r}."
        ) from None
    if isinstance(code_length, float) or length <= 0:
        raise ConfigurationError(
            f"Hole count must be a positive integer, got {code_length!r}."
        )

    symbols = list(colors or [])
    if not symbols:
        raise ConfigurationError("The color alphabet must not be empty.")
    duplicates = sorted({c for c in symbols if symbols.count(c) > 1})
    if duplicates:
        raise ConfigurationError(
            f"Duplicate color symbols: {', '.join(duplicates)}."
        )

    pattern_count = len(symbols) ** length
    if pattern_count > MAX_PATTERN_COUNT:
        raise ConfigurationError(
            f"{len(symbols)} colors and {length} holes give {pattern_count} "
            f"patterns, more than the supported {MAX_PATTERN_COUNT}."
        )

    default_map = DEFAULT_RULES["display"]["emoji_map"]
    emoji_map = {c: default_map[c] for c in symbols if c in default_map}
    emoji_map["BK"] = default_map["BK"]
    emoji_map["W"] = default_map["W"]

    return {
        "name": name,
        "code_length": length,
        "colors": symbols,
        "display": {"emoji_map": emoji_map},
    }
