"""
Safe environment variable parsing.

Provides typed readers for the DCFAIL_* environment overrides so that a
malformed value falls back to a default instead of leaking into the config.

Usage Pattern
-------------
    # DANGEROUS - any non-empty string is truthy
    restart = bool(os.environ.get("DCFAIL_RESTART_RADIO_ON_REGULAR_DEACTIVATION"))

    # SAFE - recognized spellings only
    from dcfail.core.env import get_env_bool
    restart = get_env_bool("DCFAIL_RESTART_RADIO_ON_REGULAR_DEACTIVATION")
"""

from __future__ import annotations

import logging
import os
from typing import FrozenSet, Optional

logger = logging.getLogger(__name__)

LOG_LEVELS: FrozenSet[str] = frozenset(
    ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
)

_TRUE_VALUES = ("true", "yes", "1", "on")
_FALSE_VALUES = ("false", "no", "0", "off", "")


def parse_bool(value: str) -> Optional[bool]:
    """Parse a truthy/falsy spelling, returning None when unrecognized."""
    normalized = value.lower().strip()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return None


def get_env_bool(
    name: str,
    default: bool = False,
) -> bool:
    """
    Get boolean from environment variable.

    Recognizes common truthy/falsy values:
    - True: "true", "yes", "1", "on"
    - False: "false", "no", "0", "off", ""

    Args:
        name: Environment variable name.
        default: Default value if not set or unrecognized.

    Returns:
        Boolean value.

    Example:
        >>> get_env_bool("DCFAIL_RESTART_RADIO_ON_REGULAR_DEACTIVATION")
        False
    """
    value = os.environ.get(name)
    if value is None:
        return default

    parsed = parse_bool(value)
    if parsed is None:
        logger.warning(f"Ignoring unrecognized boolean in {name}: {value!r}")
        return default
    return parsed


def get_env_whitelist(
    name: str,
    default: str,
    allowed: FrozenSet[str],
    case_sensitive: bool = False,
) -> str:
    """
    Get string from environment variable, restricted to allowed values.

    Args:
        name: Environment variable name.
        default: Default value if not set or not allowed.
        allowed: Set of permitted values.
        case_sensitive: Whether comparison is case-sensitive.

    Returns:
        The allowed value (in its canonical spelling) or default.
    """
    value = os.environ.get(name)
    if value is None:
        return default

    if case_sensitive:
        if value in allowed:
            return value
    else:
        normalized = value.lower().strip()
        for allowed_value in allowed:
            if normalized == allowed_value.lower():
                return allowed_value

    logger.warning(
        f"Invalid value for {name}: {value!r}. "
        f"Allowed: {', '.join(sorted(allowed))}. Using default: {default}"
    )
    return default
