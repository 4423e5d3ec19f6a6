"""Parser for the machine-readable output of `ccache --print-stats`."""

import logging
import re
from typing import Dict, Iterable, Optional

from ..utils.metrics import INT64_MAX, INT64_MIN


_INTEGER = re.compile(r'[+-]?[0-9]+')


def parse_int64(token: str) -> int:
    """
    Parse a base-10 signed 64-bit integer.

    Only ASCII digits with an optional sign are accepted.

    Raises:
        ValueError: If the token is not a valid integer or is out of range
    """
    if not _INTEGER.fullmatch(token):
        raise ValueError(f"invalid integer: {token!r}")
    value = int(token)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"integer out of range: {token!r}")
    return value


def parse_stats(lines: Iterable[str], logger: Optional[logging.Logger] = None) -> Dict[str, int]:
    """
    Collect every ``<key> <integer>`` line into a dict.

    Malformed lines are skipped; a later duplicate key overwrites an
    earlier one.

    Args:
        lines: Output lines of the stats command
        logger: Optional logger for skipped values

    Returns:
        Dict[str, int]: Parsed stats
    """
    stats = {}
    for line in lines:
        fields = line.split()
        if len(fields) != 2:
            continue

        key, token = fields
        try:
            stats[key] = parse_int64(token)
        except ValueError as e:
            if logger:
                logger.debug(f"Skipping stat {key}: {e}")

    return stats
