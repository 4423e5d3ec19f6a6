"""Metric data structures and derivation of the published metric set."""

from dataclasses import dataclass
from typing import Optional, Dict, List, Mapping
import time


# Fixed-point scale for percentages: 80.5% is published as 80500
PRECISION = 1000

KIBIBYTE = 1024

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Keys read from `ccache --print-stats`
EXPECTED_STATS = (
    "local_storage_hit",
    "local_storage_miss",
    "cache_size_kibibyte",
    "files_in_cache",
)

# Keys published to the monitoring host, in chart order
METRIC_KEYS = (
    "local_storage_hit",
    "local_storage_miss",
    "local_storage_hit_percentage",
    "local_storage_miss_percentage",
    "cache_size",
    "files_in_cache",
)


def clamp_int64(value: int) -> int:
    """Saturate a value to the signed 64-bit range published to the host."""
    return max(INT64_MIN, min(INT64_MAX, value))


def percentage(part: int, total: int, precision: int) -> int:
    """
    Compute a fixed-point percentage using integer arithmetic only.

    Args:
        part: Numerator count (e.g. hits)
        total: Denominator count (e.g. hits + misses)
        precision: Fixed-point scale applied before dividing

    Returns:
        int: ``precision * 100 * part / total`` truncated toward zero,
        or 0 when ``total`` is 0
    """
    if total == 0:
        return 0

    numerator = precision * 100 * part
    quotient = abs(numerator) // abs(total)
    if (numerator < 0) != (total < 0):
        quotient = -quotient
    return clamp_int64(quotient)


def missing_stats(raw: Mapping[str, int]) -> List[str]:
    """Return the expected stat keys absent from a parsed stats mapping."""
    return [key for key in EXPECTED_STATS if key not in raw]


def build_metric_set(raw: Mapping[str, int], precision: int = PRECISION) -> Dict[str, int]:
    """
    Derive the six published metrics from parsed ccache stats.

    Missing stats count as 0. Derived values saturate at the int64 bounds.

    Args:
        raw: Parsed ``key -> int`` stats
        precision: Fixed-point scale for the percentage metrics

    Returns:
        Dict[str, int]: Mapping with exactly the keys in METRIC_KEYS
    """
    hit = raw.get("local_storage_hit", 0)
    miss = raw.get("local_storage_miss", 0)
    total = hit + miss

    return {
        "local_storage_hit": hit,
        "local_storage_miss": miss,
        "local_storage_hit_percentage": percentage(hit, total, precision),
        "local_storage_miss_percentage": percentage(miss, total, precision),
        "cache_size": clamp_int64(raw.get("cache_size_kibibyte", 0) * KIBIBYTE),
        "files_in_cache": raw.get("files_in_cache", 0),
    }


@dataclass
class CollectionResult:
    """Outcome of one collection cycle as seen by the host."""

    collector_name: str
    metrics: Optional[Dict[str, int]]  # None when the cycle produced no data
    message: str  # Human-readable summary
    error: Optional[str] = None
    timestamp: Optional[float] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = time.time()

    @property
    def ok(self) -> bool:
        return bool(self.metrics)
