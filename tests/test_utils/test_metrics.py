"""Tests for metric derivation."""

import pytest

from ccache_monitor.utils.metrics import (
    INT64_MAX,
    INT64_MIN,
    KIBIBYTE,
    METRIC_KEYS,
    PRECISION,
    CollectionResult,
    build_metric_set,
    clamp_int64,
    missing_stats,
    percentage,
)


SAMPLE_RAW = {
    "local_storage_hit": 120,
    "local_storage_miss": 30,
    "cache_size_kibibyte": 2048,
    "files_in_cache": 500,
}


class TestPercentage:

    def test_basic(self):
        assert percentage(120, 150, PRECISION) == 80000
        assert percentage(30, 150, PRECISION) == 20000

    def test_uses_given_precision(self):
        assert percentage(1, 2, 1) == 50
        assert percentage(1, 2, 10) == 500

    def test_truncates(self):
        # 1/3 = 33.333...%
        assert percentage(1, 3, PRECISION) == 33333
        assert percentage(2, 3, PRECISION) == 66666

    def test_zero_total(self):
        assert percentage(0, 0, PRECISION) == 0

    def test_truncates_toward_zero_for_negative(self):
        assert percentage(-1, 3, PRECISION) == -33333
        assert percentage(1, -3, PRECISION) == -33333


class TestBuildMetricSet:

    def test_sample(self):
        assert build_metric_set(SAMPLE_RAW) == {
            "local_storage_hit": 120,
            "local_storage_miss": 30,
            "local_storage_hit_percentage": 80000,
            "local_storage_miss_percentage": 20000,
            "cache_size": 2097152,
            "files_in_cache": 500,
        }

    def test_exact_keys(self):
        assert tuple(build_metric_set(SAMPLE_RAW)) == METRIC_KEYS

    def test_unknown_keys_not_published(self):
        metrics = build_metric_set({**SAMPLE_RAW, "direct_cache_hit": 7})

        assert "direct_cache_hit" not in metrics

    @pytest.mark.parametrize("kib", [0, 1, 2048, 10 ** 9])
    def test_cache_size_in_bytes(self, kib):
        metrics = build_metric_set({"cache_size_kibibyte": kib})

        assert metrics["cache_size"] == KIBIBYTE * kib

    @pytest.mark.parametrize("hit,miss", [(1, 0), (0, 1), (1, 2), (7, 3), (999, 1), (1, 999)])
    def test_percentages_sum_to_100(self, hit, miss):
        metrics = build_metric_set({"local_storage_hit": hit, "local_storage_miss": miss})

        total = metrics["local_storage_hit_percentage"] + metrics["local_storage_miss_percentage"]
        assert PRECISION * 100 - 1 <= total <= PRECISION * 100

    def test_zero_hits_and_misses(self):
        metrics = build_metric_set({"local_storage_hit": 0, "local_storage_miss": 0})

        assert metrics["local_storage_hit_percentage"] == 0
        assert metrics["local_storage_miss_percentage"] == 0

    def test_missing_keys_default_to_zero(self):
        assert build_metric_set({}) == {key: 0 for key in METRIC_KEYS}

    def test_custom_precision(self):
        metrics = build_metric_set(SAMPLE_RAW, precision=1)

        assert metrics["local_storage_hit_percentage"] == 80


class TestMissingStats:

    def test_none_missing(self):
        assert missing_stats(SAMPLE_RAW) == []

    def test_reports_in_expected_order(self):
        assert missing_stats({"local_storage_miss": 1}) == [
            "local_storage_hit",
            "cache_size_kibibyte",
            "files_in_cache",
        ]


class TestCollectionResult:

    def test_timestamp_set(self):
        result = CollectionResult(collector_name="ccache", metrics={"a": 1}, message="ok")

        assert result.timestamp is not None
        assert result.ok

    def test_explicit_timestamp_kept(self):
        result = CollectionResult(
            collector_name="ccache", metrics=None, message="No data", timestamp=1.0
        )

        assert result.timestamp == 1.0
        assert not result.ok


class TestInt64Range:

    def test_clamp_passes_in_range_values(self):
        assert clamp_int64(0) == 0
        assert clamp_int64(INT64_MAX) == INT64_MAX
        assert clamp_int64(INT64_MIN) == INT64_MIN

    def test_clamp_saturates(self):
        assert clamp_int64(INT64_MAX + 1) == INT64_MAX
        assert clamp_int64(INT64_MIN - 1) == INT64_MIN

    def test_huge_cache_size_saturates(self):
        metrics = build_metric_set({"cache_size_kibibyte": INT64_MAX})

        assert metrics["cache_size"] == INT64_MAX

    def test_huge_negative_cache_size_saturates(self):
        metrics = build_metric_set({"cache_size_kibibyte": INT64_MIN})

        assert metrics["cache_size"] == INT64_MIN

    def test_largest_unscaled_cache_size_is_exact(self):
        kib = INT64_MAX // KIBIBYTE

        assert build_metric_set({"cache_size_kibibyte": kib})["cache_size"] == kib * KIBIBYTE

    def test_percentage_of_opposite_sign_counts_saturates(self):
        # hit + miss == 1 while hit is huge
        assert percentage(INT64_MAX, 1, PRECISION) == INT64_MAX
        assert percentage(INT64_MIN, 1, PRECISION) == INT64_MIN
