"""Shared pytest configuration and fixtures."""

import stat

import pytest

from ccache_monitor.config.models import CcacheConfig
from ccache_monitor.utils.logger import setup_logger


SAMPLE_STATS = """\
stats_updated_timestamp 1700000000
direct_cache_hit 100
local_storage_hit 120
local_storage_miss 30
cache_size_kibibyte 2048
files_in_cache 500
"""


def _as_bytes(text):
    return text if isinstance(text, bytes) else text.encode()


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test", "DEBUG")


@pytest.fixture
def fake_ccache(tmp_path):
    """
    Factory writing an executable stand-in for ccache.

    The script prints ``stdout`` (str or raw bytes) when called with
    --print-stats, then ``stderr`` to standard error, and exits with
    ``exit_code``. With ``delay`` the script instead replaces itself with
    ``sleep delay`` so that killing it closes the output pipe.
    """
    def _make(stdout=SAMPLE_STATS, exit_code: int = 0, delay: float = 0, stderr=""):
        script = tmp_path / "ccache"
        stdout_file = tmp_path / "stdout.txt"
        stdout_file.write_bytes(_as_bytes(stdout))
        stderr_file = tmp_path / "stderr.txt"
        stderr_file.write_bytes(_as_bytes(stderr))
        lines = [
            "#!/bin/sh",
            'if [ "$1" != "--print-stats" ]; then exit 64; fi',
            f'cat "{stdout_file}"',
            f'cat "{stderr_file}" >&2',
        ]
        if delay:
            lines.append(f"exec sleep {delay}")
        else:
            lines.append(f"exit {exit_code}")
        script.write_text("\n".join(lines) + "\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _make


@pytest.fixture
def ccache_config(fake_ccache):
    """CcacheConfig pointing at a fake ccache printing SAMPLE_STATS."""
    return CcacheConfig(binary=fake_ccache())


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep environment-driven settings out of the tests."""
    for var in ("CCACHE_MONITOR_CONFIG", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
