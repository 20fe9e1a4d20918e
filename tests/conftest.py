"""Shared test fixtures for PerfLite."""

from pathlib import Path

import pytest

from perflite.engine import reset_defaults
from perflite.utils.metrics import MetricsRegistry

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
STACKS_DIR = FIXTURES_DIR / "stacks"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def chrome_stack() -> str:
    """Load a V8-style stack with a header line."""
    return (STACKS_DIR / "chrome.txt").read_text()


@pytest.fixture
def firefox_stack() -> str:
    """Load a SpiderMonkey-style stack."""
    return (STACKS_DIR / "firefox.txt").read_text()


@pytest.fixture
def mixed_stack() -> str:
    """Load three conventions interleaved with garbage lines."""
    return (STACKS_DIR / "mixed.txt").read_text()


@pytest.fixture(autouse=True)
def fresh_metrics() -> None:
    """Start every test with an empty metrics registry and fresh defaults."""
    MetricsRegistry.reset()
    reset_defaults()


@pytest.fixture
def scan_inputs() -> list[str]:
    """Return inputs exercising chunk boundaries for scanner equivalence."""
    inputs = [
        "",
        "0",
        "no digits here at all, not one",
        "at f (/a/b.js:10:15)",
        "x:10:20",
        "1234567890123456",
        "12345678901234567",
        "a" * 15 + "1",
        "a" * 16 + "1",
        "1" + "a" * 15 + "2" * 17,
        "18446744073709551615 18446744073709551616 00000000000000000000042",
        "9" * 40 + ":" + "5" * 20,
        "Error: e\n    at f (/a/b.js:10:15)\n    at g (/c/d.js:200:3000)\n",
        "é1ü22€333" * 7,
    ]
    # A 14-digit run starting at every offset of a two-chunk buffer
    inputs.extend("x" * offset + "98765432101234" + "y" * 20 for offset in range(32))
    # Digit runs ending exactly on every chunk boundary
    inputs.extend("z" * (16 - length) + "7" * length + ":" * 16 for length in range(1, 17))
    return inputs
