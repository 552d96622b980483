"""Pytest configuration and fixtures for graphwalk tests."""

import os
import random

import pytest

# Set a fixed terminal width to prevent line wrapping issues in CI
# This must be set before any Rich imports
os.environ.setdefault("COLUMNS", "200")
os.environ.setdefault("LINES", "50")
# Disable Rich's terminal detection to ensure consistent output
os.environ.setdefault("TERM", "dumb")


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible vertex placement."""
    return random.Random(1234)


@pytest.fixture(autouse=True)
def clean_graphwalk_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep GRAPHWALK_* variables from the outer environment out of tests."""
    for key in list(os.environ):
        if key.startswith("GRAPHWALK_"):
            monkeypatch.delenv(key, raising=False)
