"""Shared fixtures for the coin hill test suite."""

from __future__ import annotations

from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def agents_dir() -> Path:
    return REPO_ROOT / "agents"


@pytest.fixture
def repo_root() -> Path:
    return REPO_ROOT
