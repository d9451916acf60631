"""Shared fixtures for KinGraph tests."""
from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"
FIXTURE_NAMES = ("table.html", "narrative.html", "maiden.html", "geneanet.html", "mixed.html")


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.fixture()
def fixture_html():
    """Return a loader for HTML fixtures by file name."""
    return read_fixture
