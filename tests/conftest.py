from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from reveng.core.keys import TableIdentifier  # noqa: E402
from reveng.core.repository import OverrideRepository  # noqa: E402


@pytest.fixture
def repository() -> OverrideRepository:
    return OverrideRepository(loaders=[])


@pytest.fixture
def orders() -> TableIdentifier:
    return TableIdentifier("MAIN", "SALES", "ORDERS")


@pytest.fixture
def customer() -> TableIdentifier:
    return TableIdentifier("MAIN", "SALES", "CUSTOMER")
