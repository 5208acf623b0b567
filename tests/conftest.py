"""Pytest configuration.

The repository uses a flat `src/` layout. This conftest makes `import src...` work when running
`pytest` from a checkout without installing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.goals.memory import MemoryGoalStore  # noqa: E402


@pytest.fixture
def store() -> MemoryGoalStore:
    """A fresh in-memory goal store."""

    return MemoryGoalStore()
