from __future__ import annotations

from pathlib import Path

import pytest

from ngmock.diagnostics import Diagnostics
from tests._fixtures.app_builder import AppBuilder


@pytest.fixture
def app_builder(tmp_path: Path) -> AppBuilder:
    """Provide a throwaway Angular application rooted at the pytest tmp_path."""
    return AppBuilder(tmp_path)


@pytest.fixture
def diagnostics() -> Diagnostics:
    return Diagnostics()
