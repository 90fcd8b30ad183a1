from __future__ import annotations

import pytest

from tests.utils import TickingClock


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()
