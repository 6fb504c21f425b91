import pytest

from tests.unit.factories import FakeClock


@pytest.fixture
def clock():
    return FakeClock()
