import pytest

from fakes import FrozenClock


@pytest.fixture
def clock():
    return FrozenClock()
