# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Setup for all the tests."""

from collections.abc import Iterator

import async_solipsism
import pytest
import time_machine

from .utils import START, FakeMonotonic


@pytest.fixture(scope="session")
def event_loop_policy() -> async_solipsism.EventLoopPolicy:
    """Use a loop that doesn't interact with the outside world and fakes time."""
    return async_solipsism.EventLoopPolicy()


@pytest.fixture
def fake_time() -> Iterator[time_machine.Coordinates]:
    """Replace real time with a time machine that doesn't automatically tick."""
    with time_machine.travel(START, tick=False) as traveller:
        yield traveller


@pytest.fixture
def monotonic() -> FakeMonotonic:
    """Get a monotonic clock advanced by hand."""
    return FakeMonotonic()
