"""
Shared test fixtures for the delux test suite.

Time is driven by ManualClock and device traffic is captured by
RecordingSink, so no test needs real hardware or real waiting.
"""

import random

import pytest

from delux.config import DeluxConfig
from delux.controller import Controller
from delux.lights import RecordingSink
from delux.sequence import ManualClock


@pytest.fixture
def config():
    """Built-in default configuration."""
    return DeluxConfig.with_defaults()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def rng():
    """Seeded random source so random modes are repeatable."""
    return random.Random(1234)


@pytest.fixture
def controller(config, sink, clock, rng):
    return Controller(config, sink, clock, rng=rng)
