"""Shared fixtures: a scripted random source and a frozen clock."""

import os
from datetime import datetime

import pytest

os.environ.setdefault("MPLBACKEND", "Agg")

from stockdash.config import Settings
from stockdash.engine import MarketDataEngine
from stockdash.random_source import NumpyRandomSource

FIXED_NOW = datetime(2024, 3, 15, 10, 30, 45, 123456)


class ScriptedRandomSource:
    """Returns a fixed sequence of uniforms, optionally cycling."""

    def __init__(self, values, cycle=False):
        self.values = list(values)
        self.cycle = cycle
        self.calls = 0

    def next_uniform(self) -> float:
        index = self.calls
        if index >= len(self.values):
            if not self.cycle:
                raise AssertionError("scripted random source exhausted")
            index %= len(self.values)
        self.calls += 1
        return self.values[index]


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def seeded_engine(fixed_clock):
    """Engine with a reproducible numpy source and a frozen clock."""
    return MarketDataEngine(random_source=NumpyRandomSource(seed=42), clock=fixed_clock)


@pytest.fixture
def fast_settings():
    """Default settings with every simulated delay removed."""
    return Settings().without_latency()
