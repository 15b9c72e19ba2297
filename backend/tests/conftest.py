"""Shared fixtures for rule engine tests."""

import asyncio
from typing import Any

import pytest

from lego_rules.rule_engine.almanac import Almanac
from lego_rules.rule_engine.engine import Engine


class RecordingAlmanac(Almanac):
    """Almanac that records every fact lookup and can delay resolution."""

    def __init__(self, runtime_facts: dict[str, Any] | None = None, delays: dict[str, float] | None = None):
        super().__init__(runtime_facts=runtime_facts)
        self.delays = delays or {}
        self.requested: list[str] = []
        self.completed: list[str] = []

    async def fact_value(self, fact_id, params=None, path=None):
        self.requested.append(fact_id)
        if fact_id in self.delays:
            await asyncio.sleep(self.delays[fact_id])
        value = await super().fact_value(fact_id, params, path)
        self.completed.append(fact_id)
        return value


@pytest.fixture
def engine():
    """Create an engine with the default operators."""
    return Engine(allow_undefined_facts=False)


@pytest.fixture
def lenient_engine():
    """Create an engine that treats undefined facts as false."""
    return Engine(allow_undefined_facts=True)


@pytest.fixture
def recording_almanac():
    """Factory for almanacs that record fact lookups."""
    return RecordingAlmanac
