"""Tests for the engine registry."""

import pytest

from lego_rules.rule_engine.engine import Engine
from lego_rules.rule_engine.errors import UnknownOperatorError, ValidationError
from lego_rules.rule_engine.fact import Fact
from lego_rules.rule_engine.rule import Rule


class TestEngine:
    """Tests for Engine."""

    def test_allow_undefined_facts_defaults_to_settings(self, monkeypatch):
        from lego_rules.core.config import settings

        monkeypatch.setattr(settings, "ALLOW_UNDEFINED_FACTS", True)
        assert Engine().allow_undefined_facts is True
        assert Engine(allow_undefined_facts=False).allow_undefined_facts is False

    def test_fact_priority_lookup(self):
        engine = Engine()
        engine.add_fact("age", 21, priority=4)
        engine.add_fact(Fact("name", "acme"))
        assert engine.lookup_fact_priority("age") == 4
        assert engine.lookup_fact_priority("name") == 1
        assert engine.lookup_fact_priority("unknown") == 1

    def test_remove_fact(self):
        engine = Engine()
        engine.add_fact("age", 21)
        assert engine.remove_fact("age") is True
        assert engine.get_fact("age") is None

    def test_operator_lookup(self):
        engine = Engine()
        engine.add_operator("isEven", lambda a, b: a % 2 == 0)
        assert engine.lookup_operator("isEven").evaluate(4, None) is True
        engine.remove_operator("isEven")
        with pytest.raises(UnknownOperatorError):
            engine.lookup_operator("isEven")

    def test_add_rule_attaches_engine(self):
        engine = Engine()
        rule = Rule({"conditions": {"all": []}})
        engine.add_rule(rule)
        assert rule.engine is engine
        assert engine.rules == [rule]
        assert engine.remove_rule(rule) is True
        assert engine.remove_rule(rule) is False

    def test_add_rule_requires_conditions(self):
        with pytest.raises(ValidationError):
            Engine().add_rule(Rule())

    @pytest.mark.asyncio
    async def test_create_almanac(self):
        engine = Engine()
        engine.add_fact("age", 21)
        almanac = engine.create_almanac({"name": "acme"})
        assert await almanac.fact_value("age") == 21
        assert await almanac.fact_value("name") == "acme"
