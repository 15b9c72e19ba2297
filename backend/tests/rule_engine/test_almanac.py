"""Tests for the almanac and fact definitions."""

import pytest

from lego_rules.rule_engine.almanac import Almanac, resolve_path
from lego_rules.rule_engine.errors import UndefinedFactError, ValidationError
from lego_rules.rule_engine.fact import Fact


class TestResolvePath:
    """Tests for resolve_path."""

    def test_nested_mapping(self):
        assert resolve_path({"a": {"b": {"c": 3}}}, "$.a.b.c") == 3

    def test_list_index(self):
        assert resolve_path({"items": [{"id": 1}, {"id": 2}]}, ".items.1.id") == 2

    def test_missing_segment(self):
        assert resolve_path({"a": {}}, "$.a.b") is None
        assert resolve_path({"items": [1]}, "items.5") is None

    def test_empty_path_returns_value(self):
        assert resolve_path({"a": 1}, "$") == {"a": 1}


class TestFact:
    """Tests for Fact."""

    def test_default_priority(self):
        assert Fact("age", 21).priority == 1

    @pytest.mark.parametrize("priority", [0, -1, "x"])
    def test_invalid_priority(self, priority):
        with pytest.raises(ValidationError):
            Fact("age", 21, priority)

    def test_requires_id(self):
        with pytest.raises(ValidationError):
            Fact("", 21)

    def test_constant_and_dynamic(self):
        assert Fact("age", 21).is_constant
        assert not Fact("age", lambda params, almanac: 21).is_constant


@pytest.mark.asyncio
class TestAlmanac:
    """Tests for Almanac.fact_value."""

    async def test_runtime_fact(self):
        almanac = Almanac(runtime_facts={"age": 21})
        assert await almanac.fact_value("age") == 21

    async def test_runtime_callable_value_is_not_called(self):
        marker = lambda: None
        almanac = Almanac(runtime_facts={"callback": marker})
        assert await almanac.fact_value("callback") is marker

    async def test_dynamic_fact_receives_params(self):
        def lookup(params, almanac):
            return {"id": params["id"], "name": "acme"}

        almanac = Almanac({"account": Fact("account", lookup)})
        assert await almanac.fact_value("account", {"id": 7}, "$.id") == 7

    async def test_async_fact_can_use_other_facts(self):
        async def total(params, almanac):
            return await almanac.fact_value("price") * await almanac.fact_value("quantity")

        almanac = Almanac({"total": Fact("total", total)}, {"price": 5, "quantity": 3})
        assert await almanac.fact_value("total") == 15

    async def test_runtime_fact_overrides_definition(self):
        almanac = Almanac({"age": Fact("age", 10)}, {"age": 30})
        assert await almanac.fact_value("age") == 30

    async def test_undefined_fact(self):
        almanac = Almanac()
        with pytest.raises(UndefinedFactError) as exc_info:
            await almanac.fact_value("missing")
        assert exc_info.value.fact_id == "missing"
        assert not almanac.has_fact("missing")
