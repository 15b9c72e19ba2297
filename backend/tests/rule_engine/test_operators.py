"""Tests for comparison operators."""

import pytest

from lego_rules.rule_engine.errors import UnknownOperatorError, ValidationError
from lego_rules.rule_engine.operators import Operator, OperatorRegistry


class TestDefaultOperators:
    """Tests for the builtin operator set."""

    @pytest.fixture
    def operators(self):
        return OperatorRegistry()

    @pytest.mark.parametrize(
        "name, fact_value, expected, result",
        [
            ("equal", "a", "a", True),
            ("equal", 1, 2, False),
            ("notEqual", 1, 2, True),
            ("in", "NL", ["NL", "BE"], True),
            ("in", "DE", ["NL", "BE"], False),
            ("notIn", "DE", ["NL", "BE"], True),
            ("contains", ["a", "b"], "a", True),
            ("doesNotContain", ["a", "b"], "c", True),
            ("lessThan", 1, 2, True),
            ("lessThanInclusive", 2, 2, True),
            ("greaterThan", 3, 2, True),
            ("greaterThanInclusive", 2, 3, False),
        ],
    )
    def test_comparisons(self, operators, name, fact_value, expected, result):
        assert operators.get(name).evaluate(fact_value, expected) is result

    def test_numeric_operators_reject_non_numbers(self, operators):
        assert operators.get("greaterThan").evaluate("10", 1) is False
        assert operators.get("lessThan").evaluate(None, 1) is False

    def test_contains_rejects_non_collections(self, operators):
        assert operators.get("contains").evaluate(5, 5) is False

    def test_in_with_non_container(self, operators):
        assert operators.get("in").evaluate(1, 5) is False


class TestOperatorRegistry:
    """Tests for OperatorRegistry."""

    def test_add_by_name(self):
        operators = OperatorRegistry([])
        operators.add("startsWith", lambda a, b: str(a).startswith(b))
        assert "startsWith" in operators
        assert operators.get("startsWith").evaluate("lego", "le") is True

    def test_add_requires_callback(self):
        with pytest.raises(ValidationError):
            OperatorRegistry().add("startsWith")

    def test_operator_requires_callable(self):
        with pytest.raises(ValidationError):
            Operator("broken", "not callable")

    def test_remove(self):
        operators = OperatorRegistry()
        assert operators.remove("equal") is True
        assert operators.remove("equal") is False
        with pytest.raises(UnknownOperatorError):
            operators.get("equal")

    def test_default_set(self):
        assert len(OperatorRegistry()) == 10
