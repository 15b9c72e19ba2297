"""Comparison operators available to leaf conditions."""

from dataclasses import dataclass
from numbers import Number
from typing import Any, Callable

from lego_rules.rule_engine.errors import UnknownOperatorError, ValidationError

OperatorCallback = Callable[[Any, Any], Any]


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _contains(container: Any, item: Any) -> bool:
    try:
        return item in container
    except TypeError:
        return False


@dataclass(frozen=True)
class Operator:
    """A named comparison between a fact value and an expected value.

    Attributes:
        name: Name conditions use to reference the operator
        callback: Called with ``(fact_value, expected_value)``; may return an awaitable
        fact_value_validator: Optional guard on the fact value. When it rejects
            the value the comparison is ``False`` and the callback is not called.
    """

    name: str
    callback: OperatorCallback
    fact_value_validator: Callable[[Any], bool] | None = None

    def __post_init__(self):
        if not self.name:
            raise ValidationError("Missing operator name")
        if not callable(self.callback):
            raise ValidationError(f"Operator '{self.name}' callback must be callable")

    def evaluate(self, fact_value: Any, expected: Any) -> Any:
        if self.fact_value_validator and not self.fact_value_validator(fact_value):
            return False
        return self.callback(fact_value, expected)


class BuiltinOperators:
    """Default comparison operators."""

    @staticmethod
    def equal(a: Any, b: Any) -> bool:
        return a == b

    @staticmethod
    def notEqual(a: Any, b: Any) -> bool:
        return a != b

    @staticmethod
    def in_(a: Any, b: Any) -> bool:
        return _contains(b, a)

    @staticmethod
    def notIn(a: Any, b: Any) -> bool:
        return not _contains(b, a)

    @staticmethod
    def contains(a: Any, b: Any) -> bool:
        return _contains(a, b)

    @staticmethod
    def doesNotContain(a: Any, b: Any) -> bool:
        return not _contains(a, b)

    @staticmethod
    def lessThan(a: Any, b: Any) -> bool:
        return a < b

    @staticmethod
    def lessThanInclusive(a: Any, b: Any) -> bool:
        return a <= b

    @staticmethod
    def greaterThan(a: Any, b: Any) -> bool:
        return a > b

    @staticmethod
    def greaterThanInclusive(a: Any, b: Any) -> bool:
        return a >= b


def _is_collection(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset, str))


def default_operators() -> list[Operator]:
    """Build the default operator set."""
    return [
        Operator("equal", BuiltinOperators.equal),
        Operator("notEqual", BuiltinOperators.notEqual),
        Operator("in", BuiltinOperators.in_),
        Operator("notIn", BuiltinOperators.notIn),
        Operator("contains", BuiltinOperators.contains, _is_collection),
        Operator("doesNotContain", BuiltinOperators.doesNotContain, _is_collection),
        Operator("lessThan", BuiltinOperators.lessThan, _is_number),
        Operator("lessThanInclusive", BuiltinOperators.lessThanInclusive, _is_number),
        Operator("greaterThan", BuiltinOperators.greaterThan, _is_number),
        Operator(
            "greaterThanInclusive", BuiltinOperators.greaterThanInclusive, _is_number
        ),
    ]


class OperatorRegistry:
    """Registry of comparison operators keyed by name."""

    def __init__(self, operators: list[Operator] | None = None):
        """Initialize the registry.

        Args:
            operators: Operators to register; defaults to the builtin set
        """
        self._operators: dict[str, Operator] = {}
        for operator in default_operators() if operators is None else operators:
            self.add(operator)

    def add(
        self, operator: Operator | str, callback: OperatorCallback | None = None
    ) -> Operator:
        """Register an operator, replacing any existing one with the same name.

        Args:
            operator: An Operator, or an operator name when ``callback`` is given
            callback: Comparison callable when registering by name

        Returns:
            The registered Operator
        """
        if not isinstance(operator, Operator):
            if callback is None:
                raise ValidationError(f"Operator '{operator}' requires a callback")
            operator = Operator(operator, callback)
        self._operators[operator.name] = operator
        return operator

    def remove(self, name: str) -> bool:
        return self._operators.pop(name, None) is not None

    def get(self, name: str) -> Operator:
        """Look up an operator by name.

        Raises:
            UnknownOperatorError: If no operator is registered under ``name``
        """
        operator = self._operators.get(name)
        if operator is None:
            raise UnknownOperatorError(name)
        return operator

    def __contains__(self, name: str) -> bool:
        return name in self._operators

    def __len__(self) -> int:
        return len(self._operators)
