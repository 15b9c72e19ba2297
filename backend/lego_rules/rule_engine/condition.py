"""Condition tree nodes."""

import inspect
import json
from typing import TYPE_CHECKING, Any

from lego_rules.rule_engine.errors import ValidationError
from lego_rules.rule_engine.models import BooleanOperator, ConditionEvaluation

if TYPE_CHECKING:
    from lego_rules.rule_engine.almanac import Almanac
    from lego_rules.rule_engine.models import EvaluationTrace
    from lego_rules.rule_engine.operators import OperatorRegistry


class Condition:
    """A node in a rule's condition tree.

    A node is either a boolean node (``all``/``any`` over child nodes) or a
    leaf comparing a fact against an expected value. Nodes are not modified
    by evaluation; outcomes are recorded in an EvaluationTrace.
    """

    def __init__(
        self,
        *,
        boolean_operator: BooleanOperator | None = None,
        children: list["Condition"] | None = None,
        fact: str | None = None,
        operator: str | None = None,
        value: Any = None,
        params: dict[str, Any] | None = None,
        path: str | None = None,
        priority: int | None = None,
    ):
        if boolean_operator is None and not fact:
            raise ValidationError("Condition: either a boolean operator or a fact is required")
        if boolean_operator is not None and fact:
            raise ValidationError("Condition: a node cannot be both boolean and a fact comparison")
        if boolean_operator is None and not operator:
            raise ValidationError(f"Condition on '{fact}': operator is required")

        self.boolean_operator = boolean_operator
        self.children = tuple(children or ()) if boolean_operator else ()
        self.fact = fact
        self.operator = operator
        self.value = value
        self.params = params
        self.path = path
        self.priority = self._parse_priority(priority)

    @staticmethod
    def _parse_priority(priority: Any) -> int | None:
        if priority is None:
            return None
        try:
            priority = int(priority)
        except (TypeError, ValueError):
            raise ValidationError(f"Condition: invalid priority {priority!r}") from None
        if priority <= 0:
            raise ValidationError("Condition: priority must be greater than zero")
        return priority

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Condition":
        """Build a condition tree from its definition.

        Args:
            data: ``{"all"|"any": [...]}`` or
                ``{"fact", "operator", "value", "params"?, "path"?}``;
                either form may carry a ``priority``

        Returns:
            Root Condition of the parsed tree

        Raises:
            ValidationError: If the definition is malformed
        """
        if not isinstance(data, dict):
            raise ValidationError(f"Condition: expected an object, got {type(data).__name__}")

        has_all = "all" in data
        has_any = "any" in data
        if has_all and has_any:
            raise ValidationError('Condition: "all" and "any" cannot be used together')

        if has_all or has_any:
            boolean_operator = BooleanOperator.ALL if has_all else BooleanOperator.ANY
            children = data[boolean_operator.value]
            if not isinstance(children, list):
                raise ValidationError(
                    f'Condition: "{boolean_operator.value}" must be a list of conditions'
                )
            return cls(
                boolean_operator=boolean_operator,
                children=[cls.from_dict(child) for child in children],
                priority=data.get("priority"),
            )

        for key in ("fact", "operator", "value"):
            if key not in data:
                raise ValidationError(f'Condition: "{key}" property is required')
        return cls(
            fact=data["fact"],
            operator=data["operator"],
            value=data["value"],
            params=data.get("params"),
            path=data.get("path"),
            priority=data.get("priority"),
        )

    def is_boolean_operator(self) -> bool:
        return self.boolean_operator is not None

    def to_dict(self, trace: "EvaluationTrace | None" = None) -> dict[str, Any]:
        """Render the condition back to its definition shape.

        Args:
            trace: When given, each evaluated node is annotated with ``result``
                and leaves whose fact resolved with ``factResult``

        Returns:
            Definition dictionary
        """
        data: dict[str, Any] = {}
        if self.priority is not None:
            data["priority"] = self.priority
        if self.is_boolean_operator():
            data[self.boolean_operator.value] = [
                child.to_dict(trace) for child in self.children
            ]
        else:
            data["fact"] = self.fact
            data["operator"] = self.operator
            data["value"] = self.value
            if self.params is not None:
                data["params"] = self.params
            if self.path is not None:
                data["path"] = self.path

        entry = trace.get(self) if trace is not None else None
        if entry is not None:
            if entry.fact_resolved:
                data["factResult"] = entry.fact_result
            data["result"] = entry.result
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    async def _resolve_value(self, almanac: "Almanac") -> Any:
        """Resolve the expected value, following ``{"fact": ...}`` references."""
        if isinstance(self.value, dict) and "fact" in self.value:
            return await almanac.fact_value(
                self.value["fact"], self.value.get("params"), self.value.get("path")
            )
        return self.value

    async def evaluate(
        self, almanac: "Almanac", operators: "OperatorRegistry"
    ) -> ConditionEvaluation:
        """Compare the fact value against the expected value.

        Args:
            almanac: Almanac used to resolve fact values
            operators: Registry holding the comparison operator

        Returns:
            ConditionEvaluation with the boolean result and both operands

        Raises:
            ValidationError: If called on a boolean node
            UnknownOperatorError: If the operator is not registered
            UndefinedFactError: If a referenced fact is not defined
        """
        if self.is_boolean_operator():
            raise ValidationError("Condition: evaluate() cannot be called on a boolean node")

        op = operators.get(self.operator)
        right = await self._resolve_value(almanac)
        left = await almanac.fact_value(self.fact, self.params, self.path)

        result = op.evaluate(left, right)
        if inspect.isawaitable(result):
            result = await result
        return ConditionEvaluation(
            result=bool(result),
            left_hand_side_value=left,
            right_hand_side_value=right,
        )

    def __repr__(self) -> str:
        if self.is_boolean_operator():
            return f"Condition({self.boolean_operator.value}, {len(self.children)} children)"
        return f"Condition({self.fact} {self.operator} {self.value!r})"
