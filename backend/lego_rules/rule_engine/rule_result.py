"""Outcome of a single rule evaluation."""

import json
from typing import Any

from lego_rules.rule_engine.condition import Condition
from lego_rules.rule_engine.errors import RuleEngineError
from lego_rules.rule_engine.models import EvaluationTrace, Event


class RuleResult:
    """Report of one rule evaluation.

    Holds the rule's condition tree together with the trace recorded while
    evaluating it. The boolean outcome is set exactly once.
    """

    def __init__(
        self,
        conditions: Condition,
        event: Event,
        priority: int,
        trace: EvaluationTrace | None = None,
        name: str | None = None,
    ):
        self.conditions = conditions
        self.event = event
        self.priority = priority
        self.trace = trace if trace is not None else EvaluationTrace()
        self.name = name
        self._result: bool | None = None

    @property
    def result(self) -> bool | None:
        return self._result

    def set_result(self, result: bool) -> None:
        if self._result is not None:
            raise RuleEngineError("RuleResult: result has already been set")
        self._result = result

    def condition_result(self, condition: Condition) -> bool | None:
        return self.trace.result_of(condition)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "conditions": self.conditions.to_dict(self.trace),
            "event": self.event.to_dict(),
            "priority": self.priority,
            "result": self._result,
        }
        if self.name is not None:
            data["name"] = self.name
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)
