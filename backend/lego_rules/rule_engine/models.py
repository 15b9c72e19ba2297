"""Shared data models for rule evaluation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class BooleanOperator(Enum):
    """Boolean node kinds.

    Each kind carries its aggregate rule and the value that decides it:
    ``all`` is settled by the first ``False``, ``any`` by the first ``True``.
    """

    ALL = "all"
    ANY = "any"

    @property
    def decisive_value(self) -> bool:
        return self is BooleanOperator.ANY

    def aggregate(self, results: list[bool]) -> bool:
        if self is BooleanOperator.ALL:
            return all(r is True for r in results)
        return any(r is True for r in results)

    def is_decided(self, value: bool | None) -> bool:
        return value is self.decisive_value


@dataclass(frozen=True)
class Event:
    type: str
    params: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        if self.params is not None:
            data["params"] = self.params
        return data


@dataclass
class ConditionEvaluation:
    """Outcome of comparing a single leaf condition."""

    result: bool
    left_hand_side_value: Any = None
    right_hand_side_value: Any = None


@dataclass
class ConditionTrace:
    result: bool
    fact_result: Any = None
    fact_resolved: bool = False


@dataclass
class EvaluationTrace:
    """Per-evaluation record of condition outcomes.

    Entries are keyed by condition identity so the condition tree itself
    stays untouched and can be shared between concurrent evaluations.
    """

    _entries: dict[int, ConditionTrace] = field(default_factory=dict)

    def record(self, condition: Any, result: bool, **fact: Any) -> ConditionTrace:
        """Record the outcome of a condition.

        Args:
            condition: Condition node the outcome belongs to
            result: Boolean outcome of the node
            **fact: ``fact_result=<value>`` for leaves whose fact resolved

        Returns:
            The stored trace entry
        """
        entry = ConditionTrace(result=result)
        if "fact_result" in fact:
            entry.fact_result = fact["fact_result"]
            entry.fact_resolved = True
        self._entries[id(condition)] = entry
        return entry

    def get(self, condition: Any) -> ConditionTrace | None:
        return self._entries.get(id(condition))

    def result_of(self, condition: Any) -> bool | None:
        entry = self.get(condition)
        return entry.result if entry else None

    def fact_result_of(self, condition: Any) -> Any:
        entry = self.get(condition)
        return entry.fact_result if entry else None

    def __contains__(self, condition: Any) -> bool:
        return id(condition) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
