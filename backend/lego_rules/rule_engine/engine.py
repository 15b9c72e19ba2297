"""Engine: fact definitions, operator registry and evaluation options."""

import logging
from typing import TYPE_CHECKING, Any

from lego_rules.core.config import settings
from lego_rules.rule_engine.almanac import Almanac
from lego_rules.rule_engine.errors import ValidationError
from lego_rules.rule_engine.fact import Fact
from lego_rules.rule_engine.operators import Operator, OperatorCallback, OperatorRegistry

if TYPE_CHECKING:
    from lego_rules.rule_engine.rule import Rule

logger = logging.getLogger(__name__)


class Engine:
    """Registry consulted by rules during evaluation.

    The engine owns fact definitions (with their default priorities), the
    comparison operator registry, and the ``allow_undefined_facts`` option.
    """

    def __init__(
        self,
        allow_undefined_facts: bool | None = None,
        operators: OperatorRegistry | None = None,
    ):
        """Initialize the engine.

        Args:
            allow_undefined_facts: Treat conditions on undefined facts as
                false instead of failing; defaults to the configured setting
            operators: Operator registry; defaults to the builtin operators
        """
        if allow_undefined_facts is None:
            allow_undefined_facts = settings.ALLOW_UNDEFINED_FACTS
        self.allow_undefined_facts = allow_undefined_facts
        self.operators = operators if operators is not None else OperatorRegistry()
        self._facts: dict[str, Fact] = {}
        self._rules: list["Rule"] = []

    # Facts

    def add_fact(
        self, fact: Fact | str, value_or_method: Any = None, priority: int | None = None
    ) -> Fact:
        """Register a fact definition.

        Args:
            fact: A Fact, or a fact id when ``value_or_method`` is given
            value_or_method: Constant value or callable ``(params, almanac)``
            priority: Fact priority, used for conditions without their own

        Returns:
            The registered Fact
        """
        if not isinstance(fact, Fact):
            fact = Fact(fact, value_or_method, priority)
        logger.debug(f"engine::add_fact {fact.id} (priority {fact.priority})")
        self._facts[fact.id] = fact
        return fact

    def remove_fact(self, fact_id: str) -> bool:
        return self._facts.pop(fact_id, None) is not None

    def get_fact(self, fact_id: str) -> Fact | None:
        return self._facts.get(fact_id)

    def lookup_fact_priority(self, fact_id: str | None) -> int:
        """Return the priority of a fact, or the default priority if unknown."""
        fact = self._facts.get(fact_id) if fact_id else None
        return fact.priority if fact else settings.DEFAULT_PRIORITY

    # Operators

    def add_operator(
        self, operator: Operator | str, callback: OperatorCallback | None = None
    ) -> Operator:
        return self.operators.add(operator, callback)

    def remove_operator(self, name: str) -> bool:
        return self.operators.remove(name)

    def lookup_operator(self, name: str) -> Operator:
        return self.operators.get(name)

    # Rules

    def add_rule(self, rule: "Rule") -> "Rule":
        """Attach a rule to this engine.

        The engine only serves as the rule's fact and operator registry; it
        does not schedule rule runs.
        """
        if rule.conditions is None:
            raise ValidationError("Engine: add_rule() requires a rule with conditions")
        rule.set_engine(self)
        self._rules.append(rule)
        return rule

    def remove_rule(self, rule: "Rule") -> bool:
        try:
            self._rules.remove(rule)
        except ValueError:
            return False
        return True

    @property
    def rules(self) -> list["Rule"]:
        return list(self._rules)

    def create_almanac(self, runtime_facts: dict[str, Any] | None = None) -> Almanac:
        """Create an almanac over this engine's facts plus runtime facts."""
        return Almanac(self._facts, runtime_facts)
