"""Fact store consulted while evaluating rule conditions."""

import logging
from typing import Any

from lego_rules.rule_engine.errors import UndefinedFactError
from lego_rules.rule_engine.fact import Fact

logger = logging.getLogger(__name__)


def resolve_path(value: Any, path: str) -> Any:
    """Resolve a dot-separated path into a fact value.

    Paths may start with ``$.`` or ``.``. Mapping keys and integer list
    indexes are supported.

    Args:
        value: Root value
        path: Dot-separated path, e.g. ``"$.address.city"``

    Returns:
        Resolved value or None if any segment is missing
    """
    path = path.removeprefix("$").lstrip(".")
    if not path:
        return value

    obj = value
    for part in path.split("."):
        if isinstance(obj, dict):
            if part not in obj:
                return None
            obj = obj[part]
        elif isinstance(obj, (list, tuple)) and part.lstrip("-").isdigit():
            index = int(part)
            if not -len(obj) <= index < len(obj):
                return None
            obj = obj[index]
        else:
            return None
    return obj


class Almanac:
    """Resolves fact values for a single evaluation run.

    The almanac combines fact definitions (usually those registered on an
    Engine) with runtime facts supplied by the caller. Runtime facts take
    precedence over definitions with the same id.
    """

    def __init__(
        self,
        facts: dict[str, Fact] | None = None,
        runtime_facts: dict[str, Any] | None = None,
    ):
        """Initialize the almanac.

        Args:
            facts: Fact definitions keyed by id
            runtime_facts: Plain values registered as constant facts
        """
        self._facts: dict[str, Fact] = dict(facts or {})
        for fact_id, value in (runtime_facts or {}).items():
            self.add_runtime_fact(fact_id, value)

    def add_runtime_fact(self, fact_id: str, value: Any) -> None:
        self._facts[fact_id] = Fact(fact_id, lambda params, almanac: value)

    def add_fact(self, fact: Fact) -> None:
        self._facts[fact.id] = fact

    def has_fact(self, fact_id: str) -> bool:
        return fact_id in self._facts

    async def fact_value(
        self,
        fact_id: str,
        params: dict[str, Any] | None = None,
        path: str | None = None,
    ) -> Any:
        """Resolve the value of a fact.

        Args:
            fact_id: Fact name
            params: Parameters passed to dynamic facts
            path: Optional path into the resolved value

        Returns:
            The fact value, or the value found at ``path``

        Raises:
            UndefinedFactError: If no fact is registered under ``fact_id``
        """
        fact = self._facts.get(fact_id)
        if fact is None:
            raise UndefinedFactError(fact_id)

        value = await fact.calculate(params, self)
        if path:
            value = resolve_path(value, path)
        logger.debug(f"almanac::fact_value {fact_id} -> {value!r}")
        return value
