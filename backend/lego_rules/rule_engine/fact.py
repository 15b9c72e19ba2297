"""Fact definitions resolved by an Almanac."""

import inspect
from typing import TYPE_CHECKING, Any

from lego_rules.core.config import settings
from lego_rules.rule_engine.errors import ValidationError

if TYPE_CHECKING:
    from lego_rules.rule_engine.almanac import Almanac


class Fact:
    """A named value, either constant or computed on demand.

    A dynamic fact is any callable accepting ``(params, almanac)``; it may be
    a coroutine function.
    """

    def __init__(self, id: str, value_or_method: Any, priority: int | None = None):
        if not id:
            raise ValidationError("Fact: id is required")
        self.id = id
        if priority is None:
            priority = settings.DEFAULT_PRIORITY
        try:
            priority = int(priority)
        except (TypeError, ValueError):
            raise ValidationError(f"Fact '{id}': invalid priority {priority!r}") from None
        if priority <= 0:
            raise ValidationError(f"Fact '{id}': priority must be greater than zero")
        self.priority = priority

        if callable(value_or_method):
            self._method = value_or_method
            self._value = None
        else:
            self._method = None
            self._value = value_or_method

    @property
    def is_constant(self) -> bool:
        return self._method is None

    async def calculate(self, params: dict[str, Any] | None, almanac: "Almanac") -> Any:
        """Compute the fact value.

        Args:
            params: Parameters supplied by the referencing condition
            almanac: Almanac the fact is being resolved in

        Returns:
            The fact value
        """
        if self._method is None:
            return self._value
        value = self._method(params or {}, almanac)
        if inspect.isawaitable(value):
            value = await value
        return value

    def __repr__(self) -> str:
        return f"Fact(id={self.id!r}, priority={self.priority})"
