"""Exceptions raised by the rule engine."""


class RuleEngineError(Exception):
    """Base class for all rule engine errors."""


class ValidationError(RuleEngineError, ValueError):
    """Raised when a rule, condition, fact or operator definition is invalid."""


class UndefinedFactError(RuleEngineError):
    """Raised by an Almanac when a referenced fact cannot be resolved."""

    code = "UNDEFINED_FACT"

    def __init__(self, fact_id: str):
        super().__init__(f"Undefined fact: {fact_id}")
        self.fact_id = fact_id


class UnknownOperatorError(RuleEngineError):
    """Raised when a condition names an operator that is not registered."""

    def __init__(self, operator: str):
        super().__init__(f"Unknown operator: {operator}")
        self.operator = operator
