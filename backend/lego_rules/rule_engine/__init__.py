"""Rule evaluation package.

Rules hold a tree of ``all``/``any`` boolean nodes over fact comparisons and
are evaluated asynchronously against an Almanac. It supports:

- Priority tiers: sibling conditions grouped by priority, highest first
- Concurrent evaluation of conditions sharing a tier
- Short-circuiting of lower tiers once an ``all``/``any`` is decided
- Optional tolerance of undefined facts
- Success/failure listeners
"""

# Errors
from lego_rules.rule_engine.errors import (
    RuleEngineError,
    UndefinedFactError,
    UnknownOperatorError,
    ValidationError,
)

# Data models
from lego_rules.rule_engine.models import (
    BooleanOperator,
    ConditionEvaluation,
    ConditionTrace,
    EvaluationTrace,
    Event,
)

# Facts and almanac
from lego_rules.rule_engine.fact import Fact
from lego_rules.rule_engine.almanac import Almanac

# Operators
from lego_rules.rule_engine.operators import Operator, OperatorRegistry

# Conditions, engine and rules
from lego_rules.rule_engine.condition import Condition
from lego_rules.rule_engine.engine import Engine
from lego_rules.rule_engine.event_emitter import RuleEventEmitter
from lego_rules.rule_engine.rule import Rule
from lego_rules.rule_engine.rule_result import RuleResult

__all__ = [
    # Errors
    "RuleEngineError",
    "UndefinedFactError",
    "UnknownOperatorError",
    "ValidationError",
    # Data models
    "BooleanOperator",
    "ConditionEvaluation",
    "ConditionTrace",
    "EvaluationTrace",
    "Event",
    # Facts and almanac
    "Fact",
    "Almanac",
    # Operators
    "Operator",
    "OperatorRegistry",
    # Conditions, engine and rules
    "Condition",
    "Engine",
    "RuleEventEmitter",
    "Rule",
    "RuleResult",
]
