"""Rule: a prioritized condition tree evaluated against an almanac."""

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

from lego_rules.core.config import settings
from lego_rules.rule_engine.condition import Condition
from lego_rules.rule_engine.errors import RuleEngineError, UndefinedFactError, ValidationError
from lego_rules.rule_engine.event_emitter import Listener, RuleEventEmitter
from lego_rules.rule_engine.models import BooleanOperator, EvaluationTrace, Event
from lego_rules.rule_engine.rule_result import RuleResult

if TYPE_CHECKING:
    from lego_rules.rule_engine.almanac import Almanac
    from lego_rules.rule_engine.engine import Engine

logger = logging.getLogger(__name__)

SUCCESS = "success"
FAILURE = "failure"


class Rule:
    """A priority, a condition tree and an event to report when it passes.

    Conditions are evaluated in priority tiers: siblings sharing a priority
    run concurrently, tiers run one after another from the highest priority
    down, and the remaining tiers are skipped once the enclosing ``all`` or
    ``any`` is decided.
    """

    def __init__(self, options: str | dict[str, Any] | None = None):
        """Initialize the rule.

        Args:
            options: Rule definition, or JSON text parsed into one:
                ``conditions`` - root boolean node (``{"all": [...]}`` or ``{"any": [...]}``)
                ``event`` - ``{"type": ..., "params"?: ...}`` reported with the outcome
                ``priority`` - integer >= 1, higher runs sooner
                ``name`` - optional identifier
                ``on_success``/``on_failure`` (or ``onSuccess``/``onFailure``) - listeners

        Raises:
            ValidationError: If the definition is invalid
        """
        if isinstance(options, (str, bytes)):
            try:
                options = json.loads(options)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Rule: invalid JSON definition: {e}") from e
        options = options or {}
        if not isinstance(options, dict):
            raise ValidationError("Rule: definition must be an object")

        self.name: str | None = options.get("name")
        self.priority: int = settings.DEFAULT_PRIORITY
        self.conditions: Condition | None = None
        self.event: Event | None = None
        self.engine: "Engine | None" = None
        self._emitter = RuleEventEmitter()

        on_success = options.get("on_success") or options.get("onSuccess")
        if on_success:
            self.on(SUCCESS, on_success)
        on_failure = options.get("on_failure") or options.get("onFailure")
        if on_failure:
            self.on(FAILURE, on_failure)

        event = options.get("event")
        self.set_event({"type": settings.DEFAULT_EVENT_TYPE} if event is None else event)

        priority = options.get("priority")
        self.set_priority(settings.DEFAULT_PRIORITY if priority is None else priority)

        if options.get("conditions") is not None:
            self.set_conditions(options["conditions"])

    # Configuration

    def set_priority(self, priority: int | str) -> "Rule":
        """Set the rule priority.

        Args:
            priority: Integer (or integer string) >= 1

        Raises:
            ValidationError: If the priority is not a positive integer
        """
        try:
            priority = int(priority)
        except (TypeError, ValueError):
            raise ValidationError(f"Rule: invalid priority {priority!r}") from None
        if priority <= 0:
            raise ValidationError("Priority must be greater than zero")
        self.priority = priority
        return self

    def set_conditions(self, conditions: dict[str, Any]) -> "Rule":
        """Set the condition tree.

        Args:
            conditions: Root definition; must hold exactly one of ``all``/``any``

        Raises:
            ValidationError: If the root is not a single boolean operator
        """
        if not isinstance(conditions, dict) or ("all" in conditions) == ("any" in conditions):
            raise ValidationError(
                '"conditions" root must contain a single instance of "all" or "any"'
            )
        self.conditions = Condition.from_dict(conditions)
        return self

    def set_event(self, event: Event | dict[str, Any] | None) -> "Rule":
        """Set the event reported with the rule outcome.

        Only ``type`` and ``params`` are kept.

        Raises:
            ValidationError: If the event is missing or has no ``type``
        """
        if event is None:
            raise ValidationError("Rule: set_event() requires event object")
        if isinstance(event, dict):
            if "type" not in event:
                raise ValidationError('Rule: set_event() requires event object with "type" property')
            event = Event(type=event["type"], params=event.get("params"))
        elif not isinstance(event, Event):
            raise ValidationError("Rule: set_event() requires event object")
        if not isinstance(event.type, str) or not event.type:
            raise ValidationError('Rule: event "type" must be a non-empty string')
        self.event = event
        return self

    def set_engine(self, engine: "Engine") -> "Rule":
        self.engine = engine
        return self

    # Listeners

    def on(self, name: str, listener: Listener) -> "Rule":
        """Register a listener for ``success`` or ``failure``.

        Listeners are called with ``(event, almanac, rule_result)``.
        """
        if name not in (SUCCESS, FAILURE):
            raise ValidationError(f"Rule: unknown event '{name}'")
        self._emitter.on(name, listener)
        return self

    def off(self, name: str, listener: Listener) -> "Rule":
        self._emitter.off(name, listener)
        return self

    @property
    def emitter(self) -> RuleEventEmitter:
        return self._emitter

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "conditions": self.conditions.to_dict() if self.conditions else None,
            "priority": self.priority,
            "event": self.event.to_dict() if self.event else None,
        }
        if self.name is not None:
            data["name"] = self.name
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    # Evaluation

    def _effective_priority(self, condition: Condition) -> int:
        if condition.priority is not None:
            return condition.priority
        if condition.is_boolean_operator() or self.engine is None:
            return settings.DEFAULT_PRIORITY
        return self.engine.lookup_fact_priority(condition.fact)

    def prioritize_conditions(self, conditions: list[Condition]) -> list[list[Condition]]:
        """Group conditions into priority tiers.

        A condition's priority is its own explicit priority, else its fact's
        priority from the engine, else the default. Boolean nodes have no fact
        and fall back to the default directly.

        Args:
            conditions: Sibling conditions

        Returns:
            Tiers ordered from highest to lowest priority; each tier keeps the
            input order of its conditions
        """
        tiers: dict[int, list[Condition]] = {}
        for condition in conditions:
            tiers.setdefault(self._effective_priority(condition), []).append(condition)
        return [tiers[priority] for priority in sorted(tiers, reverse=True)]

    async def evaluate(self, almanac: "Almanac") -> RuleResult:
        """Evaluate the rule against an almanac.

        Success or failure listeners are notified once the outcome is known.
        Errors other than tolerated undefined facts abort the evaluation and
        no listener is notified.

        Args:
            almanac: Fact store for this run

        Returns:
            RuleResult carrying the outcome and the evaluation trace

        Raises:
            RuleEngineError: If the rule has no conditions or no engine
        """
        if self.conditions is None:
            raise RuleEngineError("Rule: evaluate() requires the rule to have conditions")
        if self.engine is None:
            raise RuleEngineError("Rule: evaluate() requires an engine; call set_engine() first")

        trace = EvaluationTrace()
        rule_result = RuleResult(self.conditions, self.event, self.priority, trace, self.name)
        passes = await self._evaluate_condition(self.conditions, almanac, trace)
        return self._process_result(rule_result, passes, almanac)

    async def _evaluate_condition(
        self, condition: Condition, almanac: "Almanac", trace: EvaluationTrace
    ) -> bool:
        if condition.is_boolean_operator():
            passes = await self._prioritize_and_run(
                list(condition.children), condition.boolean_operator, almanac, trace
            )
            trace.record(condition, passes)
            return passes

        try:
            evaluation = await condition.evaluate(almanac, self.engine.operators)
        except UndefinedFactError as e:
            # conditions on undefined facts are falsey when the engine allows it
            if not self.engine.allow_undefined_facts:
                raise
            logger.debug(f"rule::evaluate_condition {e}; treating condition as false")
            trace.record(condition, False)
            return False

        logger.debug(f"rule::evaluate_condition {condition!r} -> {evaluation.result}")
        trace.record(
            condition, evaluation.result, fact_result=evaluation.left_hand_side_value
        )
        return evaluation.result

    async def _evaluate_tier(
        self,
        tier: list[Condition],
        operator: BooleanOperator,
        almanac: "Almanac",
        trace: EvaluationTrace,
    ) -> bool:
        """Evaluate one tier concurrently and aggregate it under ``operator``.

        Every member runs to completion before the first failure, if any, is
        raised.
        """
        outcomes = await asyncio.gather(
            *(self._evaluate_condition(c, almanac, trace) for c in tier),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        logger.debug(f"rule::evaluate_tier results {outcomes}")
        return operator.aggregate(outcomes)

    async def _prioritize_and_run(
        self,
        conditions: list[Condition],
        operator: BooleanOperator,
        almanac: "Almanac",
        trace: EvaluationTrace,
    ) -> bool:
        if not conditions:
            return True

        tiers = self.prioritize_conditions(conditions)
        outcome: bool | None = None
        for index, tier in enumerate(tiers):
            if operator.is_decided(outcome):
                logger.debug(
                    f"rule::prioritize_and_run {operator.value} decided {outcome}; "
                    f"skipping {len(tiers) - index} remaining tiers"
                )
                break
            outcome = await self._evaluate_tier(tier, operator, almanac, trace)
        return outcome

    def _process_result(
        self, rule_result: RuleResult, passes: bool, almanac: "Almanac"
    ) -> RuleResult:
        rule_result.set_result(passes)
        logger.info(f"Rule {self.name or self.event.type} evaluated {passes}")
        self._emitter.emit(
            SUCCESS if passes else FAILURE, rule_result.event, almanac, rule_result
        )
        return rule_result

    def __repr__(self) -> str:
        return f"Rule(name={self.name!r}, priority={self.priority}, event={self.event!r})"
