# pm_core/tracking/engine.py
"""
Rule evaluation for parts tracking.

A workstation owns a RuleSet: an ordered list of Rules, each a group of
Conditions joined by AND or OR. A part is tracked at the workstation when any
rule matches.

Everything here is pure. Malformed configuration (unknown operator, unknown
column, missing value) never raises: the affected condition evaluates to
False and a WARNING is logged.

    evaluator = RuleEvaluator()
    matches = evaluator.compile_rule_set(rule_set)
    tracked = [p for p in parts if matches(p)]
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from pm_core.parts.columns import PART_COLUMN_NAMES
from pm_core.tracking.constants import TrackingLogicOperator, TrackingOperator, VALUE_FREE_OPERATORS

logger = logging.getLogger(__name__)

Predicate = Callable[[Mapping[str, Any]], bool]


@dataclass(frozen=True)
class Condition:
    column_name: str
    operator: str
    value: Optional[str] = None
    # client-side ids are replaced on save; equality ignores them
    id: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class Rule:
    logic_operator: str = TrackingLogicOperator.OR.value
    conditions: tuple[Condition, ...] = ()
    id: Any = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "conditions", tuple(self.conditions))


@dataclass(frozen=True)
class RuleSet:
    rules: tuple[Rule, ...] = ()
    workstation_id: Any = field(default=None, compare=False)
    version: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "rules", tuple(self.rules))

    def __bool__(self) -> bool:
        return bool(self.rules)


# ---------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------
def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value).strip().casefold()


# magnitudes outside 1E-100..1E+100 are not compared as numbers
_MAX_EXPONENT = 100


def _as_number(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, (bool, date)):
        return None
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    else:
        raw = str(value).strip().replace(",", ".")
        if not raw:
            return None
        try:
            number = Decimal(raw)
        except InvalidOperation:
            return None
    if not number.is_finite() or abs(number.adjusted()) > _MAX_EXPONENT:
        return None
    return number


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None:
        return None
    raw = str(value).strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        return None


def _compare(actual: Any, expected: Any) -> Optional[int]:
    """
    -1 / 0 / 1, numbers first then ISO dates. None when not comparable.
    """
    left, right = _as_number(actual), _as_number(expected)
    if left is None or right is None:
        left, right = _as_date(actual), _as_date(expected)
        if left is None or right is None:
            return None
    return (left > right) - (left < right)


def _is_empty(actual: Any, _expected: Any = None) -> bool:
    return _text(actual) == ""


def _greater_than(actual: Any, expected: Any) -> bool:
    cmp = _compare(actual, expected)
    return cmp is not None and cmp > 0


def _less_than(actual: Any, expected: Any) -> bool:
    cmp = _compare(actual, expected)
    return cmp is not None and cmp < 0


_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    TrackingOperator.EQUALS.value: lambda a, b: _text(a) == _text(b),
    TrackingOperator.NOT_EQUALS.value: lambda a, b: _text(a) != _text(b),
    TrackingOperator.CONTAINS.value: lambda a, b: _text(b) in _text(a),
    TrackingOperator.NOT_CONTAINS.value: lambda a, b: _text(b) not in _text(a),
    TrackingOperator.STARTS_WITH.value: lambda a, b: _text(a).startswith(_text(b)),
    TrackingOperator.ENDS_WITH.value: lambda a, b: _text(a).endswith(_text(b)),
    TrackingOperator.IS_EMPTY.value: _is_empty,
    TrackingOperator.IS_NOT_EMPTY.value: lambda a, b=None: not _is_empty(a),
    TrackingOperator.GREATER_THAN.value: _greater_than,
    TrackingOperator.LESS_THAN.value: _less_than,
}

_LOGIC_OPERATORS = frozenset(TrackingLogicOperator.values)


def _never(part: Mapping[str, Any]) -> bool:
    return False


def _field(part: Mapping[str, Any], column_name: str) -> Any:
    return part.get(column_name, "") if part is not None else ""


class RuleEvaluator:
    """
    Compiles rule configuration into predicates over part records.

    known_columns limits the fields a condition may reference; None accepts
    any key of the part mapping.
    """

    def __init__(self, known_columns: Optional[Iterable[str]] = None):
        self.known_columns = frozenset(known_columns) if known_columns is not None else None

    # -----------------------
    # Compilation
    # -----------------------
    def compile_condition(self, condition: Condition) -> Predicate:
        operator = condition.operator
        column = condition.column_name
        test = _OPERATORS.get(operator)

        if test is None:
            logger.warning("Unknown tracking operator %r on column %r; condition is false", operator, column)
            return _never

        if self.known_columns is not None and column not in self.known_columns:
            logger.warning("Unknown tracking column %r; condition is false", column)
            return _never

        if operator in VALUE_FREE_OPERATORS:
            return lambda part: test(_field(part, column), None)

        expected = condition.value
        if expected is None or _text(expected) == "":
            logger.warning("Operator %r on column %r has no value; condition is false", operator, column)
            return _never

        return lambda part: test(_field(part, column), expected)

    def compile_rule(self, rule: Rule) -> Predicate:
        logic = str(rule.logic_operator or "").upper()
        if logic not in _LOGIC_OPERATORS:
            logger.warning("Unknown tracking logic operator %r; rule is false", rule.logic_operator)
            return _never

        predicates = [self.compile_condition(c) for c in rule.conditions]
        if not predicates:
            return _never

        if logic == TrackingLogicOperator.AND.value:
            return lambda part: all(p(part) for p in predicates)
        return lambda part: any(p(part) for p in predicates)

    def compile_rule_set(self, rule_set: RuleSet) -> Predicate:
        predicates = [self.compile_rule(r) for r in rule_set.rules]
        if not predicates:
            return _never
        return lambda part: any(p(part) for p in predicates)

    # -----------------------
    # One-shot evaluation
    # -----------------------
    def evaluate_condition(self, condition: Condition, part: Mapping[str, Any]) -> bool:
        return self.compile_condition(condition)(part)

    def evaluate_rule(self, rule: Rule, part: Mapping[str, Any]) -> bool:
        return self.compile_rule(rule)(part)

    def should_track(self, rule_set: RuleSet, part: Mapping[str, Any]) -> bool:
        return self.compile_rule_set(rule_set)(part)

    def matching_rule_indexes(self, rule_set: RuleSet, part: Mapping[str, Any]) -> list[int]:
        """Positions of the rules that match, for previews."""
        return [i for i, r in enumerate(rule_set.rules) if self.compile_rule(r)(part)]


default_evaluator = RuleEvaluator(known_columns=PART_COLUMN_NAMES)


def evaluate_condition(condition: Condition, part: Mapping[str, Any]) -> bool:
    return default_evaluator.evaluate_condition(condition, part)


def evaluate_rule(rule: Rule, part: Mapping[str, Any]) -> bool:
    return default_evaluator.evaluate_rule(rule, part)


def should_track(rule_set: RuleSet, part: Mapping[str, Any]) -> bool:
    return default_evaluator.should_track(rule_set, part)
