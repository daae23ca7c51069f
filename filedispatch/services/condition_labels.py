"""Libellés lisibles des conditions, indépendants de la locale."""
from typing import Optional, assert_never

from filedispatch.api.schemas.conditions import (
    BetweenComparison,
    ComparisonOperator,
    Condition,
    ContentsCondition,
    CurrentTimeCondition,
    DateAddedCondition,
    DateBetween,
    DateCreatedCondition,
    DateInTheLast,
    DateIs,
    DateIsAfter,
    DateIsBefore,
    DateLastMatchedCondition,
    DateModifiedCondition,
    DateNotInTheLast,
    DateOperator,
    EqualsComparison,
    ExtensionCondition,
    FullNameCondition,
    GreaterOrEqualComparison,
    GreaterThanComparison,
    KindCondition,
    LessOrEqualComparison,
    LessThanComparison,
    NameCondition,
    NestedCondition,
    NotEqualsComparison,
    ShellScriptCondition,
    SizeCondition,
    StringOperator,
    TimeBetween,
    TimeIs,
    TimeIsAfter,
    TimeIsBefore,
    TimeOperator,
)

PLACEHOLDER = "…"

STRING_OPERATOR_LABELS = {
    StringOperator.IS: "is",
    StringOperator.IS_NOT: "is not",
    StringOperator.CONTAINS: "contains",
    StringOperator.DOES_NOT_CONTAIN: "does not contain",
    StringOperator.STARTS_WITH: "starts with",
    StringOperator.ENDS_WITH: "ends with",
    StringOperator.MATCHES: "matches",
    StringOperator.DOES_NOT_MATCH: "does not match",
}


def describe(condition: Condition) -> str:
    """Rend une condition sous forme de phrase courte et déterministe"""
    if isinstance(condition, NameCondition):
        return f"Name {_string_operator(condition.operator)} {_quoted(condition.value)}"
    if isinstance(condition, ExtensionCondition):
        return f"Extension {_string_operator(condition.operator)} {_quoted(condition.value)}"
    if isinstance(condition, FullNameCondition):
        return f"Full name {_string_operator(condition.operator)} {_quoted(condition.value)}"
    if isinstance(condition, ContentsCondition):
        return f"Contents {_string_operator(condition.operator)} {_quoted(condition.value)}"
    if isinstance(condition, SizeCondition):
        return _size_label(condition)
    if isinstance(condition, DateCreatedCondition):
        return f"Date created {_date_operator(condition.operator)}"
    if isinstance(condition, DateModifiedCondition):
        return f"Date modified {_date_operator(condition.operator)}"
    if isinstance(condition, DateAddedCondition):
        return f"Date added {_date_operator(condition.operator)}"
    if isinstance(condition, DateLastMatchedCondition):
        return f"Date last matched {_date_operator(condition.operator)}"
    if isinstance(condition, CurrentTimeCondition):
        return f"Current time {_time_operator(condition.operator)}"
    if isinstance(condition, KindCondition):
        return f"{'Not ' if condition.negate else ''}{condition.kind.value}"
    if isinstance(condition, ShellScriptCondition):
        return "Shell script"
    if isinstance(condition, NestedCondition):
        match_type = condition.match_type.value.upper()
        count = len(condition.conditions)
        label = (condition.label or "").strip()
        if label:
            return f'Group "{label}" ({match_type}, {count})'
        return f"Nested {match_type} ({count})"
    assert_never(condition)


def _quoted(value: str) -> str:
    return f'"{value}"' if value else PLACEHOLDER


def _or_placeholder(value: Optional[object]) -> str:
    return PLACEHOLDER if value is None else str(value)


def _string_operator(operator: StringOperator) -> str:
    return STRING_OPERATOR_LABELS[operator]


def _size_label(condition: SizeCondition) -> str:
    operator: ComparisonOperator = condition.operator
    unit = condition.unit.value
    if isinstance(operator, BetweenComparison):
        return f"Size between {operator.min} and {operator.max} {unit}"
    if isinstance(operator, EqualsComparison):
        label = "equals"
    elif isinstance(operator, NotEqualsComparison):
        label = "not equals"
    elif isinstance(operator, GreaterThanComparison):
        label = "greater than"
    elif isinstance(operator, LessThanComparison):
        label = "less than"
    elif isinstance(operator, GreaterOrEqualComparison):
        label = "at least"
    elif isinstance(operator, LessOrEqualComparison):
        label = "at most"
    else:
        assert_never(operator)
    return f"Size {label} {_or_placeholder(condition.value)} {unit}"


def _date_operator(operator: DateOperator) -> str:
    if isinstance(operator, DateIs):
        return f"is {operator.date.isoformat()}"
    if isinstance(operator, DateIsBefore):
        return f"before {operator.date.isoformat()}"
    if isinstance(operator, DateIsAfter):
        return f"after {operator.date.isoformat()}"
    if isinstance(operator, DateInTheLast):
        return f"in the last {operator.amount} {operator.unit.value}"
    if isinstance(operator, DateNotInTheLast):
        return f"not in the last {operator.amount} {operator.unit.value}"
    if isinstance(operator, DateBetween):
        return f"between {operator.start.isoformat()} and {operator.end.isoformat()}"
    assert_never(operator)


def _time_operator(operator: TimeOperator) -> str:
    if isinstance(operator, TimeIs):
        return f"is {operator.time.isoformat()}"
    if isinstance(operator, TimeIsBefore):
        return f"before {operator.time.isoformat()}"
    if isinstance(operator, TimeIsAfter):
        return f"after {operator.time.isoformat()}"
    if isinstance(operator, TimeBetween):
        return f"between {operator.start.isoformat()} and {operator.end.isoformat()}"
    assert_never(operator)
