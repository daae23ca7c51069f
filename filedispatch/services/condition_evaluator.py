"""Évaluation d'un arbre de conditions contre les faits d'un fichier.

L'évaluation est pure: l'heure courante et l'exécution des scripts shell sont
fournies par un ``EvaluationContext`` injecté.
"""
import calendar
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from typing import List, Optional, Protocol, Sequence, Union, assert_never

from filedispatch.api.schemas.conditions import (
    MAX_CONDITION_DEPTH,
    BetweenComparison,
    ComparisonOperator,
    Condition,
    ConditionGroup,
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
    FileKind,
    FullNameCondition,
    GreaterOrEqualComparison,
    GreaterThanComparison,
    KindCondition,
    LessOrEqualComparison,
    LessThanComparison,
    MatchType,
    NameCondition,
    NestedCondition,
    NotEqualsComparison,
    ShellScriptCondition,
    SizeCondition,
    SizeUnit,
    StringConditionFields,
    StringOperator,
    TimeBetween,
    TimeIs,
    TimeIsAfter,
    TimeIsBefore,
    TimeOperator,
    TimeUnit,
)
from filedispatch.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

SIZE_MULTIPLIERS = {
    SizeUnit.BYTES: 1,
    SizeUnit.KILOBYTES: 1024,
    SizeUnit.MEGABYTES: 1024 ** 2,
    SizeUnit.GIGABYTES: 1024 ** 3,
}


class ShellRunner(Protocol):
    """Capacité externe: exécute une commande pour un fichier, vrai si elle réussit"""

    def run(self, command: str, path: str) -> bool:
        ...


@dataclass(frozen=True)
class FileFacts:
    """Faits connus sur un fichier au moment de l'évaluation"""
    path: str
    name: str
    extension: str
    full_name: str
    size: int = 0
    kind: FileKind = FileKind.FILE
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    added_at: Optional[datetime] = None
    last_matched_at: Optional[datetime] = None
    contents: Optional[str] = None


@dataclass
class EvaluationContext:
    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    local_time: Optional[time] = None
    shell_runner: Optional[ShellRunner] = None

    def time_of_day(self) -> time:
        if self.local_time is not None:
            return self.local_time
        return datetime.now().time()


@dataclass
class EvaluationResult:
    matched: bool
    condition_results: List[bool]


def evaluate(group: ConditionGroup, facts: FileFacts, context: Optional[EvaluationContext] = None) -> bool:
    """Vrai si le fichier satisfait le groupe racine"""
    context = context or EvaluationContext()
    return _evaluate_group(group.match_type, group.conditions, facts, context, 1)


def evaluate_detailed(
    group: ConditionGroup,
    facts: FileFacts,
    context: Optional[EvaluationContext] = None,
) -> EvaluationResult:
    """Résultat global et résultat de chaque condition de premier niveau (sans court-circuit)"""
    context = context or EvaluationContext()
    results = [_evaluate_condition(condition, facts, context, 1) for condition in group.conditions]
    return EvaluationResult(matched=_combine(group.match_type, results), condition_results=results)


def _combine(match_type: MatchType, results: Sequence[bool]) -> bool:
    if match_type is MatchType.ALL:
        return all(results)
    if match_type is MatchType.ANY:
        return any(results)
    if match_type is MatchType.NONE:
        return not any(results)
    assert_never(match_type)


def _evaluate_group(
    match_type: MatchType,
    conditions: Sequence[Condition],
    facts: FileFacts,
    context: EvaluationContext,
    depth: int,
) -> bool:
    if depth > MAX_CONDITION_DEPTH:
        raise ValidationError(f"Condition groups cannot be nested deeper than {MAX_CONDITION_DEPTH} levels")
    # Générateurs: all/any s'arrêtent au premier résultat décisif
    results = (_evaluate_condition(condition, facts, context, depth) for condition in conditions)
    return _combine(match_type, results)


def _evaluate_condition(condition: Condition, facts: FileFacts, context: EvaluationContext, depth: int) -> bool:
    if isinstance(condition, NameCondition):
        return evaluate_string(facts.name, condition)
    if isinstance(condition, ExtensionCondition):
        return evaluate_string(facts.extension, condition)
    if isinstance(condition, FullNameCondition):
        return evaluate_string(facts.full_name, condition)
    if isinstance(condition, ContentsCondition):
        if not facts.contents:
            return False
        return evaluate_string(facts.contents, condition)
    if isinstance(condition, SizeCondition):
        return evaluate_size(facts.size, condition)
    if isinstance(condition, DateCreatedCondition):
        return _evaluate_optional_date(facts.created_at, condition.operator, context.now)
    if isinstance(condition, DateModifiedCondition):
        return _evaluate_optional_date(facts.modified_at, condition.operator, context.now)
    if isinstance(condition, DateAddedCondition):
        return _evaluate_optional_date(facts.added_at, condition.operator, context.now)
    if isinstance(condition, DateLastMatchedCondition):
        if facts.last_matched_at is None:
            # Jamais traité: équivaut à "il y a très longtemps"
            return isinstance(condition.operator, DateNotInTheLast)
        return evaluate_date(facts.last_matched_at, condition.operator, context.now)
    if isinstance(condition, CurrentTimeCondition):
        return evaluate_time(context.time_of_day(), condition.operator)
    if isinstance(condition, KindCondition):
        matched = facts.kind == condition.kind
        return not matched if condition.negate else matched
    if isinstance(condition, ShellScriptCondition):
        if context.shell_runner is None:
            logger.debug("No shell runner configured, shell condition is false")
            return False
        return context.shell_runner.run(condition.command, facts.path)
    if isinstance(condition, NestedCondition):
        return _evaluate_group(condition.match_type, condition.conditions, facts, context, depth + 1)
    assert_never(condition)


# === Chaînes ===

@lru_cache(maxsize=256)
def _compile(pattern: str, case_sensitive: bool) -> Optional[re.Pattern]:
    try:
        return re.compile(pattern, 0 if case_sensitive else re.IGNORECASE)
    except re.error as e:
        logger.warning(f"Invalid pattern {pattern!r} in condition: {e}")
        return None


def evaluate_string(target: str, condition: StringConditionFields) -> bool:
    operator = condition.operator
    if operator in (StringOperator.MATCHES, StringOperator.DOES_NOT_MATCH):
        regex = _compile(condition.value, condition.case_sensitive)
        if regex is None:
            return False
        found = regex.search(target) is not None
        return found if operator is StringOperator.MATCHES else not found

    value = condition.value
    if not condition.case_sensitive:
        target = target.casefold()
        value = value.casefold()

    if operator is StringOperator.IS:
        return target == value
    if operator is StringOperator.IS_NOT:
        return target != value
    if operator is StringOperator.CONTAINS:
        return value in target
    if operator is StringOperator.DOES_NOT_CONTAIN:
        return value not in target
    if operator is StringOperator.STARTS_WITH:
        return target.startswith(value)
    if operator is StringOperator.ENDS_WITH:
        return target.endswith(value)
    raise ValidationError(f"Unsupported string operator: {operator}")


# === Taille ===

def to_bytes(value: int, unit: SizeUnit) -> int:
    return value * SIZE_MULTIPLIERS[unit]


def evaluate_size(size: int, condition: SizeCondition) -> bool:
    operator: ComparisonOperator = condition.operator
    value = to_bytes(condition.value or 0, condition.unit)
    if isinstance(operator, EqualsComparison):
        return size == value
    if isinstance(operator, NotEqualsComparison):
        return size != value
    if isinstance(operator, GreaterThanComparison):
        return size > value
    if isinstance(operator, LessThanComparison):
        return size < value
    if isinstance(operator, GreaterOrEqualComparison):
        return size >= value
    if isinstance(operator, LessOrEqualComparison):
        return size <= value
    if isinstance(operator, BetweenComparison):
        return to_bytes(operator.min, condition.unit) <= size <= to_bytes(operator.max, condition.unit)
    assert_never(operator)


# === Dates ===

def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def subtract_period(now: datetime, amount: int, unit: TimeUnit) -> datetime:
    """Recule `now` de `amount` unités; mois et années suivent le calendrier"""
    if unit is TimeUnit.MINUTES:
        return now - timedelta(minutes=amount)
    if unit is TimeUnit.HOURS:
        return now - timedelta(hours=amount)
    if unit is TimeUnit.DAYS:
        return now - timedelta(days=amount)
    if unit is TimeUnit.WEEKS:
        return now - timedelta(weeks=amount)
    if unit is TimeUnit.MONTHS:
        return _subtract_months(now, amount)
    if unit is TimeUnit.YEARS:
        return _subtract_months(now, amount * 12)
    assert_never(unit)


def _subtract_months(value: datetime, months: int) -> datetime:
    index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    # 31 mars - 1 mois = 28 (ou 29) février
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _evaluate_optional_date(value: Optional[datetime], operator: DateOperator, now: datetime) -> bool:
    if value is None:
        return False
    return evaluate_date(value, operator, now)


def evaluate_date(value: datetime, operator: DateOperator, now: datetime) -> bool:
    value = _as_utc(value)
    day: date = value.date()
    if isinstance(operator, DateIs):
        return day == operator.date
    if isinstance(operator, DateIsBefore):
        return day < operator.date
    if isinstance(operator, DateIsAfter):
        return day > operator.date
    if isinstance(operator, DateBetween):
        return operator.start <= day <= operator.end
    if isinstance(operator, DateInTheLast):
        return value >= subtract_period(_as_utc(now), operator.amount, operator.unit)
    if isinstance(operator, DateNotInTheLast):
        return value < subtract_period(_as_utc(now), operator.amount, operator.unit)
    assert_never(operator)


# === Heure du jour ===

def evaluate_time(now: time, operator: TimeOperator) -> bool:
    now = now.replace(tzinfo=None)
    if isinstance(operator, TimeIs):
        return now == operator.time
    if isinstance(operator, TimeIsBefore):
        return now < operator.time
    if isinstance(operator, TimeIsAfter):
        return now > operator.time
    if isinstance(operator, TimeBetween):
        if operator.start <= operator.end:
            return operator.start <= now <= operator.end
        # Plage qui passe minuit (22:00 -> 06:00)
        return now >= operator.start or now <= operator.end
    assert_never(operator)


def uses_condition(group: Union[ConditionGroup, NestedCondition], condition_type: str) -> bool:
    """Vrai si l'arbre contient au moins une condition du type donné"""
    stack: List[Union[ConditionGroup, NestedCondition]] = [group]
    while stack:
        current = stack.pop()
        for condition in current.conditions:
            if condition.type == condition_type:
                return True
            if isinstance(condition, NestedCondition):
                stack.append(condition)
    return False
