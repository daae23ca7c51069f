from datetime import date, datetime, time, timedelta, timezone

import pydantic
import pytest

from filedispatch.api.schemas.conditions import (
    BetweenComparison,
    ConditionGroup,
    ContentsCondition,
    CurrentTimeCondition,
    DateBetween,
    DateCreatedCondition,
    DateInTheLast,
    DateLastMatchedCondition,
    DateNotInTheLast,
    EqualsComparison,
    FileKind,
    GreaterThanComparison,
    KindCondition,
    MatchType,
    NameCondition,
    NestedCondition,
    ShellScriptCondition,
    SizeCondition,
    SizeUnit,
    StringOperator,
    TimeBetween,
    TimeUnit,
)
from filedispatch.core.exceptions import ValidationError
from filedispatch.services.condition_evaluator import (
    EvaluationContext,
    FileFacts,
    evaluate,
    evaluate_detailed,
    subtract_period,
)

NOW = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)
MB = 1024 * 1024


class RecordingRunner:
    def __init__(self, result=True):
        self.result = result
        self.calls = []

    def run(self, command, path):
        self.calls.append((command, path))
        return self.result


def _facts(**overrides):
    values = dict(
        path="/watched/Report.PDF",
        name="Report",
        extension="pdf",
        full_name="Report.PDF",
        size=2 * MB,
        kind=FileKind.DOCUMENT,
        created_at=NOW - timedelta(days=2),
        modified_at=NOW - timedelta(hours=1),
        added_at=NOW - timedelta(days=2),
    )
    values.update(overrides)
    return FileFacts(**values)


def _ctx(**overrides):
    values = dict(now=NOW, local_time=time(12, 0))
    values.update(overrides)
    return EvaluationContext(**values)


def _group(match_type, *conditions):
    return ConditionGroup(match_type=match_type, conditions=list(conditions))


def _name(operator, value, case_sensitive=True):
    return NameCondition(operator=operator, value=value, case_sensitive=case_sensitive)


def test_empty_groups_follow_vacuous_truth():
    assert evaluate(_group(MatchType.ALL), _facts(), _ctx()) is True
    assert evaluate(_group(MatchType.ANY), _facts(), _ctx()) is False
    assert evaluate(_group(MatchType.NONE), _facts(), _ctx()) is True


def test_match_types_combine_children():
    yes = KindCondition(kind=FileKind.DOCUMENT)
    no = KindCondition(kind=FileKind.IMAGE)

    assert evaluate(_group(MatchType.ALL, yes, no), _facts(), _ctx()) is False
    assert evaluate(_group(MatchType.ANY, no, yes), _facts(), _ctx()) is True
    assert evaluate(_group(MatchType.NONE, no, no), _facts(), _ctx()) is True
    assert evaluate(_group(MatchType.NONE, no, yes), _facts(), _ctx()) is False


def test_none_and_any_stop_at_first_true_child():
    runner = RecordingRunner()
    group_none = _group(MatchType.NONE, KindCondition(kind=FileKind.DOCUMENT), ShellScriptCondition(command="true"))
    group_any = _group(MatchType.ANY, KindCondition(kind=FileKind.DOCUMENT), ShellScriptCondition(command="true"))

    assert evaluate(group_none, _facts(), _ctx(shell_runner=runner)) is False
    assert evaluate(group_any, _facts(), _ctx(shell_runner=runner)) is True
    assert runner.calls == []


def test_all_stops_at_first_false_child():
    runner = RecordingRunner()
    group = _group(MatchType.ALL, KindCondition(kind=FileKind.IMAGE), ShellScriptCondition(command="true"))

    assert evaluate(group, _facts(), _ctx(shell_runner=runner)) is False
    assert runner.calls == []


def test_string_operators_respect_case_flag():
    facts = _facts()

    assert evaluate(_group(MatchType.ALL, _name(StringOperator.IS, "Report")), facts, _ctx()) is True
    assert evaluate(_group(MatchType.ALL, _name(StringOperator.IS, "report")), facts, _ctx()) is False
    assert evaluate(_group(MatchType.ALL, _name(StringOperator.IS, "report", False)), facts, _ctx()) is True
    assert evaluate(_group(MatchType.ALL, _name(StringOperator.IS_NOT, "report", False)), facts, _ctx()) is False
    assert evaluate(_group(MatchType.ALL, _name(StringOperator.CONTAINS, "port")), facts, _ctx()) is True
    assert evaluate(_group(MatchType.ALL, _name(StringOperator.DOES_NOT_CONTAIN, "PORT", False)), facts, _ctx()) is False
    assert evaluate(_group(MatchType.ALL, _name(StringOperator.STARTS_WITH, "Rep")), facts, _ctx()) is True
    assert evaluate(_group(MatchType.ALL, _name(StringOperator.ENDS_WITH, "RT", False)), facts, _ctx()) is True


def test_matches_uses_regex_search():
    facts = _facts(name="invoice-2024-03")

    assert evaluate(_group(MatchType.ALL, _name(StringOperator.MATCHES, r"\d{4}-\d{2}")), facts, _ctx()) is True
    assert evaluate(_group(MatchType.ALL, _name(StringOperator.MATCHES, "^INVOICE", False)), facts, _ctx()) is True
    assert evaluate(_group(MatchType.ALL, _name(StringOperator.MATCHES, "^INVOICE")), facts, _ctx()) is False
    assert evaluate(_group(MatchType.ALL, _name(StringOperator.DOES_NOT_MATCH, "receipt")), facts, _ctx()) is True


def test_invalid_pattern_never_raises():
    group = _group(MatchType.ALL, _name(StringOperator.MATCHES, "(unclosed"))

    assert evaluate(group, _facts(), _ctx()) is False


def test_contents_without_text_is_false():
    condition = ContentsCondition(operator=StringOperator.DOES_NOT_CONTAIN, value="secret")

    assert evaluate(_group(MatchType.ALL, condition), _facts(contents=None), _ctx()) is False
    assert evaluate(_group(MatchType.ALL, condition), _facts(contents="public notes"), _ctx()) is True


def test_size_between_is_inclusive_and_unit_aware():
    condition = SizeCondition(operator=BetweenComparison(min=1, max=5), unit=SizeUnit.MEGABYTES)
    group = _group(MatchType.ALL, condition)

    assert evaluate(group, _facts(size=1 * MB), _ctx()) is True
    assert evaluate(group, _facts(size=5 * MB), _ctx()) is True
    assert evaluate(group, _facts(size=5 * MB + 1), _ctx()) is False
    assert evaluate(group, _facts(size=MB - 1), _ctx()) is False


def test_size_comparisons_normalize_units():
    bigger = SizeCondition(operator=GreaterThanComparison(), value=1, unit=SizeUnit.KILOBYTES)
    empty = SizeCondition(operator=EqualsComparison(), value=None)

    assert evaluate(_group(MatchType.ALL, bigger), _facts(size=1025), _ctx()) is True
    assert evaluate(_group(MatchType.ALL, bigger), _facts(size=1024), _ctx()) is False
    assert evaluate(_group(MatchType.ALL, empty), _facts(size=0), _ctx()) is True


def test_date_between_is_inclusive_on_calendar_days():
    condition = DateCreatedCondition(operator=DateBetween(start=date(2024, 1, 1), end=date(2024, 1, 31)))
    group = _group(MatchType.ALL, condition)

    assert evaluate(group, _facts(created_at=datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)), _ctx()) is True
    assert evaluate(group, _facts(created_at=datetime(2024, 1, 31, 23, 59, tzinfo=timezone.utc)), _ctx()) is True
    assert evaluate(group, _facts(created_at=datetime(2024, 2, 1, 0, 0, tzinfo=timezone.utc)), _ctx()) is False


def test_in_the_last_is_relative_to_context_now():
    recent = DateCreatedCondition(operator=DateInTheLast(amount=3, unit=TimeUnit.DAYS))
    stale = DateCreatedCondition(operator=DateNotInTheLast(amount=3, unit=TimeUnit.DAYS))

    assert evaluate(_group(MatchType.ALL, recent), _facts(), _ctx()) is True
    assert evaluate(_group(MatchType.ALL, stale), _facts(), _ctx()) is False
    assert evaluate(_group(MatchType.ALL, stale), _facts(created_at=NOW - timedelta(days=4)), _ctx()) is True


def test_months_are_subtracted_on_the_calendar():
    assert subtract_period(NOW, 1, TimeUnit.MONTHS) == datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)
    assert subtract_period(NOW, 1, TimeUnit.YEARS) == datetime(2023, 3, 31, 12, 0, tzinfo=timezone.utc)
    assert subtract_period(NOW, 13, TimeUnit.MONTHS) == datetime(2023, 2, 28, 12, 0, tzinfo=timezone.utc)


def test_missing_date_never_matches():
    condition = DateCreatedCondition(operator=DateNotInTheLast(amount=1, unit=TimeUnit.DAYS))

    assert evaluate(_group(MatchType.ALL, condition), _facts(created_at=None), _ctx()) is False


def test_never_matched_file_only_satisfies_not_in_the_last():
    never = DateLastMatchedCondition(operator=DateNotInTheLast(amount=1, unit=TimeUnit.HOURS))
    recently = DateLastMatchedCondition(operator=DateInTheLast(amount=1, unit=TimeUnit.HOURS))

    assert evaluate(_group(MatchType.ALL, never), _facts(), _ctx()) is True
    assert evaluate(_group(MatchType.ALL, recently), _facts(), _ctx()) is False
    assert evaluate(_group(MatchType.ALL, recently), _facts(last_matched_at=NOW - timedelta(minutes=5)), _ctx()) is True


def test_time_between_wraps_past_midnight():
    night = _group(MatchType.ALL, CurrentTimeCondition(operator=TimeBetween(start=time(22, 0), end=time(6, 0))))
    office = _group(MatchType.ALL, CurrentTimeCondition(operator=TimeBetween(start=time(9, 0), end=time(17, 0))))

    assert evaluate(night, _facts(), _ctx(local_time=time(23, 30))) is True
    assert evaluate(night, _facts(), _ctx(local_time=time(6, 0))) is True
    assert evaluate(night, _facts(), _ctx(local_time=time(12, 0))) is False
    assert evaluate(office, _facts(), _ctx(local_time=time(17, 0))) is True
    assert evaluate(office, _facts(), _ctx(local_time=time(17, 0, 1))) is False


def test_kind_negate_applies_after_membership():
    assert evaluate(_group(MatchType.ALL, KindCondition(kind=FileKind.IMAGE, negate=True)), _facts(), _ctx()) is True
    assert evaluate(_group(MatchType.ALL, KindCondition(kind=FileKind.DOCUMENT, negate=True)), _facts(), _ctx()) is False


def test_shell_condition_delegates_to_runner():
    runner = RecordingRunner(result=False)
    group = _group(MatchType.ALL, ShellScriptCondition(command='test -s "$FILE_PATH"'))

    assert evaluate(group, _facts(), _ctx(shell_runner=runner)) is False
    assert runner.calls == [('test -s "$FILE_PATH"', "/watched/Report.PDF")]
    assert evaluate(group, _facts(), _ctx()) is False


def test_nested_label_does_not_affect_result():
    inner = [KindCondition(kind=FileKind.DOCUMENT)]
    labelled = NestedCondition(match_type=MatchType.ANY, conditions=inner, label="Docs")
    plain = NestedCondition(match_type=MatchType.ANY, conditions=inner)

    assert evaluate(_group(MatchType.ALL, labelled), _facts(), _ctx()) is True
    assert evaluate(_group(MatchType.ALL, plain), _facts(), _ctx()) is True


def _nested_payload(levels):
    node = {"type": "nested", "matchType": "all", "conditions": []}
    for _ in range(levels - 1):
        node = {"type": "nested", "matchType": "all", "conditions": [node]}
    return {"matchType": "all", "conditions": [node]}


def test_depth_cap_is_enforced_at_construction():
    group = ConditionGroup.model_validate(_nested_payload(63))
    assert evaluate(group, _facts(), _ctx()) is True

    with pytest.raises(pydantic.ValidationError):
        ConditionGroup.model_validate(_nested_payload(64))


def test_evaluator_rejects_unvalidated_deep_trees():
    node = NestedCondition.model_construct(match_type=MatchType.ALL, conditions=[], label=None)
    for _ in range(70):
        node = NestedCondition.model_construct(match_type=MatchType.ALL, conditions=[node], label=None)
    group = ConditionGroup.model_construct(match_type=MatchType.ALL, conditions=[node])

    with pytest.raises(ValidationError):
        evaluate(group, _facts(), _ctx())


def test_evaluate_detailed_reports_every_top_level_condition():
    group = _group(
        MatchType.ANY,
        KindCondition(kind=FileKind.DOCUMENT),
        KindCondition(kind=FileKind.IMAGE),
        _name(StringOperator.CONTAINS, "Rep"),
    )

    result = evaluate_detailed(group, _facts(), _ctx())

    assert result.matched is True
    assert result.condition_results == [True, False, True]


def test_conditions_accept_camel_case_payloads():
    group = ConditionGroup.model_validate({
        "matchType": "any",
        "conditions": [
            {"type": "extension", "operator": "is", "value": "PDF", "caseSensitive": False},
            {"type": "size", "operator": {"type": "between", "min": 1, "max": 3}, "unit": "megabytes"},
        ],
    })

    assert group.match_type is MatchType.ANY
    assert evaluate(group, _facts(), _ctx()) is True
    assert group.to_payload()["conditions"][0]["caseSensitive"] is False


def test_unknown_condition_type_fails_at_construction():
    with pytest.raises(pydantic.ValidationError):
        ConditionGroup.model_validate({"matchType": "all", "conditions": [{"type": "colour", "value": "red"}]})
