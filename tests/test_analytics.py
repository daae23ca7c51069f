from datetime import datetime, timedelta, timezone

from filedispatch.api.schemas.logs import LogEntry, LogStatus
from filedispatch.services.analytics import (
    THROUGHPUT_WINDOW,
    parse_timestamp,
    rule_health,
    status_counts,
    summarize,
    throughput,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
HOUR = timedelta(hours=1)


def _entry(created_at, status="success", rule_id="r1", action_type="move"):
    return {
        "ruleId": rule_id,
        "status": status,
        "actionType": action_type,
        "createdAt": created_at.isoformat() if isinstance(created_at, datetime) else created_at,
    }


def test_parse_timestamp_formats():
    assert parse_timestamp("2024-06-01T12:00:00Z") == NOW
    assert parse_timestamp("2024-06-01T14:00:00+02:00") == NOW
    assert parse_timestamp("2024-06-01 12:00:00") == NOW
    assert parse_timestamp("2024-06-01T12:00:00.000000") == NOW
    assert parse_timestamp(NOW) == NOW
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(None) is None


def test_status_counts_include_deletions():
    entries = [
        _entry(NOW),
        _entry(NOW, status="error"),
        _entry(NOW, status="skipped"),
        _entry(NOW, action_type="delete"),
        _entry(NOW, status="error", action_type="deletePermanently"),
    ]

    counts = status_counts(entries)

    assert (counts.success, counts.error, counts.skipped, counts.deleted) == (2, 2, 1, 2)


def test_empty_log_has_flat_histogram():
    histogram = throughput([])

    assert histogram.counts == [0] * THROUGHPUT_WINDOW
    assert histogram.heights == [0] * THROUGHPUT_WINDOW
    assert histogram.recent == 0
    assert histogram.anchored_at is None


def test_histogram_is_anchored_on_latest_entry():
    histogram = throughput([_entry(NOW), _entry(NOW - 30 * timedelta(minutes=1)), _entry(NOW - 2.5 * HOUR)])

    assert histogram.anchored_at == NOW
    assert histogram.counts[-1] == 2
    assert histogram.counts[-3] == 1
    assert histogram.heights[-1] == 100
    assert histogram.heights[-3] == 50
    assert histogram.recent == 3


def test_entry_exactly_one_window_old_lands_in_first_bucket():
    histogram = throughput([_entry(NOW), _entry(NOW - 10 * HOUR)])

    assert histogram.counts[0] == 1
    assert histogram.counts[-1] == 1


def test_entries_older_than_window_are_excluded():
    histogram = throughput([_entry(NOW), _entry(NOW - 10 * HOUR - timedelta(seconds=1))])

    assert sum(histogram.counts) == 1


def test_unparseable_timestamps_are_skipped():
    histogram = throughput([_entry(NOW), _entry("not a date"), {"status": "success"}])

    assert histogram.recent == 1


def test_heights_round_half_up():
    entries = [_entry(NOW - 2 * HOUR)] + [_entry(NOW)] * 8
    entries += [_entry(NOW - 5 * HOUR)] * 3

    histogram = throughput(entries)

    # 1/8 -> 12.5, 3/8 -> 37.5
    assert histogram.heights[-3] == 13
    assert histogram.heights[-6] == 38


def test_rule_health_uses_a_rolling_day_from_now():
    entries = [
        _entry(NOW - 23 * HOUR, status="error"),
        _entry(NOW - 25 * HOUR, status="error"),
        _entry(NOW - HOUR),
        _entry(NOW - 2 * HOUR, rule_id="r2"),
        _entry(NOW, rule_id=None),
    ]

    health = rule_health(entries, now=NOW)

    assert set(health) == {"r1", "r2"}
    assert health["r1"].recent_events == 2
    assert health["r1"].recent_errors == 1
    assert health["r1"].last_activity_at == NOW - HOUR
    assert health["r2"].recent_events == 1


def test_rule_health_counts_nothing_recent_for_stale_rules():
    health = rule_health([_entry(NOW - 48 * HOUR)], now=NOW)

    assert health["r1"].recent_events == 0
    assert health["r1"].last_activity_at == NOW - 48 * HOUR


def test_summarize_accepts_log_entries():
    entries = [
        LogEntry(rule_id="r1", file_path="/a", action_type="move", status=LogStatus.SUCCESS, created_at=NOW),
        LogEntry(rule_id="r1", file_path="/b", action_type="delete", status=LogStatus.ERROR,
                 created_at=NOW - HOUR),
    ]

    summary = summarize(entries, now=NOW)

    assert summary.total == 2
    assert summary.status_counts.deleted == 1
    assert summary.status_counts.error == 1
    assert summary.throughput.counts[-2:] == [1, 1]
    assert summary.rule_health["r1"].recent_errors == 1
    assert summary.generated_at == NOW
