from datetime import datetime, timedelta, timezone

import pytest

from filedispatch.api.schemas.actions import ActionDetails
from filedispatch.api.schemas.logs import LogEntry, LogStatus, UndoEntry
from filedispatch.api.schemas.rules import Rule
from filedispatch.core.exceptions import ConflictError, NotFoundError, ValidationError
from filedispatch.services.ledger_service import UNDO_ACTION_TYPE, LedgerService
from filedispatch.services.rule_registry import RuleRegistry

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _log(file_path="/watched/a.txt", action_type="move", created_at=None, status=LogStatus.SUCCESS):
    return LogEntry(
        rule_name="Sort",
        file_path=file_path,
        action_type=action_type,
        action_detail=ActionDetails(source_path=file_path, destination_path="/sorted/a.txt"),
        status=status,
        created_at=created_at,
    )


def _record_move(ledger, original, current, action_type="move"):
    log = ledger.append(_log(file_path=str(original), action_type=action_type))
    return ledger.record_undo(UndoEntry(
        log_id=log.id,
        action_type=action_type,
        original_path=str(original),
        current_path=str(current),
    ))


def test_append_assigns_id_and_timestamp(db_session):
    ledger = LedgerService(db_session)

    entry = ledger.append(_log())

    assert entry.id
    assert entry.created_at is not None
    assert entry.action_detail.destination_path == "/sorted/a.txt"
    assert ledger.list() == [entry]


def test_append_links_an_existing_rule(db_session, folder):
    rule = RuleRegistry(db_session).create(Rule(folder_id=folder.id, name="Sort"))
    ledger = LedgerService(db_session)

    entry = ledger.append(_log().model_copy(update={"rule_id": rule.id}))

    assert entry.rule_id == rule.id


def test_append_with_unknown_rule_is_not_found(db_session):
    ledger = LedgerService(db_session)

    with pytest.raises(NotFoundError):
        ledger.append(_log().model_copy(update={"rule_id": "ghost"}))

    assert ledger.list() == []


def test_list_is_newest_first_with_paging(db_session):
    ledger = LedgerService(db_session)
    for minutes in range(5):
        ledger.append(_log(file_path=f"/f{minutes}", created_at=NOW + timedelta(minutes=minutes)))

    assert [entry.file_path for entry in ledger.list()] == ["/f4", "/f3", "/f2", "/f1", "/f0"]
    assert [entry.file_path for entry in ledger.list(limit=2, offset=1)] == ["/f3", "/f2"]


def test_record_undo_requires_existing_log(db_session):
    with pytest.raises(NotFoundError):
        LedgerService(db_session).record_undo(UndoEntry(
            log_id="missing", action_type="move", original_path="/a", current_path="/b",
        ))


def test_undo_move_restores_file_and_consumes_entry(db_session, tmp_path):
    original = tmp_path / "inbox" / "report.pdf"
    current = tmp_path / "sorted" / "report.pdf"
    current.parent.mkdir()
    current.write_text("data")
    ledger = LedgerService(db_session)
    undo = _record_move(ledger, original, current)

    result = ledger.execute_undo(undo.id)

    assert original.read_text() == "data"
    assert not current.exists()
    assert result.action_type == UNDO_ACTION_TYPE
    assert result.status is LogStatus.SUCCESS
    assert result.action_detail.source_path == str(current)
    assert result.action_detail.destination_path == str(original)
    assert result.action_detail.metadata == {"undo_action": "move"}
    assert ledger.list_undo() == []
    assert ledger.list()[0] == result


def test_undo_copy_removes_the_copy(db_session, tmp_path):
    original = tmp_path / "report.pdf"
    original.write_text("data")
    copy = tmp_path / "backup" / "report.pdf"
    copy.parent.mkdir()
    copy.write_text("data")
    ledger = LedgerService(db_session)
    undo = _record_move(ledger, original, copy, action_type="copy")

    ledger.execute_undo(undo.id)

    assert original.exists()
    assert not copy.exists()


def test_undo_conflict_keeps_entry_and_logs_error(db_session, tmp_path):
    original = tmp_path / "report.pdf"
    original.write_text("new file in the way")
    current = tmp_path / "sorted.pdf"
    current.write_text("data")
    ledger = LedgerService(db_session)
    undo = _record_move(ledger, original, current)

    with pytest.raises(ConflictError):
        ledger.execute_undo(undo.id)

    assert current.read_text() == "data"
    assert [entry.id for entry in ledger.list_undo()] == [undo.id]
    latest = ledger.list()[0]
    assert latest.status is LogStatus.ERROR
    assert latest.action_type == UNDO_ACTION_TYPE
    assert "already exists" in latest.error_message


def test_undo_of_missing_file_is_a_conflict(db_session, tmp_path):
    ledger = LedgerService(db_session)
    undo = _record_move(ledger, tmp_path / "a", tmp_path / "gone")

    with pytest.raises(ConflictError):
        ledger.execute_undo(undo.id)


def test_undo_of_non_reversible_action(db_session, tmp_path):
    current = tmp_path / "a.txt"
    current.write_text("x")
    ledger = LedgerService(db_session)
    undo = _record_move(ledger, tmp_path / "b.txt", current, action_type="notify")

    with pytest.raises(ValidationError):
        ledger.execute_undo(undo.id)


def test_unknown_undo_entry(db_session):
    with pytest.raises(NotFoundError):
        LedgerService(db_session).execute_undo("missing")


def test_clearing_the_log_makes_undo_entries_unreachable(db_session, tmp_path):
    current = tmp_path / "sorted.pdf"
    current.write_text("data")
    ledger = LedgerService(db_session)
    undo = _record_move(ledger, tmp_path / "report.pdf", current)

    assert ledger.clear() == 1

    assert ledger.list() == []
    assert ledger.list_undo() == []
    with pytest.raises(NotFoundError):
        ledger.execute_undo(undo.id)
    assert current.exists()


class RecordingExecutor:
    def __init__(self):
        self.restored = []

    def restore(self, entry):
        self.restored.append(entry.id)


def test_executor_is_injectable(db_session):
    executor = RecordingExecutor()
    ledger = LedgerService(db_session, executor=executor)
    undo = _record_move(ledger, "/a", "/b")

    ledger.execute_undo(undo.id)

    assert executor.restored == [undo.id]


def test_retention_drops_old_logs_and_caps_undo(db_session):
    ledger = LedgerService(db_session)
    old = ledger.append(_log(file_path="/old", created_at=NOW - timedelta(days=40)))
    ledger.record_undo(UndoEntry(
        log_id=old.id, action_type="move", original_path="/o", current_path="/c",
        created_at=NOW - timedelta(days=40),
    ))
    recent_logs = [
        ledger.append(_log(file_path=f"/recent{i}", created_at=NOW - timedelta(days=i)))
        for i in range(3)
    ]
    for i, log in enumerate(recent_logs):
        ledger.record_undo(UndoEntry(
            log_id=log.id, action_type="move", original_path=f"/o{i}", current_path=f"/c{i}",
            created_at=NOW - timedelta(days=i),
        ))

    result = ledger.apply_retention(log_retention_days=30, max_undo_entries=2, now=NOW)

    assert result == {"logsDeleted": 1, "undoDeleted": 1}
    assert {entry.file_path for entry in ledger.list()} == {"/recent0", "/recent1", "/recent2"}
    assert [entry.original_path for entry in ledger.list_undo()] == ["/o0", "/o1"]
