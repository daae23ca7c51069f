import yaml

from filedispatch.core.exceptions import ConflictError
from filedispatch.dependencies import get_undo_executor
from filedispatch.main import app


def _add_folder(client, tmp_path, name="Downloads"):
    path = tmp_path / name
    path.mkdir()
    response = client.post("/api/v1/folders", json={"path": str(path), "name": name})
    assert response.status_code == 201
    return response.json()


def _create_rule(client, folder_id, name):
    response = client.post("/api/v1/rules", json={
        "folderId": folder_id,
        "name": name,
        "conditions": {
            "matchType": "all",
            "conditions": [{"type": "extension", "operator": "is", "value": "pdf"}],
        },
        "actions": [{"type": "move", "destination": "/sorted"}],
    })
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_folder_and_rule_lifecycle(client, tmp_path):
    folder = _add_folder(client, tmp_path)
    first = _create_rule(client, folder["id"], "First")
    second = _create_rule(client, folder["id"], "Second")

    assert (first["position"], second["position"]) == (0, 1)
    assert first["actions"][0] == {
        "type": "move", "destination": "/sorted", "onConflict": "rename", "skipDuplicates": False,
    }

    reordered = client.post(
        f"/api/v1/rules/folder/{folder['id']}/reorder",
        json={"orderedIds": [second["id"], first["id"]]},
    )
    assert [rule["name"] for rule in reordered.json()] == ["Second", "First"]

    toggled = client.post(f"/api/v1/rules/{first['id']}/toggle", json={"enabled": False})
    assert toggled.json()["enabled"] is False

    copy = client.post(f"/api/v1/rules/{second['id']}/duplicate")
    assert copy.status_code == 201
    assert copy.json()["name"] == "Second (Copy)"

    folders = client.get("/api/v1/folders").json()
    assert folders[0]["ruleCount"] == 3

    assert client.delete(f"/api/v1/rules/{first['id']}").status_code == 200
    assert client.get(f"/api/v1/rules/{first['id']}").status_code == 404


def test_errors_use_a_stable_envelope(client, tmp_path):
    folder = _add_folder(client, tmp_path)
    rule = _create_rule(client, folder["id"], "Only")

    missing = client.get("/api/v1/rules/nope")
    assert missing.status_code == 404
    assert missing.json() == {"error": "NotFound", "detail": "Rule not found: nope"}

    bad_reorder = client.post(
        f"/api/v1/rules/folder/{folder['id']}/reorder",
        json={"orderedIds": [rule["id"], rule["id"]]},
    )
    assert bad_reorder.status_code == 422
    assert bad_reorder.json()["error"] == "ValidationError"

    empty = client.post(f"/api/v1/rules/folder/{folder['id']}/import", json={"payload": ""})
    assert empty.status_code == 400
    assert empty.json()["error"] == "EmptyPayload"


def test_export_then_import(client, tmp_path):
    source = _add_folder(client, tmp_path, "Source")
    target = _add_folder(client, tmp_path, "Target")
    _create_rule(client, source["id"], "Invoices")

    exported = client.get(f"/api/v1/rules/folder/{source['id']}/export").json()
    assert yaml.safe_load(exported["payload"])[0]["name"] == "Invoices"

    imported = client.post(f"/api/v1/rules/folder/{target['id']}/import", json={"payload": exported["payload"]})

    assert imported.status_code == 201
    assert [rule["folderId"] for rule in imported.json()] == [target["id"]]


def test_normalize_import(client):
    response = client.post("/api/v1/rules/normalize-import", json={"payload": '{"id":"r1"}'})

    assert response.json() == {"payload": '[{"id":"r1"}]'}
    assert client.post("/api/v1/rules/normalize-import", json={"payload": "42"}).json()["error"] == "InvalidShape"

    response = client.post("/api/v1/rules/normalize-import", json={"payload": "name: !!set {a, b}\n"})
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidShape"

    response = client.post("/api/v1/rules/normalize-import", json={"payload": "[" * 100000 + "]" * 100000})
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidFormat"


def test_logs_undo_and_analytics(client, tmp_path):
    original = tmp_path / "report.pdf"
    current = tmp_path / "sorted" / "report.pdf"
    current.parent.mkdir()
    current.write_text("data")

    log = client.post("/api/v1/logs", json={
        "filePath": str(original),
        "actionType": "move",
        "status": "success",
        "actionDetail": {"sourcePath": str(original), "destinationPath": str(current)},
    }).json()
    undo = client.post("/api/v1/undo", json={
        "logId": log["id"],
        "actionType": "move",
        "originalPath": str(original),
        "currentPath": str(current),
    }).json()

    assert [entry["id"] for entry in client.get("/api/v1/undo").json()] == [undo["id"]]

    result = client.post(f"/api/v1/undo/{undo['id']}/execute")
    assert result.status_code == 200
    assert result.json()["actionType"] == "undo"
    assert original.exists()

    logs = client.get("/api/v1/logs", params={"limit": 10}).json()
    assert [entry["actionType"] for entry in logs] == ["undo", "move"]

    summary = client.get("/api/v1/analytics/summary").json()
    assert summary["total"] == 2
    assert summary["statusCounts"]["success"] == 2
    assert sum(summary["throughput"]["counts"]) == 2

    assert client.delete("/api/v1/logs").status_code == 200
    assert client.get("/api/v1/logs").json() == []


def test_undo_uses_injected_executor(client):
    class RefusingExecutor:
        def restore(self, entry):
            raise ConflictError("Original path already exists")

    app.dependency_overrides[get_undo_executor] = RefusingExecutor
    log = client.post("/api/v1/logs", json={"filePath": "/a", "actionType": "move", "status": "success"}).json()
    undo = client.post("/api/v1/undo", json={
        "logId": log["id"], "actionType": "move", "originalPath": "/a", "currentPath": "/b",
    }).json()

    response = client.post(f"/api/v1/undo/{undo['id']}/execute")

    assert response.status_code == 409
    assert response.json()["error"] == "ConflictError"


def test_log_for_unknown_rule_is_not_found(client):
    response = client.post("/api/v1/logs", json={
        "ruleId": "ghost", "filePath": "/a", "actionType": "move", "status": "success",
    })

    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"
    assert client.get("/api/v1/logs").json() == []


def test_settings_round_trip(client):
    settings = client.get("/api/v1/settings").json()
    assert settings["logRetentionDays"] == 30

    settings["dryRun"] = True
    updated = client.put("/api/v1/settings", json=settings).json()

    assert updated["dryRun"] is True
    assert client.get("/api/v1/engine/status").json()["dryRun"] is True


def test_engine_pause_and_toggle(client):
    assert client.post("/api/v1/engine/pause", json={"paused": True}).json() == {"paused": True}
    assert client.post("/api/v1/engine/toggle").json() == {"paused": False}
    assert client.get("/api/v1/engine/status").json()["status"]["paused"] is False


def test_preview_draft(client, tmp_path):
    folder = _add_folder(client, tmp_path)
    (tmp_path / "Downloads" / "invoice.pdf").write_text("%PDF")
    (tmp_path / "Downloads" / "notes.txt").write_text("notes")

    response = client.post("/api/v1/preview/draft", params={"maxFiles": 10}, json={
        "folderId": folder["id"],
        "name": "Draft",
        "conditions": {"matchType": "all", "conditions": [{"type": "extension", "operator": "is", "value": "pdf"}]},
    })

    assert response.status_code == 200
    assert [(item["filePath"].rsplit("/", 1)[-1], item["matched"]) for item in response.json()] == [
        ("invoice.pdf", True),
        ("notes.txt", False),
    ]


def test_templates(client):
    saved = client.post("/api/v1/templates", json={"name": "Screenshots"}).json()

    assert [template["id"] for template in client.get("/api/v1/templates").json()] == [saved["id"]]
    assert client.delete(f"/api/v1/templates/{saved['id']}").status_code == 200
    assert client.delete(f"/api/v1/templates/{saved['id']}").status_code == 404
