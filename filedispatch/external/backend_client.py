"""Client HTTP de la surface de commandes, pour une interface ou un script."""
import logging
from typing import Any, Dict, List, Optional

import requests

from filedispatch.api.schemas.analytics import AnalyticsSummary
from filedispatch.api.schemas.engine import EngineStatusSnapshot
from filedispatch.api.schemas.folders import Folder
from filedispatch.api.schemas.logs import LogEntry, UndoEntry
from filedispatch.api.schemas.preview import PreviewItem
from filedispatch.api.schemas.rules import Rule
from filedispatch.api.schemas.settings import AppSettings
from filedispatch.api.schemas.templates import RuleTemplate
from filedispatch.core.exceptions import TransportError, error_from_kind

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class BackendClient:
    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Exécute une requête et traduit les erreurs en exceptions du noyau"""
        url = f"{self.base_url}{API_PREFIX}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Transport error on {method} {path}: {e}")
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            if response.ok:
                return None
            raise TransportError(f"{method} {path} failed with status {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(f"{method} {path} returned an invalid response: {e}") from e

        if not response.ok:
            if isinstance(body, dict) and "error" in body:
                raise error_from_kind(body.get("error"), str(body.get("detail", "")))
            raise TransportError(f"{method} {path} failed with status {response.status_code}: {body}")
        return body

    # === Dossiers ===

    def list_folders(self) -> List[Folder]:
        return [Folder.model_validate(item) for item in self._request("GET", "/folders")]

    def add_folder(self, path: str, name: str) -> Folder:
        return Folder.model_validate(self._request("POST", "/folders", json={"path": path, "name": name}))

    def remove_folder(self, folder_id: str) -> None:
        self._request("DELETE", f"/folders/{folder_id}")

    def toggle_folder(self, folder_id: str, enabled: bool) -> Folder:
        return Folder.model_validate(
            self._request("POST", f"/folders/{folder_id}/toggle", json={"enabled": enabled})
        )

    def update_folder_settings(self, folder_id: str, **changes) -> Folder:
        payload = {key: value for key, value in changes.items() if value is not None}
        return Folder.model_validate(self._request("PATCH", f"/folders/{folder_id}/settings", json=payload))

    def create_group(self, name: str, parent_id: Optional[str] = None) -> Folder:
        return Folder.model_validate(
            self._request("POST", "/folders/groups", json={"name": name, "parentId": parent_id})
        )

    def move_folder(self, folder_id: str, parent_id: Optional[str]) -> Folder:
        return Folder.model_validate(
            self._request("POST", f"/folders/{folder_id}/move", json={"parentId": parent_id})
        )

    def rename_folder(self, folder_id: str, name: str) -> Folder:
        return Folder.model_validate(self._request("POST", f"/folders/{folder_id}/rename", json={"name": name}))

    # === Règles ===

    def list_rules(self, folder_id: str) -> List[Rule]:
        return [Rule.model_validate(item) for item in self._request("GET", f"/rules/folder/{folder_id}")]

    def get_rule(self, rule_id: str) -> Rule:
        return Rule.model_validate(self._request("GET", f"/rules/{rule_id}"))

    def create_rule(self, rule: Rule) -> Rule:
        return Rule.model_validate(self._request("POST", "/rules", json=rule.to_payload()))

    def update_rule(self, rule: Rule) -> Rule:
        return Rule.model_validate(self._request("PUT", f"/rules/{rule.id}", json=rule.to_payload()))

    def delete_rule(self, rule_id: str) -> None:
        self._request("DELETE", f"/rules/{rule_id}")

    def toggle_rule(self, rule_id: str, enabled: bool) -> Rule:
        return Rule.model_validate(self._request("POST", f"/rules/{rule_id}/toggle", json={"enabled": enabled}))

    def duplicate_rule(self, rule_id: str) -> Rule:
        return Rule.model_validate(self._request("POST", f"/rules/{rule_id}/duplicate"))

    def reorder_rules(self, folder_id: str, ordered_ids: List[str]) -> List[Rule]:
        body = self._request("POST", f"/rules/folder/{folder_id}/reorder", json={"orderedIds": ordered_ids})
        return [Rule.model_validate(item) for item in body]

    def export_rules(self, folder_id: str) -> str:
        return self._request("GET", f"/rules/folder/{folder_id}/export")["payload"]

    def import_rules(self, folder_id: str, payload: str) -> List[Rule]:
        body = self._request("POST", f"/rules/folder/{folder_id}/import", json={"payload": payload})
        return [Rule.model_validate(item) for item in body]

    # === Journal et annulation ===

    def list_logs(self, limit: int = 100, offset: int = 0) -> List[LogEntry]:
        body = self._request("GET", "/logs", params={"limit": limit, "offset": offset})
        return [LogEntry.model_validate(item) for item in body]

    def clear_logs(self) -> None:
        self._request("DELETE", "/logs")

    def list_undo(self, limit: int = 50) -> List[UndoEntry]:
        return [UndoEntry.model_validate(item) for item in self._request("GET", "/undo", params={"limit": limit})]

    def execute_undo(self, undo_id: str) -> LogEntry:
        return LogEntry.model_validate(self._request("POST", f"/undo/{undo_id}/execute"))

    # === Réglages, moteur, aperçu, statistiques ===

    def get_settings(self) -> AppSettings:
        return AppSettings.model_validate(self._request("GET", "/settings"))

    def update_settings(self, settings: AppSettings) -> AppSettings:
        return AppSettings.model_validate(self._request("PUT", "/settings", json=settings.to_payload()))

    def get_engine_status(self) -> EngineStatusSnapshot:
        return EngineStatusSnapshot.model_validate(self._request("GET", "/engine/status"))

    def set_paused(self, paused: bool) -> bool:
        return self._request("POST", "/engine/pause", json={"paused": paused})["paused"]

    def toggle_paused(self) -> bool:
        return self._request("POST", "/engine/toggle")["paused"]

    def preview_rule(self, rule_id: str) -> List[PreviewItem]:
        return [PreviewItem.model_validate(item) for item in self._request("GET", f"/preview/rules/{rule_id}")]

    def preview_file(self, rule_id: str, file_path: str) -> PreviewItem:
        body = self._request("POST", f"/preview/rules/{rule_id}/file", json={"filePath": file_path})
        return PreviewItem.model_validate(body)

    def analytics_summary(self, limit: int = 500) -> AnalyticsSummary:
        return AnalyticsSummary.model_validate(self._request("GET", "/analytics/summary", params={"limit": limit}))

    def list_templates(self) -> List[RuleTemplate]:
        return [RuleTemplate.model_validate(item) for item in self._request("GET", "/templates")]

    def save_template(self, template: RuleTemplate) -> RuleTemplate:
        return RuleTemplate.model_validate(self._request("POST", "/templates", json=template.to_payload()))

    def remove_template(self, template_id: str) -> None:
        self._request("DELETE", f"/templates/{template_id}")

    def health(self) -> Dict[str, Any]:
        try:
            response = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise TransportError(f"Health check failed: {e}") from e
