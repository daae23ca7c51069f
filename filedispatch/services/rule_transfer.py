"""Normalisation des imports de règles et sérialisation des exports."""
import datetime as dt
import json
import logging
from typing import Any, List

import yaml

from filedispatch.core.exceptions import EmptyPayloadError, InvalidFormatError, InvalidShapeError

logger = logging.getLogger(__name__)

EMPTY_PAYLOAD_MESSAGE = "Rule import file is empty."
INVALID_SHAPE_MESSAGE = "Rule import file must contain a rule or an array of rules."
NESTING_TOO_DEEP_MESSAGE = "Rule import file is nested too deeply."


def _json_default(value: Any) -> str:
    # Les horodatages YAML non quotés sont chargés en objets date/datetime
    if isinstance(value, (dt.date, dt.datetime, dt.time)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def parse_payload(text: str) -> Any:
    """Parse un texte JSON, ou YAML à défaut"""
    trimmed = text.strip()
    if trimmed.startswith("{") or trimmed.startswith("["):
        try:
            return json.loads(trimmed)
        except json.JSONDecodeError as e:
            logger.debug(f"Payload is not JSON, trying YAML: {e}")
        except RecursionError as e:
            raise InvalidFormatError(NESTING_TOO_DEEP_MESSAGE) from e
    try:
        return yaml.safe_load(trimmed)
    except yaml.YAMLError as e:
        raise InvalidFormatError(f"Rule import file could not be parsed: {e}") from e
    except RecursionError as e:
        raise InvalidFormatError(NESTING_TOO_DEEP_MESSAGE) from e


def load_rule_objects(text: str) -> List[dict]:
    """Parse et valide la forme d'un import: une liste non vide d'objets"""
    if not text or not text.strip():
        raise EmptyPayloadError(EMPTY_PAYLOAD_MESSAGE)

    parsed = parse_payload(text)
    if isinstance(parsed, dict):
        return [parsed]
    if isinstance(parsed, list) and parsed and all(isinstance(item, dict) for item in parsed):
        return parsed
    raise InvalidShapeError(INVALID_SHAPE_MESSAGE)


def normalize_import_payload(text: str) -> str:
    """Canonicalise un import en texte JSON d'une séquence d'objets règle.

    Un objet seul est enveloppé dans une liste d'un élément; une liste est
    conservée telle quelle.
    """
    rules = load_rule_objects(text)
    try:
        return json.dumps(rules, separators=(",", ":"), ensure_ascii=False, default=_json_default)
    except RecursionError as e:
        raise InvalidFormatError(NESTING_TOO_DEEP_MESSAGE) from e
    except (TypeError, ValueError) as e:
        # !!binary, !!set et autres valeurs YAML sans équivalent JSON
        raise InvalidShapeError(INVALID_SHAPE_MESSAGE) from e


def dump_rules_yaml(payloads: List[dict]) -> str:
    """Export YAML d'une séquence d'enregistrements de règles"""
    return yaml.safe_dump(payloads, sort_keys=False, allow_unicode=True)
