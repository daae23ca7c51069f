"""Statistiques dérivées du journal: comptes par statut, débit, santé par règle.

Fonctions pures recalculées à la demande sur un instantané du journal; aucun
agrégat n'est persisté.
"""
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from filedispatch.api.schemas.analytics import AnalyticsSummary, RuleHealth, StatusCounts, ThroughputHistogram
from filedispatch.api.schemas.logs import LogEntry

logger = logging.getLogger(__name__)

THROUGHPUT_WINDOW = 10
THROUGHPUT_BUCKET_SECONDS = 3600
RECENT_ACTIVITY_WINDOW = timedelta(hours=24)
DELETE_ACTION_TYPES = {"delete", "deletePermanently"}

EntryLike = Union[LogEntry, Mapping[str, Any]]

DATE_FORMATS = [
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse un horodatage depuis différents formats; None si illisible.

    Les valeurs sans fuseau sont considérées en UTC.
    """
    if not value:
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str):
            value = str(value)
        text = value.strip().replace("Z", "+00:00")
        parsed = None
        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
        if parsed is None:
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                logger.debug(f"Could not parse log timestamp: {value!r}")
                return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _field(entry: EntryLike, name: str, alias: str) -> Any:
    if isinstance(entry, LogEntry):
        value = getattr(entry, name)
        return value.value if hasattr(value, "value") else value
    if name in entry:
        return entry[name]
    return entry.get(alias)


def _timestamped(entries: Iterable[EntryLike]) -> List[Tuple[EntryLike, datetime]]:
    result = []
    for entry in entries:
        timestamp = parse_timestamp(_field(entry, "created_at", "createdAt"))
        if timestamp is not None:
            result.append((entry, timestamp))
    return result


def status_counts(entries: Iterable[EntryLike]) -> StatusCounts:
    counts = StatusCounts()
    for entry in entries:
        status = _field(entry, "status", "status")
        if status == "success":
            counts.success += 1
        elif status == "error":
            counts.error += 1
        elif status == "skipped":
            counts.skipped += 1
        if _field(entry, "action_type", "actionType") in DELETE_ACTION_TYPES:
            counts.deleted += 1
    return counts


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def throughput(
    entries: Iterable[EntryLike],
    window: int = THROUGHPUT_WINDOW,
    bucket_seconds: int = THROUGHPUT_BUCKET_SECONDS,
) -> ThroughputHistogram:
    """Histogramme de `window` seaux ancré sur l'entrée la plus récente.

    Seau 0 = le plus ancien, seau `window - 1` = le plus récent. Une entrée
    âgée d'exactement `window * bucket_seconds` tombe dans le seau 0.
    """
    counts = [0] * window
    stamped = _timestamped(entries)
    if not stamped:
        return ThroughputHistogram(counts=counts, heights=[0] * window, recent=0,
                                   bucket_seconds=bucket_seconds, window=window)

    latest = max(timestamp for _, timestamp in stamped)
    span = window * bucket_seconds
    for _, timestamp in stamped:
        diff = (latest - timestamp).total_seconds()
        if diff < 0 or diff > span:
            continue
        index = max(0, window - 1 - int(diff // bucket_seconds))
        counts[index] += 1

    peak = max(1, max(counts))
    heights = [_round_half_up(count / peak * 100) for count in counts]
    return ThroughputHistogram(
        counts=counts,
        heights=heights,
        recent=sum(counts),
        anchored_at=latest,
        bucket_seconds=bucket_seconds,
        window=window,
    )


def rule_health(entries: Iterable[EntryLike], now: Optional[datetime] = None) -> Dict[str, RuleHealth]:
    """Santé par règle: dernière activité (tout l'historique) et compteurs sur 24 h glissantes.

    La fenêtre récente part de l'heure murale `now`, pas de la dernière entrée.
    """
    now = parse_timestamp(now) or datetime.now(timezone.utc)
    window_start = now - RECENT_ACTIVITY_WINDOW
    stats: Dict[str, RuleHealth] = {}

    for entry, timestamp in _timestamped(entries):
        rule_id = _field(entry, "rule_id", "ruleId")
        if not rule_id:
            continue
        health = stats.setdefault(rule_id, RuleHealth(rule_id=rule_id))
        if health.last_activity_at is None or timestamp > health.last_activity_at:
            health.last_activity_at = timestamp
        if window_start <= timestamp:
            health.recent_events += 1
            if _field(entry, "status", "status") == "error":
                health.recent_errors += 1
    return stats


def summarize(entries: Iterable[EntryLike], now: Optional[datetime] = None) -> AnalyticsSummary:
    entries = list(entries)
    now = parse_timestamp(now) or datetime.now(timezone.utc)
    return AnalyticsSummary(
        total=len(entries),
        status_counts=status_counts(entries),
        throughput=throughput(entries),
        rule_health=rule_health(entries, now=now),
        generated_at=now,
    )
