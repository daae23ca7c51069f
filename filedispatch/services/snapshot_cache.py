import logging
import threading
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SnapshotCache(Generic[T]):
    """Cache d'instantané avec invalidation explicite et abonnements.

    `get()` charge via le loader en cas d'absence; `publish()` remplace la
    valeur et notifie les abonnés; `invalidate()` force le prochain rechargement.
    """

    def __init__(self, loader: Optional[Callable[[], T]] = None):
        self._loader = loader
        self._value: Optional[T] = None
        self._loaded = False
        self._subscribers: List[Callable[[T], None]] = []
        self._lock = threading.RLock()

    def get(self, loader: Optional[Callable[[], T]] = None) -> Optional[T]:
        """Valeur courante; chargée via `loader` (ou le loader par défaut) si absente"""
        loader = loader or self._loader
        with self._lock:
            if not self._loaded and loader is not None:
                self._value = loader()
                self._loaded = True
            return self._value

    def invalidate(self) -> None:
        with self._lock:
            self._loaded = False
            self._value = None

    def publish(self, value: T) -> None:
        with self._lock:
            self._value = value
            self._loaded = True
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(value)
            except Exception:
                # Un abonné défaillant ne doit pas bloquer les autres
                logger.exception("Snapshot subscriber failed")

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Enregistre un abonné; retourne la fonction de désabonnement"""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
