from __future__ import annotations

import logging
from typing import Any, Callable, Generic, List, TypeVar

from shopgenie.db.sqlite import PersistenceGateway

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")
Listener = Callable[[str, Any], None]


class Store(Generic[S]):
    """
    Base for the state stores.

    A store keeps one immutable snapshot. Every mutation builds a new
    snapshot, writes it through the gateway under ``key`` and then notifies
    subscribers with ``(key, snapshot)``. A failed write leaves the new
    snapshot in memory and sets ``persisted`` to False until a later write
    succeeds.
    """

    key: str = ""

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway
        self._listeners: List[Listener] = []
        self._snapshot: S = self.default()
        self.persisted = True

    # --- hooks ---

    def default(self) -> S:
        raise NotImplementedError

    def encode(self, snapshot: S) -> Any:
        raise NotImplementedError

    def decode(self, raw: Any) -> S:
        raise NotImplementedError

    # --- public ---

    @property
    def snapshot(self) -> S:
        return self._snapshot

    def load(self) -> S:
        raw = self._gateway.load(self.key)
        if raw is None:
            self._snapshot = self.default()
        else:
            try:
                self._snapshot = self.decode(raw)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("stored %r is malformed (%s), starting empty", self.key, e)
                self._snapshot = self.default()
        return self._snapshot

    def decode_rows(self, raw: Any, decode_row: Callable[[Any], T]) -> List[T]:
        """Decode a stored list row by row; broken rows are logged and skipped."""
        if not isinstance(raw, list):
            raise TypeError(f"expected a list, got {type(raw).__name__}")
        rows: List[T] = []
        for i, item in enumerate(raw):
            try:
                rows.append(decode_row(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("skipping broken %r row %d: %s", self.key, i, e)
        return rows

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear_listeners(self) -> None:
        self._listeners.clear()

    def _commit(self, snapshot: S) -> S:
        self._snapshot = snapshot
        self._persist(snapshot)
        for listener in list(self._listeners):
            try:
                listener(self.key, snapshot)
            except Exception:
                logger.exception("listener failed for %r", self.key)
        return snapshot

    def _persist(self, snapshot: S) -> None:
        value = self.encode(snapshot)
        ok = self._gateway.delete(self.key) if value is None else self._gateway.save(self.key, value)
        if ok and not self.persisted:
            logger.info("%r is persisted again", self.key)
        elif not ok and self.persisted:
            logger.warning("%r kept in memory only until the next successful write", self.key)
        self.persisted = ok
