"""Historial de cálculos completados."""

import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone


logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class HistoryEntry:
    """Cálculo terminado. Inmutable una vez creado."""

    expression: str
    result: str
    id: str = field(default_factory=_new_id)
    timestamp: datetime = field(default_factory=_now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "expression": self.expression,
            "result": self.result,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        timestamp = datetime.fromisoformat(data["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return cls(
            expression=str(data["expression"]),
            result=str(data["result"]),
            id=str(data["id"]),
            timestamp=timestamp,
        )


class HistoryStore:
    """Almacén en memoria con límite de entradas; las más antiguas salen primero.

    La iteración devuelve primero la entrada más reciente.
    """

    def __init__(self, limit: int = HISTORY_LIMIT, entries=()):
        if limit < 1:
            raise ValueError("El límite debe ser positivo")
        self._limit = limit
        self._entries: deque[HistoryEntry] = deque()
        # ``entries`` llega en orden de más reciente a más antigua
        for entry in reversed(list(entries)):
            self.append(entry)

    @property
    def limit(self) -> int:
        return self._limit

    def append(self, entry: HistoryEntry):
        self._entries.appendleft(entry)
        while len(self._entries) > self._limit:
            evicted = self._entries.pop()
            logger.debug("Historial lleno, se descarta %s", evicted.id)

    def clear(self):
        self._entries.clear()

    def __iter__(self):
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def latest(self) -> HistoryEntry | None:
        return self._entries[0] if self._entries else None

    def to_dicts(self) -> list[dict]:
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_dicts(cls, items, limit: int = HISTORY_LIMIT) -> "HistoryStore":
        return cls(limit=limit, entries=[HistoryEntry.from_dict(d) for d in items])
