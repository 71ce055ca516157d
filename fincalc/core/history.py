"""In-memory calculation history, newest entry first."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel

from fincalc.logging_config import get_logger
from fincalc.schemas.history import HistoryEntry

logger = get_logger(__name__)

_SCALARS = (int, float, str, bool, type(None))


def _scalar_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    # schedules and breakdown tables are left out of the snapshot
    return {key: value for key, value in data.items() if isinstance(value, _SCALARS)}


class HistoryStore:
    """
    Bounded list of recent calculations shared between request threads.

    ``add`` never raises: a snapshot that cannot be recorded is logged and
    dropped so the calculation itself still succeeds.
    """

    def __init__(self, max_items: int = 50):
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self.max_items = max_items
        self._entries: List[HistoryEntry] = []
        self._lock = threading.Lock()

    def add(self, calculator: str, inputs: BaseModel, result: BaseModel) -> Optional[HistoryEntry]:
        try:
            entry = HistoryEntry(
                calculator=calculator,
                timestamp=datetime.now(timezone.utc),
                inputs=inputs.model_dump(mode="json"),
                results=_scalar_fields(result.model_dump(mode="json")),
            )
        except (TypeError, ValueError) as exc:
            logger.warning("history_add_failed", calculator=calculator, error=str(exc))
            return None

        with self._lock:
            self._entries.insert(0, entry)
            del self._entries[self.max_items:]
        return entry

    def entries(self, calculator: Optional[str] = None) -> List[HistoryEntry]:
        with self._lock:
            snapshot = list(self._entries)
        if calculator is None:
            return snapshot
        return [entry for entry in snapshot if entry.calculator == calculator]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
