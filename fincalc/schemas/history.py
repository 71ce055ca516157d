"""Data contracts for the calculation history."""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class HistoryEntry(BaseModel):
    """Snapshot of one calculation: validated inputs and scalar results."""

    calculator: str
    timestamp: datetime
    inputs: Dict[str, Any] = Field(default_factory=dict)
    results: Dict[str, Any] = Field(default_factory=dict)


class HistoryResponse(BaseModel):
    entries: List[HistoryEntry]
