"""Error taxonomy shared by the formula layer and the HTTP surface."""

from enum import Enum
from typing import List


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    PERIOD_LIMIT = "period_limit"
    DEGENERATE = "degenerate"


class CalculationError(ValueError):
    def __init__(self, errors: List[str], kind: ErrorKind = ErrorKind.INVALID_INPUT):
        super().__init__("; ".join(errors))
        self.errors = errors
        self.kind = kind
