from dataclasses import dataclass, field
from typing import List


class LotteryEngineError(Exception):
    """Base class for errors raised by the engine."""


class UnsupportedOperation(LotteryEngineError):
    """Unknown strategy, lottery, variant or generation mode."""


@dataclass
class ValidationResult:
    """Outcome of a parameter check. Reported to the caller, never raised."""
    valid: bool = True
    errors: List[str] = field(default_factory=list)

    def add(self, message: str) -> None:
        self.errors.append(message)
        self.valid = False

    def __bool__(self):
        return self.valid
