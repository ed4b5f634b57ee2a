from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

MAX_DETAILS = 3


class Status(str, Enum):
    OK = "OK"
    WARNING = "WARNING"
    ERROR = "ERROR"


def summarize(problems: Sequence[str], limit: int = MAX_DETAILS) -> str:
    shown = "; ".join(problems[:limit])
    hidden = len(problems) - limit
    if hidden > 0:
        return f"{shown}; +{hidden} more"
    return shown


@dataclass(frozen=True, slots=True)
class CheckLine:
    """One report line: ``<label>: <status> (<detail>)``."""

    label: str
    status: Status
    detail: Optional[str] = None

    @classmethod
    def from_problems(
        cls,
        label: str,
        problems: Sequence[str],
        *,
        severity: Status = Status.ERROR,
        ok_detail: Optional[str] = None,
    ) -> "CheckLine":
        """OK with ``ok_detail`` when ``problems`` is empty, else ``severity`` with a summary."""
        if not problems:
            return cls(label, Status.OK, ok_detail)
        return cls(label, severity, summarize(problems))

    @property
    def failed(self) -> bool:
        return self.status is Status.ERROR

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status.value} ({self.detail})"
        return f"{self.label}: {self.status.value}"
