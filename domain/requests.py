from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional

from .filtering import Scope


@dataclass(frozen=True)
class ReportRequest:
    scope: Scope
    code: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    def label(self) -> str:
        return f"{self.scope.value}:{self.code} [{self.start_date or '-'} .. {self.end_date or '-'}]"


@dataclass(frozen=True)
class ReportOutcome:
    request: ReportRequest
    report: Any = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None
