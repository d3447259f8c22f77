"""Diagnostics accumulated over one reconciliation call."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Diagnostic(BaseModel):
    """One error or warning surfaced to the caller."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    summary: str
    detail: str = ""


class Diagnostics:
    """Ordered collection of diagnostics.

    Warnings accumulate alongside a successful result; an operation has
    failed once any error is present.
    """

    def __init__(self, items: list[Diagnostic] | None = None) -> None:
        self._items: list[Diagnostic] = list(items or [])

    def warn(self, summary: str, detail: str = "") -> None:
        self._items.append(Diagnostic(severity=Severity.WARNING, summary=summary, detail=detail))

    def error(self, summary: str, detail: str = "") -> None:
        self._items.append(Diagnostic(severity=Severity.ERROR, summary=summary, detail=detail))

    def from_exception(self, exc: BaseException) -> None:
        """Record an exception (and its cause, if any) as an error."""
        detail = repr(exc.__cause__) if exc.__cause__ is not None else ""
        self.error(str(exc), detail)

    def extend(self, other: Diagnostics) -> None:
        self._items.extend(other)

    @property
    def has_error(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self._items)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity == Severity.WARNING]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Diagnostics(errors={len(self.errors)}, warnings={len(self.warnings)})"
