"""Collect recoverable problems noticed while building documentation.

Broken cross-references and unknown example languages do not stop a build.
They are logged as warnings when they happen and recorded here so the CLI can
summarise them and, in ``--strict`` mode, fail the run.
"""

from __future__ import annotations

import collections
import dataclasses as dc


@dc.dataclass(frozen=True, slots=True)
class Diagnostic:
    """One recorded problem."""

    kind: str
    message: str
    location: str | None = None

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


@dc.dataclass(slots=True)
class Diagnostics:
    """Append-only record of problems for a single run."""

    entries: list[Diagnostic] = dc.field(default_factory=list)

    def record(self, kind: str, message: str, location: str | None = None) -> Diagnostic:
        entry = Diagnostic(kind=kind, message=message, location=location)
        self.entries.append(entry)
        return entry

    def of_kind(self, kind: str) -> list[Diagnostic]:
        return [entry for entry in self.entries if entry.kind == kind]

    def counts(self) -> dict[str, int]:
        return dict(collections.Counter(entry.kind for entry in self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)


__all__ = ["Diagnostic", "Diagnostics"]
