"""Per-unit outcomes of a tangle run."""

from dataclasses import dataclass, field
from typing import Optional

from .base import Diagnostic, DiagnosticKind
from .registry import Registry


@dataclass
class ScanResult:
    """Outcome of scanning one document.

    A failed scan still carries the blocks flushed before the failure.
    """

    document: str
    registry: Registry = field(default_factory=Registry)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class WriteResult:
    """Outcome of rendering and writing one target file."""

    target: str
    path: Optional[str] = None
    bytes_written: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def unresolved(self) -> list[Diagnostic]:
        return [
            d for d in self.diagnostics if d.kind == DiagnosticKind.UNRESOLVED_REFERENCE
        ]


@dataclass
class TangleReport:
    """Aggregated results of both phases."""

    registry: Registry
    scans: list[ScanResult] = field(default_factory=list)
    writes: list[WriteResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(s.ok for s in self.scans) and all(w.ok for w in self.writes)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        collected: list[Diagnostic] = []
        for scan in self.scans:
            collected.extend(scan.diagnostics)
        for write in self.writes:
            collected.extend(write.diagnostics)
        return collected

    @property
    def unresolved(self) -> list[Diagnostic]:
        return [w for write in self.writes for w in write.unresolved]
