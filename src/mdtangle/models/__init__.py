"""Data models for mdtangle.

Lines extracted from documents keep their provenance (document, language,
line number) from the moment they are scanned until they are rendered, so
the emitter can point generated code back at its source.

Model hierarchy:
- Registry -> named Blocks / target-file Blocks -> SourceLines
- ScanResult (per document), WriteResult (per target) -> TangleReport
"""

from .base import (
    Diagnostic,
    DiagnosticKind,
    Provenance,
    Severity,
    SourceLine,
)
from .block import Block
from .registry import Registry
from .results import (
    ScanResult,
    TangleReport,
    WriteResult,
)

__all__ = [
    # Base types
    "Diagnostic",
    "DiagnosticKind",
    "Provenance",
    "Severity",
    "SourceLine",
    # Blocks
    "Block",
    "Registry",
    # Results
    "ScanResult",
    "TangleReport",
    "WriteResult",
]
