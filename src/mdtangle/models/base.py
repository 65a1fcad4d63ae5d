"""Base models and common types for mdtangle."""

from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, Field


class DiagnosticKind(str, Enum):
    """Kinds of non-fatal and per-unit problems reported during a run."""

    UNRESOLVED_REFERENCE = "unresolved-reference"
    UNTERMINATED_FENCE = "unterminated-fence"
    READ_FAILED = "read-failed"
    WRITE_FAILED = "write-failed"


class Severity(str, Enum):
    """How bad a diagnostic is."""

    WARNING = "warning"
    ERROR = "error"


class Provenance(NamedTuple):
    """Where a line of generated code came from."""

    document: str
    language: str
    line_number: int


class SourceLine(BaseModel):
    """A single line extracted from inside a fence.

    Provenance fields are fixed when the line is scanned. Indentation added
    during expansion produces a new line with the same provenance.
    """

    text: str = Field(..., description="Line content including its trailing newline")
    document: str = Field(..., description="Identifier of the source document")
    language: str = Field(default="", description="Language tag of the enclosing fence")
    line_number: int = Field(..., ge=1, description="1-based line number in the document")

    class Config:
        frozen = True

    @property
    def provenance(self) -> Provenance:
        """The (document, language, line_number) triple."""
        return Provenance(self.document, self.language, self.line_number)

    @property
    def is_blank(self) -> bool:
        """True for a line holding only a newline."""
        return self.text == "\n"

    def indented(self, prefix: str) -> "SourceLine":
        """Return this line with *prefix* prepended. Blank lines are never prefixed."""
        if not prefix or self.is_blank:
            return self
        return self.model_copy(update={"text": prefix + self.text})


class Diagnostic(BaseModel):
    """A problem reported on the side channel, tied to a source position if known."""

    kind: DiagnosticKind
    severity: Severity = Field(default=Severity.WARNING)
    message: str
    document: Optional[str] = None
    line_number: Optional[int] = Field(None, ge=1)

    class Config:
        frozen = True

    def __str__(self) -> str:
        if self.document is None:
            return self.message
        if self.line_number is None:
            return f"{self.document}: {self.message}"
        return f"{self.document}:{self.line_number}: {self.message}"
