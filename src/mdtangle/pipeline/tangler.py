"""Tangle orchestrator - run scan, expand and emit over a set of documents.

Two phases with a hard ordering dependency:

1. Scan every document in order, merging each partial registry into one
   Registry, then seal it. Expansion may reference blocks defined in any
   document, so nothing is rendered before all scanning is done.
2. For every target file (in first-registration order) expand, render and
   write ``<output_dir>/<target>``.

Failures are isolated per unit of work: an unreadable document or an
unwritable target is recorded in its result and the run continues.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from mdtangle.config import settings
from mdtangle.errors import ExpansionDepthError
from mdtangle.models import (
    Diagnostic,
    DiagnosticKind,
    Registry,
    ScanResult,
    Severity,
    TangleReport,
    WriteResult,
)

from .stage_emit import Emitter
from .stage_expand import Expander
from .stage_scan import Scanner

logger = logging.getLogger(__name__)


class Tangler:
    """Drives a complete tangle run."""

    def __init__(
        self,
        output_dir: Union[str, Path, None] = None,
        encoding: Optional[str] = None,
        line_directives: Optional[bool] = None,
        max_depth: Optional[int] = None,
    ):
        """Initialize the tangler.

        Args:
            output_dir: Directory target paths are resolved against
                (default from settings, typically the current directory)
            encoding: Text encoding of documents and outputs (default from settings)
            line_directives: Emit source-position directives (default from settings)
            max_depth: Macro nesting limit (default from settings, None = unlimited)
        """
        self.output_dir = Path(output_dir if output_dir is not None else settings.output_dir)
        self.encoding = encoding or settings.encoding
        self.line_directives = (
            settings.line_directives if line_directives is None else line_directives
        )
        self.max_depth = max_depth if max_depth is not None else settings.max_expansion_depth
        self.scanner = Scanner()

    # ------------------------------------------------------------------ phase 1

    def scan_document(self, path: Union[str, Path]) -> ScanResult:
        """Scan one document file. The document is identified by *path* as given."""
        document = str(path)
        try:
            # Lines split on "\n" only; a lone "\r" stays inside its line
            with open(path, encoding=self.encoding, newline="\n") as stream:
                return self.scanner.scan(stream, document)
        except OSError as exc:
            logger.error("Cannot read %s: %s", document, exc)
            return ScanResult(
                document=document,
                error=str(exc),
                diagnostics=[
                    Diagnostic(
                        kind=DiagnosticKind.READ_FAILED,
                        severity=Severity.ERROR,
                        message=f"cannot read: {exc.strerror or exc}",
                        document=document,
                    )
                ],
            )

    def scan_documents(
        self, paths: Iterable[Union[str, Path]]
    ) -> tuple[Registry, list[ScanResult]]:
        """Scan all documents in order and return the merged, sealed registry."""
        registry = Registry()
        results = []

        for path in paths:
            result = self.scan_document(path)
            # Blocks flushed before a read error are kept
            registry.merge(result.registry)
            results.append(result)

        return registry.seal(), results

    # ------------------------------------------------------------------ phase 2

    def render_target(self, registry: Registry, target: str) -> tuple[str, list[Diagnostic]]:
        """Expand and render the content of one target file."""
        expander = Expander(registry, max_depth=self.max_depth)
        expanded = expander.expand(registry.files[target])
        text = Emitter(directives=self.line_directives).render(expanded)
        return text, expander.diagnostics

    def output_path(self, target: str) -> Path:
        """Path of *target* under the output directory, even for absolute targets."""
        relative = Path(target)
        if relative.is_absolute():
            relative = relative.relative_to(relative.anchor)
        return self.output_dir / relative

    def write_target(self, registry: Registry, target: str) -> WriteResult:
        """Render *target* and write it under the output directory."""
        result = WriteResult(target=target)
        full_path = self.output_path(target)

        try:
            text, result.diagnostics = self.render_target(registry, target)
            full_path.parent.mkdir(parents=True, exist_ok=True)
            with open(full_path, "w", encoding=self.encoding, newline="") as out:
                out.write(text)
        except (OSError, ExpansionDepthError, RecursionError) as exc:
            logger.error("Cannot write %s: %s", full_path, exc)
            result.error = str(exc)
            result.diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.WRITE_FAILED,
                    severity=Severity.ERROR,
                    message=f"cannot write {target}: {exc}",
                )
            )
            return result

        result.path = str(full_path)
        result.bytes_written = len(text.encode(self.encoding))
        logger.info("Wrote %s (%d bytes)", full_path, result.bytes_written)
        return result

    def write_outputs(self, registry: Registry) -> list[WriteResult]:
        """Write every target file in the registry."""
        return [self.write_target(registry, target) for target in registry.files]

    # ------------------------------------------------------------------ both

    def run(self, paths: Iterable[Union[str, Path]]) -> TangleReport:
        """Scan *paths*, then write every target file they define."""
        registry, scans = self.scan_documents(paths)
        writes = self.write_outputs(registry)
        return TangleReport(registry=registry, scans=scans, writes=writes)
