"""Scan Stage - Extract fenced code regions from a document.

First phase of a tangle run. Reads a document line by line, tracks fence
state, tags every extracted line with its provenance and flushes each
closed region into a per-document partial Registry:

- file blocks go to ``registry.files[path]``
- named blocks go to ``registry.blocks[name]``
- ``lang``-only fences go to the implicit file ``<document>.<lang>``
- bare fences are consumed and dropped
"""

import io
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from mdtangle.models import (
    Block,
    Diagnostic,
    DiagnosticKind,
    ScanResult,
    Severity,
    SourceLine,
)

from .grammar import (
    BareHeader,
    FileBlockHeader,
    NamedBlockHeader,
    classify_header,
    is_fence_close,
    match_fence_open,
)

logger = logging.getLogger(__name__)


@dataclass
class OpenFence:
    """State of the fence currently being read."""

    prefix: str
    marker: str
    opened_at: int
    language: str = ""
    name: Optional[str] = None
    path: Optional[str] = None
    block: Block = field(default_factory=Block)

    @property
    def tracked(self) -> bool:
        return self.name is not None or self.path is not None


def implicit_target(document: str, language: str) -> str:
    """Target file for a fence that only names a language."""
    return f"{document}.{language}"


class Scanner:
    """Extracts fenced regions from documents into partial registries.

    One Scanner can scan any number of documents; each call returns an
    independent ScanResult so that a driver can merge them in order.
    """

    def scan_text(self, text: str, document: str) -> ScanResult:
        """Scan an in-memory document."""
        return self.scan(io.StringIO(text), document)

    def scan(self, stream: Iterable[str], document: str) -> ScanResult:
        """Scan *stream* (any iterable of lines) identified as *document*.

        Read errors raised while iterating abort this document only; blocks
        flushed before the error stay in the returned result.
        """
        result = ScanResult(document=document)
        fence: Optional[OpenFence] = None
        line_number = 0

        try:
            for raw in stream:
                line_number += 1
                if not raw.endswith("\n"):
                    raw += "\n"

                if fence is None:
                    fence = self._open(raw, document, line_number)
                    continue

                text = raw.removeprefix(fence.prefix)
                if is_fence_close(text, fence.marker):
                    self._flush(fence, result, document)
                    fence = None
                    continue

                fence.block.append(
                    SourceLine(
                        text=text,
                        document=document,
                        language=fence.language,
                        line_number=line_number,
                    )
                )
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed reading %s at line %d: %s", document, line_number + 1, exc)
            result.error = str(exc)
            result.diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.READ_FAILED,
                    severity=Severity.ERROR,
                    message=f"read failed: {exc}",
                    document=document,
                )
            )
            return result

        if fence is not None:
            logger.warning(
                "%s:%d: fence opened here is never closed; its content is dropped",
                document,
                fence.opened_at,
            )
            result.diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.UNTERMINATED_FENCE,
                    message="unterminated fence, content dropped",
                    document=document,
                    line_number=fence.opened_at,
                )
            )

        return result

    def _open(self, line: str, document: str, line_number: int) -> Optional[OpenFence]:
        """Start a fence if *line* opens one."""
        opening = match_fence_open(line)
        if opening is None:
            return None

        fence = OpenFence(prefix=opening.prefix, marker=opening.marker, opened_at=line_number)
        header = classify_header(line.removeprefix(opening.prefix))

        if isinstance(header, NamedBlockHeader):
            fence.language = header.language
            fence.name = header.name
        elif isinstance(header, FileBlockHeader):
            fence.language = header.language
            fence.path = header.path or None
        elif isinstance(header, BareHeader):
            fence.language = header.language

        if fence.name is None and fence.path is None and fence.language:
            fence.path = implicit_target(document, fence.language)

        return fence

    def _flush(self, fence: OpenFence, result: ScanResult, document: str) -> None:
        """Register a closed fence's block by target file and/or name."""
        if not fence.tracked:
            logger.debug("%s:%d: untracked fence skipped", document, fence.opened_at)
            return
        if fence.path is not None:
            result.registry.add_file(fence.path, fence.block)
        if fence.name is not None:
            result.registry.add_block(fence.name, fence.block)
        logger.debug(
            "%s:%d: flushed %d line(s) to %s",
            document,
            fence.opened_at,
            len(fence.block),
            fence.path if fence.path is not None else f'"{fence.name}"',
        )
