"""Expand Stage - Resolve macro references against the registry.

A content line consisting only of ``<<<name>>>`` (plus surrounding
whitespace) is replaced by the recursively expanded lines of the named
block. The whitespace in front of the reference becomes an indentation
prefix on every substituted line, and prefixes compose across nesting
levels, outermost first:

    <<<outer>>>          outer: "  <<<inner>>>"     inner: "\tx = 1"
    -> "  \tx = 1"

Blank lines are never indented. A reference to an unknown block is kept
verbatim in the output and reported as a diagnostic.
"""

import logging
from typing import Optional

from mdtangle.errors import ExpansionDepthError
from mdtangle.models import (
    Block,
    Diagnostic,
    DiagnosticKind,
    Registry,
    SourceLine,
)

from .grammar import MacroReference, classify_content

logger = logging.getLogger(__name__)


class Expander:
    """Recursive macro expander.

    Only reads the registry. Diagnostics for unresolved references are
    collected in ``diagnostics`` in the order they are found.
    """

    def __init__(self, registry: Registry, max_depth: Optional[int] = None):
        """Initialize the expander.

        Args:
            registry: Registry holding the named blocks.
            max_depth: Maximum reference nesting. None means unlimited, in
                which case a self-referencing block recurses until Python's
                recursion limit is hit.
        """
        self.registry = registry
        self.max_depth = max_depth
        self.diagnostics: list[Diagnostic] = []

    def expand(self, block: Block, prefix: str = "") -> Block:
        """Return a reference-free copy of *block* with *prefix* applied."""
        return self._expand(block, prefix, depth=0)

    def _expand(self, block: Block, prefix: str, depth: int) -> Block:
        expanded = Block()

        for line in block:
            content = classify_content(line.text)
            if isinstance(content, MacroReference):
                target = self.registry.lookup(content.name)
                if target is not None:
                    if self.max_depth is not None and depth >= self.max_depth:
                        raise ExpansionDepthError(content.name, self.max_depth)
                    expanded.extend(
                        self._expand(target, prefix + content.prefix, depth + 1)
                    )
                    continue
                self._unresolved(line, content.name)

            expanded.append(line.indented(prefix))

        return expanded

    def _unresolved(self, line: SourceLine, name: str) -> None:
        logger.warning(
            "%s:%d: block named %r referenced but not defined",
            line.document,
            line.line_number,
            name,
        )
        self.diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.UNRESOLVED_REFERENCE,
                message=f"block named {name!r} referenced but not defined",
                document=line.document,
                line_number=line.line_number,
            )
        )


def find_unresolved(registry: Registry) -> list[Diagnostic]:
    """List every reference, in any registered block, to an undefined name.

    Unlike expansion this visits each registered line exactly once, so it
    also reports references inside named blocks no file ever includes.
    """
    found: list[Diagnostic] = []
    seen: set[tuple[str, int]] = set()

    for block in [*registry.files.values(), *registry.blocks.values()]:
        for line in block:
            content = classify_content(line.text)
            if not isinstance(content, MacroReference):
                continue
            if registry.lookup(content.name) is not None:
                continue
            # A fence can be both a named and a file block
            key = (line.document, line.line_number)
            if key in seen:
                continue
            seen.add(key)
            found.append(
                Diagnostic(
                    kind=DiagnosticKind.UNRESOLVED_REFERENCE,
                    message=f"block named {content.name!r} referenced but not defined",
                    document=line.document,
                    line_number=line.line_number,
                )
            )

    return found
