"""Pipeline stages for mdtangle.

Stages:
1. stage_scan - Extract fenced regions into a per-document registry
2. stage_expand - Resolve <<<name>>> macro references, composing indentation
3. stage_emit - Render expanded lines, inserting line directives

The tangler runs stage 1 over every document before running stages 2 and 3
once per target file.
"""

from .grammar import (
    BareHeader,
    FileBlockHeader,
    MacroReference,
    NamedBlockHeader,
    NoMatch,
    PlainLine,
    classify_content,
    classify_header,
    is_fence_close,
    match_fence_open,
)
from .stage_emit import DIRECTIVE_FORMATS, Emitter, directive_for
from .stage_expand import Expander, find_unresolved
from .stage_scan import Scanner, implicit_target
from .tangler import Tangler

__all__ = [
    # Grammar
    "BareHeader",
    "FileBlockHeader",
    "MacroReference",
    "NamedBlockHeader",
    "NoMatch",
    "PlainLine",
    "classify_content",
    "classify_header",
    "is_fence_close",
    "match_fence_open",
    # Scan
    "Scanner",
    "implicit_target",
    # Expand
    "Expander",
    "find_unresolved",
    # Emit
    "DIRECTIVE_FORMATS",
    "Emitter",
    "directive_for",
    # Orchestration
    "Tangler",
]
