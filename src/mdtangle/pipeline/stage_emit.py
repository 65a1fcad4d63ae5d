"""Emit Stage - Render an expanded block to text with line directives.

Whenever provenance jumps (first line, a gap in line numbers, or a change
of document) a directive is written ahead of the line so compilers and
debuggers report positions in the original document:

    go, golang   //line README.md:12
    c, C, cpp    #line 12 "README.md"

Languages without a known format get no directive.
"""

from typing import Optional

from mdtangle.models import Block, SourceLine

GO_LINE_DIRECTIVE = "//line {document}:{line_number}\n"
C_LINE_DIRECTIVE = '#line {line_number} "{document}"\n'

DIRECTIVE_FORMATS = {
    "go": GO_LINE_DIRECTIVE,
    "golang": GO_LINE_DIRECTIVE,
    "c": C_LINE_DIRECTIVE,
    "C": C_LINE_DIRECTIVE,
    "cpp": C_LINE_DIRECTIVE,
}


def directive_for(line: SourceLine) -> Optional[str]:
    """Directive pointing at *line*'s origin, or None for unknown languages."""
    template = DIRECTIVE_FORMATS.get(line.language)
    if template is None:
        return None
    return template.format(document=line.document, line_number=line.line_number)


class Emitter:
    """Renders fully expanded blocks to output text."""

    def __init__(self, directives: bool = True):
        self.directives = directives

    def render(self, block: Block) -> str:
        """Flatten *block*, inserting directives where provenance is discontinuous."""
        parts: list[str] = []
        document: Optional[str] = None
        line_number: Optional[int] = None

        for line in block:
            contiguous = (
                line_number is not None
                and line.line_number == line_number + 1
                and line.document == document
            )
            if self.directives and not contiguous:
                directive = directive_for(line)
                if directive is not None:
                    parts.append(directive)

            parts.append(line.text)
            document = line.document
            line_number = line.line_number

        return "".join(parts)
