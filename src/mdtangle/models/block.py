"""Block model: an ordered run of extracted source lines."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .base import SourceLine


@dataclass
class Block:
    """Ordered sequence of SourceLines.

    Order is insertion order and is the order lines appear in the output.
    Lines are only ever appended.
    """

    lines: list[SourceLine] = field(default_factory=list)

    def __iter__(self) -> Iterator[SourceLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> SourceLine:
        return self.lines[index]

    def append(self, line: SourceLine) -> None:
        self.lines.append(line)

    def extend(self, lines: Iterable[SourceLine]) -> None:
        self.lines.extend(lines)

    def text(self) -> str:
        """Verbatim concatenation of the line texts."""
        return "".join(line.text for line in self.lines)

    @property
    def documents(self) -> list[str]:
        """Documents that contributed lines, in first-seen order."""
        seen: dict[str, None] = {}
        for line in self.lines:
            seen.setdefault(line.document, None)
        return list(seen)
