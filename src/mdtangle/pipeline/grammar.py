"""Line grammar for fenced code regions and macro references.

Each classifier returns a tagged variant so callers dispatch on type:

- Fence headers: NamedBlockHeader, FileBlockHeader, BareHeader, or NoMatch
- Content lines: MacroReference or PlainLine

Header forms (after the fence's indentation is removed):

    ```go "helper"        named block, optional language
    ```go > cmd/main.go   file block, language required
    ```go                 bare, tangled to <document>.go
    ```                   bare, untracked
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

FENCE_MARKERS = ("```", "~~~")

# Whitespace as understood by the header grammar: space, tab, CR, LF, FF
_WS = r"[ \t\r\n\f]"
_FENCE = r"(```|~~~)"
_LANG = r"[A-Za-z0-9_+]"

_FENCE_OPEN_RE = re.compile(rf"({_WS}*){_FENCE}")
_NAMED_HEADER_RE = re.compile(rf'{_FENCE}{_WS}?({_LANG}*){_WS}*"(.+)"')
_FILE_HEADER_RE = re.compile(rf"{_FENCE}{_WS}?({_LANG}+){_WS}+>{_WS}*([A-Za-z0-9_./-]*)")
_BARE_LANG_HEADER_RE = re.compile(rf"{_FENCE}{_WS}?({_LANG}+)")
_MACRO_REF_RE = re.compile(rf"({_WS}*)<<<(.+)>>>{_WS}*")


@dataclass(frozen=True)
class FenceOpen:
    """A line that opens a fence; *prefix* is its indentation."""

    prefix: str
    marker: str


@dataclass(frozen=True)
class NamedBlockHeader:
    marker: str
    language: str
    name: str


@dataclass(frozen=True)
class FileBlockHeader:
    marker: str
    language: str
    path: str


@dataclass(frozen=True)
class BareHeader:
    marker: str
    language: str = ""


@dataclass(frozen=True)
class MacroReference:
    """A content line standing for the expansion of block *name*."""

    prefix: str
    name: str


@dataclass(frozen=True)
class PlainLine:
    text: str


@dataclass(frozen=True)
class NoMatch:
    text: str


Header = Union[NamedBlockHeader, FileBlockHeader, BareHeader]


def match_fence_open(line: str) -> Optional[FenceOpen]:
    """Return the fence opened by *line*, or None if it opens nothing."""
    match = _FENCE_OPEN_RE.match(line)
    if match is None:
        return None
    return FenceOpen(prefix=match.group(1), marker=match.group(2))


def classify_header(line: str) -> Union[Header, NoMatch]:
    """Classify a fence header line with its indentation already removed."""
    header = line.strip()

    if match := _NAMED_HEADER_RE.fullmatch(header):
        return NamedBlockHeader(
            marker=match.group(1), language=match.group(2), name=match.group(3)
        )
    if match := _FILE_HEADER_RE.fullmatch(header):
        return FileBlockHeader(
            marker=match.group(1), language=match.group(2), path=match.group(3)
        )
    if match := _BARE_LANG_HEADER_RE.fullmatch(header):
        return BareHeader(marker=match.group(1), language=match.group(2))
    for marker in FENCE_MARKERS:
        if header.startswith(marker):
            return BareHeader(marker=marker)
    return NoMatch(text=line)


def is_fence_close(line: str, marker: str) -> bool:
    """True if *line* is exactly the fence marker followed by a newline."""
    return line == marker + "\n"


def classify_content(line: str) -> Union[MacroReference, PlainLine]:
    """Classify a line from inside a fence.

    A macro reference must occupy the whole line: optional indentation,
    ``<<<name>>>``, then only whitespace up to and including the newline.
    """
    match = _MACRO_REF_RE.fullmatch(line)
    if match is None:
        return PlainLine(text=line)
    return MacroReference(prefix=match.group(1), name=match.group(2))
