"""Registry of named blocks and target files built by the scan phase."""

from dataclasses import dataclass, field
from typing import Optional

from mdtangle.errors import RegistrySealedError

from .block import Block


@dataclass
class Registry:
    """Two append-only mappings: block name -> Block and target path -> Block.

    Registering under an existing key concatenates, so several fenced
    regions (in one or many documents) can contribute to the same name or
    file. Once sealed the registry is read-only.
    """

    blocks: dict[str, Block] = field(default_factory=dict)
    files: dict[str, Block] = field(default_factory=dict)
    sealed: bool = False

    def add_block(self, name: str, block: Block) -> None:
        """Append *block* to the named block *name*."""
        self._append(self.blocks, name, block)

    def add_file(self, path: str, block: Block) -> None:
        """Append *block* to the content of target file *path*."""
        self._append(self.files, path, block)

    def lookup(self, name: str) -> Optional[Block]:
        """Return the named block, or None if nothing was registered under *name*."""
        return self.blocks.get(name)

    def merge(self, other: "Registry") -> None:
        """Append every entry of *other*, keeping its insertion order."""
        for name, block in other.blocks.items():
            self.add_block(name, block)
        for path, block in other.files.items():
            self.add_file(path, block)

    def seal(self) -> "Registry":
        """Make the registry read-only and return it."""
        self.sealed = True
        return self

    def _append(self, mapping: dict[str, Block], key: str, block: Block) -> None:
        if self.sealed:
            raise RegistrySealedError(f"cannot register {key!r}: registry is sealed")
        # Entries never alias the caller's Block
        mapping.setdefault(key, Block()).extend(block.lines)
