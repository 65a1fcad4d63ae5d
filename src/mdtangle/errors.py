"""Exceptions raised by mdtangle."""


class TangleError(Exception):
    """Base class for mdtangle errors."""


class DocumentReadError(TangleError):
    """A document could not be opened or read."""


class OutputWriteError(TangleError):
    """A target file could not be created or written."""


class ExpansionDepthError(TangleError):
    """Macro expansion nested deeper than the configured limit."""

    def __init__(self, name: str, depth: int):
        super().__init__(f"expansion of <<<{name}>>> exceeded depth {depth}")
        self.name = name
        self.depth = depth


class RegistrySealedError(TangleError):
    """A block was registered after the scan phase finished."""
