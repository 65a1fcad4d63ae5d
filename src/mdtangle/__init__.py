"""mdtangle: tangle source files out of literate markdown documents."""

__version__ = "0.1.0"
