"""Pytest configuration and fixtures."""

import pytest

from mdtangle.models import Block, SourceLine


@pytest.fixture
def docs_dir(tmp_path):
    """Create a temporary directory for input documents."""
    docs = tmp_path / "docs"
    docs.mkdir()
    return docs


@pytest.fixture
def output_dir(tmp_path):
    """Create a temporary output directory."""
    out_dir = tmp_path / "output"
    out_dir.mkdir()
    return out_dir


@pytest.fixture
def make_block():
    """Build a Block from texts numbered consecutively from *start*."""

    def _make(texts, document="doc.md", language="python", start=1):
        return Block(
            [
                SourceLine(
                    text=text,
                    document=document,
                    language=language,
                    line_number=start + offset,
                )
                for offset, text in enumerate(texts)
            ]
        )

    return _make
