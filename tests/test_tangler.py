"""Tests for the two-phase tangle orchestrator."""

from unittest.mock import patch

import pytest

from mdtangle.models import DiagnosticKind
from mdtangle.pipeline.tangler import Tangler

LITERATE_GO = """\
# Hello

The program:

```go > main.go
package main

func main() {
	<<<body>>>
}
```

The body:

```go "body"
println("hello")
```
"""


@pytest.fixture
def tangler(output_dir):
    return Tangler(output_dir=output_dir, line_directives=True, max_depth=None)


class TestScanDocuments:
    """Tests for phase 1."""

    def test_documents_merge_in_order(self, tangler, docs_dir):
        first = docs_dir / "a.md"
        second = docs_dir / "b.md"
        first.write_text("```go > out.go\none\n```\n")
        second.write_text("```go > out.go\ntwo\n```\n")

        registry, results = tangler.scan_documents([second, first])

        assert registry.sealed
        assert registry.files["out.go"].text() == "two\none\n"
        assert [r.document for r in results] == [str(second), str(first)]

    def test_missing_document_is_skipped(self, tangler, docs_dir):
        good = docs_dir / "good.md"
        good.write_text("```c > a.c\nint x;\n```\n")

        registry, results = tangler.scan_documents([docs_dir / "missing.md", good])

        assert not results[0].ok
        assert results[0].diagnostics[0].kind == DiagnosticKind.READ_FAILED
        assert results[1].ok
        assert list(registry.files) == ["a.c"]

    def test_document_identified_by_path_as_given(self, tangler, docs_dir):
        doc = docs_dir / "lit.md"
        doc.write_text("```go > a.go\nx\n```\n")

        registry, _ = tangler.scan_documents([str(doc)])

        assert registry.files["a.go"][0].document == str(doc)


class TestWriteOutputs:
    """Tests for phase 2."""

    def test_expanded_file_with_directives(self, tangler, docs_dir, output_dir):
        doc = docs_dir / "hello.md"
        doc.write_text(LITERATE_GO)

        report = tangler.run([doc])

        assert report.ok
        assert (output_dir / "main.go").read_text() == (
            f"//line {doc}:6\n"
            "package main\n"
            "\n"
            "func main() {\n"
            f"//line {doc}:16\n"
            '\tprintln("hello")\n'
            f"//line {doc}:10\n"
            "}\n"
        )

    def test_reference_defined_in_later_document(self, tangler, docs_dir, output_dir):
        main = docs_dir / "main.md"
        lib = docs_dir / "lib.md"
        main.write_text("```python > app.py\ndef run():\n    <<<run body>>>\n```\n")
        lib.write_text('```python "run body"\nreturn 42\n```\n')

        report = tangler.run([main, lib])

        assert report.ok
        assert (output_dir / "app.py").read_text() == "def run():\n    return 42\n"

    def test_same_target_from_two_documents(self, tangler, docs_dir, output_dir):
        first = docs_dir / "one.md"
        second = docs_dir / "two.md"
        first.write_text("```text > out.go\nfirst\n```\n")
        second.write_text("```text > out.go\nsecond\n```\n")

        tangler.run([first, second])

        assert (output_dir / "out.go").read_text() == "first\nsecond\n"

    def test_creates_intermediate_directories(self, tangler, docs_dir, output_dir):
        doc = docs_dir / "doc.md"
        doc.write_text("```sh > scripts/ci/run.sh\necho hi\n```\n")

        tangler.run([doc])

        assert (output_dir / "scripts" / "ci" / "run.sh").read_text() == "echo hi\n"

    def test_overwrites_existing_file(self, tangler, docs_dir, output_dir):
        (output_dir / "a.txt").write_text("stale content that is longer\n")
        doc = docs_dir / "doc.md"
        doc.write_text("```txt > a.txt\nfresh\n```\n")

        tangler.run([doc])

        assert (output_dir / "a.txt").read_text() == "fresh\n"

    def test_unresolved_reference_is_visible(self, tangler, docs_dir, output_dir):
        doc = docs_dir / "doc.md"
        doc.write_text("```python > a.py\nx = 1\n  <<<nowhere>>>\n```\n")

        report = tangler.run([doc])

        assert report.ok
        assert (output_dir / "a.py").read_text() == "x = 1\n  <<<nowhere>>>\n"
        assert len(report.unresolved) == 1

    def test_directives_disabled(self, docs_dir, output_dir):
        doc = docs_dir / "hello.md"
        doc.write_text(LITERATE_GO)

        Tangler(output_dir=output_dir, line_directives=False).run([doc])

        assert "//line" not in (output_dir / "main.go").read_text()

    def test_write_failure_isolated_to_target(self, tangler, docs_dir, output_dir):
        doc = docs_dir / "doc.md"
        doc.write_text("```txt > bad.txt\nx\n```\n```txt > good.txt\ny\n```\n")
        real_open = open

        def failing_open(path, *args, **kwargs):
            if str(path).endswith("bad.txt"):
                raise PermissionError(13, "Permission denied", str(path))
            return real_open(path, *args, **kwargs)

        with patch("builtins.open", side_effect=failing_open):
            report = tangler.run([doc])

        assert not report.ok
        bad, good = report.writes
        assert not bad.ok
        assert bad.diagnostics[-1].kind == DiagnosticKind.WRITE_FAILED
        assert good.ok
        assert (output_dir / "good.txt").read_text() == "y\n"

    def test_depth_limit_fails_only_that_target(self, docs_dir, output_dir):
        doc = docs_dir / "doc.md"
        doc.write_text(
            '```txt "loop"\n<<<loop>>>\n```\n'
            "```txt > loop.txt\n<<<loop>>>\n```\n"
            "```txt > fine.txt\nok\n```\n"
        )

        report = Tangler(output_dir=output_dir, max_depth=10).run([doc])

        assert [w.ok for w in report.writes] == [False, True]
        assert not (output_dir / "loop.txt").exists()
        assert (output_dir / "fine.txt").read_text() == "ok\n"

    def test_bytes_written(self, tangler, docs_dir, output_dir):
        doc = docs_dir / "doc.md"
        doc.write_text("```txt > a.txt\nhello\n```\n")

        report = tangler.run([doc])

        assert report.writes[0].bytes_written == 6
        assert report.writes[0].path == str(output_dir / "a.txt")


class TestOutputPaths:
    """Tests for keeping targets under the output directory."""

    def test_implicit_target_of_absolute_document(self, tangler, docs_dir, output_dir):
        doc = (docs_dir / "notes.md").resolve()
        doc.write_text("```go\npackage main\n```\n")

        report = tangler.run([str(doc)])

        written = output_dir / str(doc).lstrip("/")
        assert report.ok
        assert report.writes[0].path == str(written)
        assert written.read_text() == f"//line {doc}:2\npackage main\n"
        assert not (docs_dir / "notes.md.go").exists()

    def test_absolute_file_target(self, tangler, docs_dir, output_dir, tmp_path):
        outside = tmp_path / "escaped.txt"
        doc = docs_dir / "doc.md"
        doc.write_text(f"```txt > {outside}\nx\n```\n")

        report = tangler.run([doc])

        assert report.ok
        assert not outside.exists()
        assert (output_dir / str(outside).lstrip("/")).read_text() == "x\n"

    def test_relative_target(self, tangler, output_dir):
        assert tangler.output_path("pkg/a.go") == output_dir / "pkg" / "a.go"


class TestLineSplitting:
    """Tests for how document files are split into lines."""

    def test_lone_carriage_return_stays_in_line(self, tangler, docs_dir):
        doc = docs_dir / "doc.md"
        doc.write_bytes(b'```go > a.go\nx := "a\rb"\ny\n```\n')

        registry, _ = tangler.scan_documents([doc])

        assert [(line.line_number, line.text) for line in registry.files["a.go"]] == [
            (2, 'x := "a\rb"\n'),
            (3, "y\n"),
        ]

    def test_matches_in_memory_scan(self, tangler, docs_dir):
        text = '```go > a.go\nx := "a\rb"\ny\n```\n'
        doc = docs_dir / "doc.md"
        doc.write_bytes(text.encode())

        registry, _ = tangler.scan_documents([doc])
        in_memory = tangler.scanner.scan_text(text, str(doc))

        assert registry.files["a.go"].text() == in_memory.registry.files["a.go"].text()
