"""
Integration tests for the complete render pipeline.

Covers markup and .pdx input through every output format and the CLI.
"""

import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from pdx_renderer.main import build_document, cli, main, render_outputs
from pdx_renderer.model.sample_document import create_sample_document
from pdx_renderer.parser.pdx_loader import load_document, save_document


MARKUP = """# Quarterly notes

First paragraph.

مرحبا بالعالم

- alpha
- beta

```python
print("hi")
```

---

![Chart](chart.png)

===

Last page.
"""


class IntegrationTest(unittest.TestCase):
    """End-to-end runs writing into a temporary directory."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(self._tmp.name)

    def test_markup_file_becomes_document(self) -> None:
        source = self.tmp / "notes.txt"
        source.write_text(MARKUP, encoding="utf-8")
        document = build_document(source)
        self.assertEqual(document.metadata.title, "notes")
        self.assertEqual(len(document.content.children), 9)

    def test_pdx_file_is_loaded(self) -> None:
        path = save_document(create_sample_document(), self.tmp / "demo.pdx")
        self.assertEqual(build_document(path), load_document(path))

    def test_main_writes_every_format(self) -> None:
        source = self.tmp / "notes.md"
        source.write_text(MARKUP, encoding="utf-8")
        written = main(str(source), str(self.tmp / "out"), pdf=True, png=True, save_pdx=True)
        names = sorted(path.name for path in written)
        self.assertEqual(names, ["document.html", "document.pdf", "document.pdx", "document.png"])
        for path in written:
            self.assertGreater(path.stat().st_size, 0)
        reloaded = load_document(self.tmp / "out" / "document.pdx")
        self.assertEqual(reloaded.metadata.title, "notes")

    def test_default_output_directory(self) -> None:
        source = self.tmp / "report.txt"
        source.write_text("Hello", encoding="utf-8")
        (html,) = main(str(source))
        self.assertEqual(html, (self.tmp / "report" / "document.html").resolve())

    def test_missing_input(self) -> None:
        with self.assertRaises(FileNotFoundError):
            main(str(self.tmp / "missing.txt"))

    def test_render_outputs_respects_flags(self) -> None:
        written = render_outputs(create_sample_document(), self.tmp / "only-pdf", html=False, pdf=True)
        self.assertEqual([path.name for path in written], ["document.pdf"])

    def test_cli_sample(self) -> None:
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            code = cli(["--sample", "--output", str(self.tmp / "sample"), "--png", "--no-html"])
        self.assertEqual(code, 0)
        self.assertTrue((self.tmp / "sample" / "document.png").exists())
        self.assertFalse((self.tmp / "sample" / "document.html").exists())
        self.assertIn("document.png", stdout.getvalue())

    def test_cli_requires_input(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli([])


if __name__ == "__main__":
    unittest.main()
