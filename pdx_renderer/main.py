"""Entry-point for the pdx render pipeline."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence

from pdx_renderer.model.document_model import PdxDocument
from pdx_renderer.model.sample_document import create_sample_document
from pdx_renderer.parser.pdx_loader import load_document, save_document
from pdx_renderer.renderer.config import RenderConfig
from pdx_renderer.renderer.html_renderer import HtmlRenderer
from pdx_renderer.renderer.pdf_renderer import PdfRenderer
from pdx_renderer.renderer.preview_renderer import PreviewRenderer
from pdx_renderer.renderer.resources import ImageStore
from pdx_renderer.session import EditorSession
from pdx_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

PERSISTED_SUFFIXES = {".pdx", ".json"}
OUTPUT_STEM = "document"


def build_document(input_path: Path) -> PdxDocument:
    """Load a persisted ``.pdx``/``.json`` document, or parse any other file as raw markup."""
    if input_path.suffix.lower() in PERSISTED_SUFFIXES:
        return load_document(input_path)
    session = EditorSession(PdxDocument())
    session.set_content(input_path.read_text(encoding="utf-8"))
    session.update_metadata(title=input_path.stem)
    return session.document


def render_outputs(
    document: PdxDocument,
    output_dir: Path,
    *,
    html: bool = True,
    pdf: bool = False,
    png: bool = False,
    config: Optional[RenderConfig] = None,
    images: Optional[ImageStore] = None,
) -> List[Path]:
    """Render the document into the requested formats and return the written paths."""
    output_dir.mkdir(parents=True, exist_ok=True)
    config = config or RenderConfig.from_env()
    images = images or ImageStore()
    written: List[Path] = []
    if html:
        written.append(HtmlRenderer(output_dir / f"{OUTPUT_STEM}.html", config, images).render(document))
    if pdf:
        written.append(PdfRenderer(output_dir / f"{OUTPUT_STEM}.pdf", config, images).render(document))
    if png:
        written.append(PreviewRenderer(output_dir / f"{OUTPUT_STEM}.png", config, images).render(document))
    return written


def main(
    input_file: Optional[str],
    output_dir: Optional[str] = None,
    *,
    html: bool = True,
    pdf: bool = False,
    png: bool = False,
    save_pdx: bool = False,
) -> List[Path]:
    """Run the markup → document → renderer pipeline."""
    if input_file is None:
        LOGGER.info("Rendering the built-in sample document")
        document = create_sample_document()
        base_dir = Path.cwd()
        default_output = Path.cwd() / "sample"
    else:
        input_path = Path(input_file).resolve()
        if not input_path.exists():
            raise FileNotFoundError(f"Input file not found: {input_path}")
        LOGGER.info("Building document for %s", input_path.name)
        document = build_document(input_path)
        base_dir = input_path.parent
        default_output = input_path.with_suffix("")

    output_path = Path(output_dir).resolve() if output_dir else default_output
    LOGGER.info("Rendering outputs into %s", output_path)
    written = render_outputs(document, output_path, html=html, pdf=pdf, png=png, images=ImageStore(base_dir))
    if save_pdx:
        written.append(save_document(document, output_path / f"{OUTPUT_STEM}.pdx"))
    return written


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render pdx documents and markup into HTML, PDF and PNG")
    parser.add_argument("input_file", nargs="?", help="Path to a .pdx/.json document or a raw markup text file")
    parser.add_argument("--output", help="Directory to write generated artifacts")
    parser.add_argument("--pdf", action="store_true", help="Generate a PDF output")
    parser.add_argument("--png", action="store_true", help="Generate a PNG preview image")
    parser.add_argument("--no-html", action="store_true", help="Skip the HTML output")
    parser.add_argument("--save-pdx", action="store_true", help="Also write the parsed document as .pdx")
    parser.add_argument("--sample", action="store_true", help="Render the built-in bilingual sample document")
    return parser


def cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if not args.sample and args.input_file is None:
        parser.error("an input file is required unless --sample is given")
    written = main(
        None if args.sample else args.input_file,
        args.output,
        html=not args.no_html,
        pdf=args.pdf,
        png=args.png,
        save_pdx=args.save_pdx,
    )
    for path in written:
        print(path)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli())
