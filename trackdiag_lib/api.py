# --- trackdiag_lib/api.py ---
"""
trackdiag_lib/api.py: Entry points tying extraction, state updates, layout and
rendering together. Used by the CLI and the web routes.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .errors import DocumentReadError, FragmentSourceUnavailableError
from .extractor import PDFFragmentSource
from .layout import LayoutEngine
from .manual import format_markers, parse_markers
from .markers import extract_markers
from .models import DiagramInput, ExtractionResult, Scene, TextFragment
from .reconstructor import reconstruct_document
from .rendering.png_renderer import PNGRenderer
from .rendering.svg_renderer import SVGRenderer
from .summary import extract_summary, parse_between_sentence

log = logging.getLogger("trackdiag.api")


def extract_from_fragments(pages: Sequence[Sequence[TextFragment]]) -> ExtractionResult:
    """Runs line reconstruction, summary and marker extraction over all pages."""
    all_lines, lines_by_page = reconstruct_document(pages)
    summary = extract_summary(all_lines)
    markers = extract_markers(all_lines)
    log.info(
        "Extracted title=%r, %d items, %d markers from %d lines.",
        summary.title,
        len(summary.items),
        len(markers),
        len(all_lines),
    )
    return ExtractionResult(
        summary=summary,
        markers=markers,
        page_count=len(pages),
        total_items=sum(len(p) for p in pages),
        lines_by_page=lines_by_page,
    )


def apply_extraction(diagram: DiagramInput, result: ExtractionResult) -> None:
    """Writes extraction results into the diagram; empty results leave fields as they were."""
    if result.summary.title:
        diagram.update(title=result.summary.title)
    if result.summary.items:
        diagram.update(items="\n".join(result.summary.items))
    if result.markers:
        diagram.update(markers_text=format_markers(result.markers))


def import_status(result: ExtractionResult) -> str:
    if result.markers:
        return f"Imported {len(result.markers)} markers from PDF."
    return "PDF imported, but no km markers detected."


def import_document(
    diagram: DiagramInput,
    pdf_path: Optional[str],
    source_factory: Optional[Callable[[str], Any]] = PDFFragmentSource,
) -> Tuple[ExtractionResult, str]:
    """
    Extracts a PDF into the diagram state and returns the result with a status.

    The diagram is only modified after the whole document has been read and
    analysed, so a failure at any point leaves it untouched.
    """
    if not pdf_path:
        raise FileNotFoundError("Select a PDF to import.")
    if source_factory is None:
        raise FragmentSourceUnavailableError()

    log.info("Reading PDF '%s'...", pdf_path)
    source = source_factory(pdf_path)
    try:
        pages = source.read_pages()
    except Exception as e:
        log.error("Failed to read PDF '%s': %s", pdf_path, e, exc_info=True)
        raise DocumentReadError() from e

    result = extract_from_fragments(pages)
    apply_extraction(diagram, result)
    status = import_status(result)
    log.info(status)
    return result, status


def apply_between_sentence(diagram: DiagramInput, sentence: str) -> bool:
    """Fills from/to from a 'between X and Y' sentence. Returns True on a match."""
    found = parse_between_sentence(sentence.strip()) if sentence.strip() else None
    if not found:
        return False
    diagram.update(from_label=found[0], to_label=found[1])
    return True


def build_scene(
    diagram: DiagramInput,
    style_options: Optional[Dict[str, Any]] = None,
    labels: Optional[Dict[str, str]] = None,
) -> Scene:
    """Lays out the diagram; raises NoMarkersError when it has no markers."""
    return LayoutEngine(style_options, labels).build_scene(diagram)


def render_svg(scene: Scene, style_options: Optional[Dict[str, Any]] = None) -> str:
    return SVGRenderer(scene, style_options).render()


def render_png(scene: Scene, style_options: Optional[Dict[str, Any]] = None) -> bytes:
    return PNGRenderer(scene, style_options).render()


def marker_rows(diagram: DiagramInput) -> List[Dict[str, Any]]:
    """Markers as plain dicts, e.g. for tabular display."""
    return [
        {"km": m.km, "label": m.label, "side": m.side, "icon": m.icon}
        for m in parse_markers(diagram.markers_text)
    ]
