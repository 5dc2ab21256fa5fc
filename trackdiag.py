#!/usr/bin/env python3
"""
trackdiag: Builds track-maintenance diagrams from PDFs or hand-written markers.

Markers come from a `km,label,side,icon` text file, an exported JSON payload
or a PDF whose text layer is mined for kilometre markers, a title and work
items. The result is written as SVG (and optionally PNG and JSON).
"""

import argparse
import logging
import sys

from rich.console import Console
from rich.table import Table

from core.log_utils import setup_logging
from trackdiag_lib import api, schema
from trackdiag_lib.config_service import DEFAULT_CONFIG_PATH, ConfigService
from trackdiag_lib.errors import TrackDiagramError
from trackdiag_lib.models import DiagramInput, example_input

log = logging.getLogger("trackdiag.main")

FIELD_ARGS = {
    "title": "title",
    "items": "items",
    "from_label": "from_label",
    "to_label": "to_label",
    "segment": "segment_label",
    "top_track": "top_track_label",
    "bottom_track": "bottom_track_label",
}


def get_cli_args(argv=None):
    """Configures and parses command-line arguments."""
    p = argparse.ArgumentParser(
        description="Builds track diagrams from PDFs or marker lists.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    g_in = p.add_argument_group("Input")
    g_in.add_argument("-i", "--input", metavar="PDF", help="PDF to extract markers from.")
    g_in.add_argument(
        "-m", "--markers", metavar="FILE", help="Marker file, one km,label,side,icon per line."
    )
    g_in.add_argument("-j", "--json", metavar="FILE", help="Previously exported JSON payload.")
    g_in.add_argument(
        "--example", action="store_true", help="Start from the bundled 47km example."
    )

    g_fields = p.add_argument_group("Diagram Fields")
    g_fields.add_argument("--title")
    g_fields.add_argument("--items", help="Work items, separated by newlines.")
    g_fields.add_argument("--from", dest="from_label", metavar="FROM")
    g_fields.add_argument("--to", dest="to_label", metavar="TO")
    g_fields.add_argument("--segment")
    g_fields.add_argument("--top-track")
    g_fields.add_argument("--bottom-track")
    g_fields.add_argument(
        "--between",
        metavar="SENTENCE",
        help="Fill --from/--to from text like 'between WAN:P11A and WAS:P11B'.",
    )

    g_out = p.add_argument_group("Output")
    g_out.add_argument("-o", "--output", help="Base name for output files.")
    g_out.add_argument("--png", action="store_true", help="Also write a PNG image.")
    g_out.add_argument(
        "--export-json", action="store_true", help="Also write the JSON payload."
    )
    g_out.add_argument(
        "--dump-page",
        type=int,
        metavar="N",
        help="Print the reconstructed text of page N of the imported PDF.",
    )
    g_out.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Config file path.")

    g_log = p.add_argument_group("Logging")
    g_log.add_argument("-v", "--verbose", action="store_true", help="Enable INFO logging.")
    g_log.add_argument("--color-logs", action="store_true", help="Enable colored logging.")
    g_log.add_argument("--log-file", metavar="FILE", help="Redirect log output to a file.")
    g_log.add_argument(
        "-d",
        "--debug",
        nargs="?",
        const="all",
        dest="debug_topics",
        metavar="TOPICS",
        help="Enable DEBUG logging (all,extract,lines,markers,summary,layout,render).",
    )
    return p.parse_args(argv)


def load_initial_state(args) -> DiagramInput:
    """Builds the starting state from --json/--example, then applies overrides."""
    if args.json:
        log.info("Loading diagram data from '%s'...", args.json)
        diagram = schema.load_json(args.json)
    elif args.example:
        diagram = example_input()
    else:
        diagram = DiagramInput()

    if args.markers:
        with open(args.markers, "r", encoding="utf-8") as f:
            diagram.update(markers_text=f.read())

    overrides = {
        field: getattr(args, arg)
        for arg, field in FIELD_ARGS.items()
        if getattr(args, arg) is not None
    }
    if overrides:
        diagram.update(**overrides)
    if args.between and not api.apply_between_sentence(diagram, args.between):
        log.warning("No 'between X and Y' found in: %s", args.between)
    return diagram


def print_markers(console: Console, diagram: DiagramInput):
    table = Table(title=diagram.title.strip() or "Markers")
    for column in ("km", "label", "side", "icon"):
        table.add_column(column, justify="right" if column == "km" else "left")
    for row in api.marker_rows(diagram):
        table.add_row(f"{row['km']:.3f}", row["label"], row["side"], row["icon"])
    console.print(table)


def main(argv=None) -> int:
    """Main entry point for the trackdiag CLI."""
    args = get_cli_args(argv)
    log_level = logging.INFO if args.verbose else logging.WARNING
    if args.debug_topics:
        log_level = logging.DEBUG
    setup_logging("trackdiag", log_level, args.color_logs, args.debug_topics, args.log_file)
    log.debug("Arguments received: %s", vars(args))

    console = Console()
    config_service = ConfigService(args.config)
    settings = config_service.get_settings()
    base = args.output or settings["Output"]["basename"]

    try:
        diagram = load_initial_state(args)
    except (OSError, ValueError, KeyError, TypeError, TrackDiagramError) as e:
        log.critical("Failed to load input data: %s", e)
        return 1

    if args.input:
        try:
            result, status = api.import_document(diagram, args.input)
        except (FileNotFoundError, TrackDiagramError) as e:
            log.critical("%s", e)
            return 1
        console.print(status)
        console.print(result.stats_text)
        if args.dump_page is not None:
            console.print(result.page_text(args.dump_page - 1), markup=False)

    if args.export_json:
        json_path = f"{base}.json"
        schema.save_json(diagram, json_path)
        log.info("Saved diagram data to '%s'", json_path)

    try:
        scene = api.build_scene(diagram, settings["Style"], settings["Labels"])
    except TrackDiagramError as e:
        log.critical("%s", e)
        return 1

    svg_path = f"{base}.svg"
    try:
        with open(svg_path, "w", encoding="utf-8") as f:
            f.write(api.render_svg(scene, settings["Style"]))
        log.info("Successfully saved SVG to '%s'", svg_path)
        if args.png:
            png_path = f"{base}.png"
            with open(png_path, "wb") as f:
                f.write(api.render_png(scene, settings["Style"]))
            log.info("Successfully saved PNG to '%s'", png_path)
    except IOError as e:
        log.error("Could not write output file: %s", e)
        return 1

    print_markers(console, diagram)
    console.print(scene.status)
    return 0


if __name__ == "__main__":
    sys.exit(main())
