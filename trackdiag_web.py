#!/usr/bin/env python3
"""trackdiag_web: Serves the diagram API over HTTP."""

import argparse
import logging
import sys

from core.log_utils import setup_logging
from trackdiag_lib.app import create_app


def main():
    """Initializes and runs the trackdiag Flask application."""
    log = logging.getLogger("trackdiag.web")

    parser = argparse.ArgumentParser(description="trackdiag HTTP server.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--config", default=None, help="Config file path.")
    g_log = parser.add_argument_group("Logging & Output")
    g_log.add_argument(
        "-v", "--verbose", action="store_true", help="Enable INFO logging for progress."
    )
    g_log.add_argument(
        "--color-logs", action="store_true", help="Enable colored logging output."
    )
    g_log.add_argument(
        "--log-file",
        metavar="FILE",
        default=None,
        help="Redirect all logging output to a specified file.",
    )
    g_log.add_argument(
        "-d",
        "--debug",
        dest="debug_topics",
        metavar="TOPICS",
        help="Enable DEBUG logging (all,web,api,extract,markers,layout,render).",
    )
    args = parser.parse_args()

    setup_logging(
        project_name="trackdiag",
        level=logging.INFO if args.verbose else logging.WARNING,
        color_logs=args.color_logs,
        debug_topics=args.debug_topics,
        log_file=args.log_file,
    )

    try:
        app = create_app({"CONFIG_PATH": args.config} if args.config else None)
    except Exception as e:
        log.critical("Failed to create the application: %s", e, exc_info=True)
        sys.exit(1)

    try:
        log.info("Starting trackdiag server at http://%s:%d...", args.host, args.port)
        from waitress import serve

        serve(app, host=args.host, port=args.port)
    except KeyboardInterrupt:
        log.info("\nServer stopped by user. Exiting.")
        sys.exit(0)


if __name__ == "__main__":
    main()
