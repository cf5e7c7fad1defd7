"""Command-line interface for the add-on usage audit."""

from __future__ import annotations

import argparse
import json
import logging
import os
import webbrowser
from pathlib import Path
from typing import Dict, List, Optional

from .analysis import perform_analysis
from .catalog import load_catalog
from .config import CATALOG_FILENAME, PRESETS_DIRNAME, REPORT_FILENAME, launcher_dir
from .errors import AddonAuditError, FileAccessError
from .logging_config import setup_logging
from .models import AddonAnalysis
from .presets import load_presets
from .report import create_report

logger = logging.getLogger(__name__)


def analyse_launcher(directory: Path) -> List[AddonAnalysis]:
    """Load the catalog and presets under *directory* and analyse them."""

    addons = load_catalog(directory / CATALOG_FILENAME)
    presets = load_presets(directory / PRESETS_DIRNAME)
    return perform_analysis(addons, presets)


def write_report(analysis: List[AddonAnalysis], destination: Path) -> Path:
    document = create_report(analysis)
    # the destination only ever holds a complete report
    partial = destination.with_name(destination.name + ".partial")
    try:
        partial.write_text(document, encoding="utf-8")
        os.replace(partial, destination)
    except OSError as exc:
        partial.unlink(missing_ok=True)
        raise FileAccessError(f"Failed to save {destination.name}", exc) from exc
    logger.info("Wrote report for %d add-ons to %s", len(analysis), destination)
    return destination


def open_report(path: Path) -> None:
    if not webbrowser.open(path.resolve().as_uri()):
        logger.warning("Could not open %s in a browser, open it manually", path)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Report on installed launcher add-ons and how your presets use them"
    )
    parser.add_argument(
        "--launcher-dir",
        type=Path,
        default=None,
        help="Launcher data directory (defaults to the platform's local data dir)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(REPORT_FILENAME),
        help="Destination path for the HTML report",
    )
    parser.add_argument(
        "--format",
        choices=["html", "json"],
        default="html",
        help="Output format",
    )
    parser.add_argument("--no-open", action="store_true", help="Do not open the report afterwards")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        directory = args.launcher_dir or launcher_dir()
        analysis = analyse_launcher(directory)

        if args.format == "json":
            data: List[Dict[str, object]] = [entry.to_dict() for entry in analysis]
            print(json.dumps(data, indent=2, sort_keys=True))
            return 0

        destination = write_report(analysis, args.output)
    except AddonAuditError as exc:
        logger.error("%s", exc)
        return 1

    if not args.no_open:
        open_report(destination)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
