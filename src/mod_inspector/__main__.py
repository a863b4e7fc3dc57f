"""Entry point for running Mod Inspector.

This module provides the command line entry point. It handles:
- Configuration loading
- Logging setup
- Opening archives and attaching analyzer output
- Printing error indexes, transcript entries, dependency trees and the
  combined graph as JSON
"""

import argparse
import asyncio
import dataclasses
import json
import sys
from pathlib import Path
from typing import Any

import structlog

from mod_inspector._version import __version__
from mod_inspector.utils.logging import LogEventNames

log = structlog.get_logger()


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from mod_inspector.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.INFO
    configure_logging(level=level, log_format=LogFormat(log_format.lower()))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="mod-inspector",
        description="Mod Inspector - Error attribution and include dependency analysis",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "archives",
        type=Path,
        nargs="+",
        help="Zip archives to inspect (archive id = file name without extension)",
    )

    parser.add_argument(
        "--result",
        type=Path,
        default=None,
        help="Analyzer JSON result for the first archive",
    )

    parser.add_argument(
        "--transcript",
        type=Path,
        default=None,
        help="Diagnostic transcript for the first archive (overrides the result's stderr)",
    )

    parser.add_argument(
        "--entry",
        default=None,
        help="Entry file to resolve includes from (default: from config, entry.lua)",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: built-in defaults)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    return parser.parse_args(argv)


def read_result(result_path: Path | None, transcript_path: Path | None) -> Any:
    """Build the analyzer result for the first archive from the given files.

    Returns:
        AnalysisResult, or None when neither file is given
    """
    from mod_inspector.core.package_parser import parse_analysis_result
    from mod_inspector.models.analysis import AnalysisResult

    result = None
    if result_path is not None:
        result = parse_analysis_result(json.loads(result_path.read_text(encoding="utf-8")))

    if transcript_path is not None:
        transcript = transcript_path.read_text(encoding="utf-8", errors="replace")
        if result is None:
            result = AnalysisResult(valid=False, error="No analyzer result", stderr=transcript)
        else:
            result = dataclasses.replace(result, stderr=transcript)

    return result


async def run_inspection(args: argparse.Namespace) -> int:
    """Inspect the archives and print the JSON report.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from mod_inspector.adapters.archive import ArchiveOpenError, ZipContentProvider
    from mod_inspector.config.loader import load_config
    from mod_inspector.core.inspector import ModInspector
    from mod_inspector.utils.logging import clear_context, configure_logging

    log.info(LogEventNames.INSPECTION_STARTING, version=__version__, archives=len(args.archives))

    provider = ZipContentProvider()
    try:
        config = load_config(args.config)
        if args.config is not None:
            configure_logging(
                level="DEBUG" if args.debug else config.logging.level,
                log_format=config.logging.format,
                file_path=config.logging.file.path if config.logging.file.enabled else None,
                file_enabled=config.logging.file.enabled,
            )
        if args.entry:
            config.analysis.entry_file = args.entry

        result = read_result(args.result, args.transcript)
        inspector = ModInspector(config)

        for index, archive_path in enumerate(args.archives):
            archive_id = archive_path.stem
            provider.open(archive_id, archive_path)
            inspector.load(archive_id, provider, result if index == 0 else None)

        archives: dict[str, Any] = {}
        for archive_id in inspector.archive_ids:
            tree = await inspector.build_tree(archive_id)
            archives[archive_id] = {
                "errors": inspector.errors_for(archive_id).to_dict(),
                "entries": [entry.to_dict() for entry in inspector.entries_for(archive_id)],
                "tree": tree.to_dict(),
            }

        graph = await inspector.build_graph()
        report = {
            "archives": archives,
            "graph": graph.to_dict(),
            "summary": inspector.summarize(graph).to_dict(),
        }
        print(json.dumps(report, indent=2))

        log.info(LogEventNames.INSPECTION_COMPLETE, cycles=len(graph.cycles))
        return 0

    except FileNotFoundError as e:
        log.error(LogEventNames.INPUT_NOT_FOUND, error=str(e))
        return 1
    except ArchiveOpenError as e:
        log.error(LogEventNames.ARCHIVE_OPEN_ERROR, error=str(e))
        return 1
    except ValueError as e:
        log.error(LogEventNames.INPUT_INVALID, error=str(e))
        return 1
    except OSError as e:
        log.error(LogEventNames.INPUT_UNREADABLE, error=str(e))
        return 1
    finally:
        provider.close_all()
        clear_context()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_format=args.format)

    try:
        return asyncio.run(run_inspection(args))
    except KeyboardInterrupt:
        log.info(LogEventNames.INTERRUPTED)
        return 130


if __name__ == "__main__":
    sys.exit(main())
