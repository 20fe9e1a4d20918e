"""Command-line entry point for PerfLite.

Reads stack text from a file or stdin and writes JSON to stdout:
- ``frames``: the four-field frame records
- ``numbers``: every digit run
- ``pairs``: adjacent-number line/column candidates
- ``error``: the full parsed error, with framework labels when enabled
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import structlog

from perflite._version import __version__

log = structlog.get_logger()

MODES = ("frames", "numbers", "pairs", "error")


def setup_logging(debug: bool = False, log_format: str | None = None) -> None:
    """Configure structured logging from CLI options."""
    from perflite.utils.logging import LogFormat, LogLevel, configure_logging

    configure_logging(
        level=LogLevel.DEBUG if debug else LogLevel.WARNING,
        log_format=LogFormat((log_format or "console").lower()),
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="perflite",
        description="PerfLite - parse JavaScript error stacks into structured frames",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="File containing stack text (default: stdin)",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file",
    )

    parser.add_argument(
        "-m",
        "--mode",
        choices=MODES,
        default="frames",
        help="What to extract (default: frames)",
    )

    parser.add_argument(
        "--strategy",
        choices=["auto", "batch", "scalar"],
        default=None,
        help="Numeric scan strategy (overrides config)",
    )

    parser.add_argument(
        "--frameworks",
        action="store_true",
        help="Attribute frames to frameworks (error mode)",
    )

    parser.add_argument(
        "--sanitize",
        action="store_true",
        help="Redact secrets before parsing (error mode)",
    )

    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Keep at most N frames",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging, including per-field degradation reports",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default=None,
        help="Log output format (default: console, or the config file setting)",
    )

    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print metrics in Prometheus text format to stderr when done",
    )

    return parser.parse_args(argv)


def read_input(path: Path | None) -> str:
    """Read stack text from a file or stdin."""
    if path is None:
        return sys.stdin.read()
    return path.read_text(encoding="utf-8", errors="replace")


def error_to_dict(parsed: Any) -> dict[str, Any]:
    from perflite.core.export import frames_to_records

    result: dict[str, Any] = {
        "name": parsed.name,
        "message": parsed.message,
        "source": parsed.source,
        "timestamp": parsed.timestamp,
        "frames": frames_to_records(parsed.frames),
    }
    if parsed.annotated_frames:
        result["frameworks"] = [item.framework for item in parsed.annotated_frames]
    return result


def run(args: argparse.Namespace) -> int:
    """Execute one CLI invocation.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from perflite.config.loader import load_config
    from perflite.core.error_parser import ErrorParser
    from perflite.core.export import export_frames
    from perflite.core.line_column import LineColumnExtractor
    from perflite.core.numeric_scanner import NumericScanner
    from perflite.core.stack_parser import StackParser
    from perflite.utils.diagnostics import StructlogSink

    log.debug("cli_starting", version=__version__, mode=args.mode)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        log.error("configuration_file_not_found", path=str(args.config), error=str(e))
        return 1
    except ValueError as e:
        log.error("configuration_invalid", error=str(e))
        return 1

    if args.config is not None:
        from perflite.utils.logging import LogLevel, configure_from_config

        if args.format:
            config.logging.format = args.format
        configure_from_config(config.logging, level=LogLevel.DEBUG if args.debug else None)

    if args.strategy:
        config.scanner.strategy = args.strategy
    if args.frameworks:
        config.frameworks.enabled = True
    if args.sanitize:
        config.parser.sanitize = True
    if args.max_depth is not None:
        if args.max_depth < 1:
            log.error("configuration_invalid", error="--max-depth must be at least 1")
            return 1
        config.parser.max_stack_depth = args.max_depth

    try:
        text = read_input(args.input)
    except OSError as e:
        log.error("input_read_error", path=str(args.input), error=str(e))
        return 1

    sink = StructlogSink() if args.debug else None

    if args.mode == "frames":
        frames = StackParser(sink=sink).parse(text, max_frames=config.parser.max_stack_depth)
        log.debug("stack_parsed", mode=args.mode, frames=len(frames))
        output = export_frames(frames, sink=sink)
    elif args.mode == "numbers":
        scanner = NumericScanner(strategy=config.scanner.strategy, sink=sink)
        output = json.dumps(scanner.extract_numbers(text))
    elif args.mode == "pairs":
        scanner = NumericScanner(strategy=config.scanner.strategy, sink=sink)
        pairs = LineColumnExtractor(scanner).extract_line_column_pairs(text)
        output = json.dumps([list(pair) for pair in pairs])
    else:
        parsed = ErrorParser(config=config, sink=sink).parse(text)
        log.debug(
            "stack_parsed", mode=args.mode, error_name=parsed.name, frames=len(parsed.frames)
        )
        output = json.dumps(error_to_dict(parsed), ensure_ascii=True)

    print(output)

    if args.metrics:
        from perflite.utils.metrics import get_metrics

        print(get_metrics().to_prometheus_format(), file=sys.stderr)

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_format=args.format)

    try:
        return run(args)
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
