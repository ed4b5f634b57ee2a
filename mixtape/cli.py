from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Optional, Sequence, TextIO

import yaml

from .commands import apply as cmd_apply
from .commands import doctor as cmd_doctor
from .config import Settings, find_config
from .errors import MixtapeError

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[2m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}

logger = logging.getLogger(__name__)


def _paint(text: str, levelno: int, use_color: bool) -> str:
    color = LEVEL_COLORS.get(levelno) if use_color else None
    if not color:
        return text
    return f"{color}{text}{C_RESET}"


class ColorFormatter(logging.Formatter):
    """Colour whole log lines by level; plain text when the stream is not a terminal."""

    def __init__(self, fmt: str, *, use_color: bool) -> None:
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        return _paint(super().format(record), record.levelno, self.use_color)


class ProblemSummaryHandler(logging.Handler):
    """Keep warnings and errors logged during a run for the closing summary."""

    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.lines: list[str] = []
        self.counts: Counter[str] = Counter()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except (TypeError, ValueError):
            self.handleError(record)
            return
        self.lines.append(line)
        self.counts[record.levelname.lower()] += 1

    def summary_lines(self, *, use_color: bool = False) -> list[str]:
        if not self.lines:
            return []
        totals = ", ".join(f"{count} {level}(s)" for level, count in sorted(self.counts.items()))
        header = _paint(f"Problems logged during this run ({totals}):", logging.WARNING, use_color)
        return [header] + [f" - {line}" for line in self.lines]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mixtape", description="Apply change batches to a playlist snapshot"
    )
    parser.add_argument("--config", type=Path, help="Path to mixtape.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    apply_parser = subparsers.add_parser(
        "apply", help="Apply a changes file to a snapshot and write the result"
    )
    apply_parser.add_argument(
        "--in", dest="snapshot_in", type=Path, required=True, help="Snapshot to read"
    )
    apply_parser.add_argument(
        "--changes", type=Path, required=True, help="Changes file to apply"
    )
    apply_parser.add_argument(
        "--out",
        dest="snapshot_out",
        type=Path,
        required=True,
        help="Where the resulting snapshot is written",
    )
    doctor_parser = subparsers.add_parser(
        "doctor", help="Check a snapshot for index and reference problems"
    )
    doctor_parser.add_argument(
        "--in", dest="snapshot_in", type=Path, required=True, help="Snapshot to check"
    )
    return parser


def configure_logging(level_name: str) -> ProblemSummaryHandler:
    log_level = getattr(logging, level_name.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    console = logging.StreamHandler()
    console.setFormatter(ColorFormatter(LOG_FORMAT, use_color=_is_terminal(console.stream)))
    root_logger.addHandler(console)

    summary = ProblemSummaryHandler()
    summary.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(summary)
    return summary


def _is_terminal(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _print_apply_report(report: cmd_apply.ApplyReport) -> None:
    print(f"Applied {report.applied} of {report.total} change(s).")
    if report.ok:
        return
    print("Problem with executing changes. List of problems:")
    for failure in report.failures:
        print(f" - {failure}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    summary = configure_logging(args.log_level)

    try:
        config_path = find_config(args.config)
        settings = Settings.load(config_path) if config_path else Settings()
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Problem reading the config file: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    if config_path:
        logger.info("Using config %s", config_path)

    try:
        match args.command:
            case "apply":
                report = cmd_apply.run(
                    settings,
                    snapshot_in=args.snapshot_in,
                    changes=args.changes,
                    snapshot_out=args.snapshot_out,
                )
                _print_apply_report(report)
                return EXIT_SUCCESS if report.ok else EXIT_FAILURE
            case "doctor":
                doctor_report = cmd_doctor.run(settings, snapshot=args.snapshot_in)
                for line in doctor_report.checks:
                    print(line)
                return EXIT_SUCCESS if doctor_report.ok else EXIT_FAILURE
            case _:
                parser.error("Unknown command")
    except MixtapeError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_FAILURE
    finally:
        lines = summary.summary_lines(use_color=_is_terminal(sys.stdout))
        if lines:
            print()
            print("\n".join(lines))
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
