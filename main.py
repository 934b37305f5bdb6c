"""
Main entry point for the Text Merge command line tool.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading
- Reading version files
- Running the merge and applying a resolution strategy
- Printing segments and writing the assembled text
- Exception handling
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

from textmerge import __version__
from textmerge.core.diff.inline import InlineHighlighter
from textmerge.core.merge.conflict_resolver import AutoResolver, ResolutionStrategy
from textmerge.core.merge.multi_version import (
    MultiVersionMerger,
    NotEnoughVersionsError,
    prepare_versions,
)
from textmerge.core.merge.resolution import MergeSession
from textmerge.core.models import MergeResult
from textmerge.services.file_io import VersionReader, write_text_atomic
from textmerge.services.settings import ApplicationSettings, SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "textmerge"
APP_VERSION = __version__

EXIT_OK = 0
EXIT_UNRESOLVED = 1
EXIT_USAGE = 2

STRATEGY_CHOICES = ['manual', 'favor-a', 'favor-b', 'favor-shorter', 'favor-longer']


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    version_paths: list[str] = field(default_factory=list)
    output_path: Optional[str] = None
    strategy: Optional[ResolutionStrategy] = None
    as_json: bool = False
    quiet: bool = False
    config_file: Optional[str] = None
    encoding: Optional[str] = None
    log_level: str = "WARNING"
    log_file: Optional[str] = None


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Console output goes to stderr so that merged text on stdout stays clean.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    # chardet logs every probe at DEBUG
    logging.getLogger('chardet').setLevel(logging.WARNING)

    return root_logger


# =============================================================================
# Exception Handling
# =============================================================================

class ExceptionHandler:
    """Global handler that logs unhandled exceptions."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def handle_exception(
        self,
        exc_type: type,
        exc_value: BaseException,
        exc_tb
    ) -> None:
        """Handle an unhandled exception."""
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return

        self.logger.critical(
            "Unhandled exception",
            exc_info=(exc_type, exc_value, exc_tb)
        )
        sys.stderr.write(''.join(traceback.format_exception_only(exc_type, exc_value)))


# =============================================================================
# Command Line Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Merge several versions of a text into one",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s draft1.txt draft2.txt                  Show agreed text and conflicts
  %(prog)s v1.txt v2.txt v3.txt --json            Dump segments as JSON
  %(prog)s a.txt b.txt -s favor-b -o merged.txt   Resolve with B and save
        """
    )

    parser.add_argument(
        'versions',
        nargs='+',
        help='Version files, oldest first'
    )
    parser.add_argument(
        '-o', '--output',
        help='Write the assembled text to this file'
    )
    parser.add_argument(
        '-s', '--strategy',
        choices=STRATEGY_CHOICES,
        default=None,
        help='Resolve conflicts automatically (default from settings)'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print segments as JSON'
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Do not print segments'
    )
    parser.add_argument(
        '-e', '--encoding',
        help='Input encoding (auto-detected if omitted)'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Configuration file path'
    )

    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='WARNING',
        help='Log level'
    )
    parser.add_argument(
        '--log-file',
        help='Also write logs to this file'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )

    parsed = parser.parse_args(args)

    result = CommandLineArgs()
    result.version_paths = parsed.versions
    result.output_path = parsed.output
    result.as_json = parsed.json
    result.quiet = parsed.quiet
    result.config_file = parsed.config
    result.encoding = parsed.encoding
    result.log_file = parsed.log_file
    result.log_level = 'DEBUG' if parsed.verbose else parsed.log_level

    if parsed.strategy:
        result.strategy = ResolutionStrategy[parsed.strategy.upper().replace('-', '_')]

    return result


# =============================================================================
# Output
# =============================================================================

def format_segments(result: MergeResult) -> str:
    """
    Render segments for the terminal.

    Changed tokens inside conflict options are wrapped in [- -] and {+ +}.
    """
    highlighter = InlineHighlighter()
    parts: list[str] = []

    for index, segment in enumerate(result.segments):
        if not segment.is_conflict:
            parts.append(segment.text)
            continue

        highlight = highlighter.highlight(segment)
        option_a = ''.join(f"[-{t.text}-]" if t.changed else t.text for t in highlight.left)
        option_b = ''.join(f"{{+{t.text}+}}" if t.changed else t.text for t in highlight.right)
        parts.append(
            f"\n<<<<<<< Conflict #{result.conflict_number(index)}: {segment.reason}\n"
            f"{result.label_a}: {option_a}\n"
            f"=======\n"
            f"{result.label_b}: {option_b}\n"
            f">>>>>>>\n"
        )

    return ''.join(parts)


def segments_to_json(result: MergeResult) -> str:
    """Serialize segments with labels and counts."""
    segments = []
    for segment in result.segments:
        if segment.is_conflict:
            segments.append({
                'type': segment.segment_type.value,
                'optionA': segment.option_a,
                'optionB': segment.option_b,
                'reason': segment.reason,
            })
        else:
            segments.append({'type': segment.segment_type.value, 'content': segment.text})

    return json.dumps({
        'labelA': result.label_a,
        'labelB': result.label_b,
        'versions': result.version_count,
        'conflicts': result.conflict_count,
        'segments': segments,
    }, indent=2, ensure_ascii=False)


# =============================================================================
# Merge
# =============================================================================

def load_versions(paths: List[str], encoding: Optional[str] = None) -> list[str]:
    """Read version files in order; raises VersionReadError on the first bad one."""
    versions = VersionReader(encoding=encoding).read_all(paths)
    for version in versions:
        logging.info(f"Read {version.path} ({version.encoding})")
    return [version.text for version in versions]


def run_merge(args: CommandLineArgs, settings: ApplicationSettings) -> int:
    """Merge the versions named in `args` and report the outcome."""
    texts = load_versions(args.version_paths, args.encoding)
    versions = prepare_versions(texts)

    merger = MultiVersionMerger(
        reason=settings.merge.conflict_reason,
        max_cells=settings.merge.max_alignment_cells
    )
    result = merger.merge(versions)

    session = MergeSession(result.segments, history_limit=settings.merge.history_limit)
    resolver = AutoResolver(
        strategy=args.strategy or settings.merge.default_strategy,
        auto_resolve_whitespace=settings.merge.auto_resolve_whitespace
    )
    resolver.apply(session)
    assembled = session.assemble()

    if args.as_json:
        print(segments_to_json(result))
    elif not args.quiet and settings.output.show_segments and not args.output_path:
        print(format_segments(result))

    if args.output_path:
        bytes_written = write_text_atomic(
            args.output_path,
            assembled.text,
            encoding=settings.output.encoding
        )
        logging.info(f"Wrote {bytes_written} bytes to {args.output_path}")
    elif args.quiet:
        print(assembled.text)

    print(
        f"{assembled.resolved_count}/{assembled.conflict_count} conflicts resolved",
        file=sys.stderr
    )
    return EXIT_OK if assembled.is_ready else EXIT_UNRESOLVED


# =============================================================================
# Main
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main application entry point.

    Returns:
        Exit code
    """
    args = parse_arguments(argv)

    logger = setup_logging(
        args.log_level,
        Path(args.log_file) if args.log_file else None
    )
    exception_handler = ExceptionHandler(logger)
    sys.excepthook = exception_handler.handle_exception

    manager = SettingsManager(Path(args.config_file) if args.config_file else None)
    settings = manager.settings

    try:
        return run_merge(args, settings)
    except NotEnoughVersionsError as e:
        print(f"{APP_NAME}: {e}", file=sys.stderr)
        return EXIT_USAGE
    except (OSError, ValueError) as e:
        logger.error(f"Merge failed: {e}")
        print(f"{APP_NAME}: {e}", file=sys.stderr)
        return EXIT_USAGE


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == '__main__':
    sys.exit(main())
