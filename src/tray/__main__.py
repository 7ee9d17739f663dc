"""Main entry point for the Tray interpreter."""

import argparse
from datetime import datetime, timezone
import glob
import logging
from logging.handlers import RotatingFileHandler
import os
import sys
from types import TracebackType
from typing import List, Optional

from tray.tray import Tray
from tray.tray_repl import TrayLineReader, TrayRepl
from tray.tray_settings import DEFAULT_SETTINGS_PATH, TraySettings
from tray.tray_trace import TrayFileTraceWatcher


def setup_logging(level: str = "WARNING") -> None:
    """Configure application logging with timestamped files and rotation."""
    # Create logs directory in user's home .tray directory
    log_dir = os.path.expanduser("~/.tray/logs")
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d-%H-%M-%S-%f")[:23]
    log_file = os.path.join(log_dir, f"{timestamp}.log")

    # Keep up to 20 log files, max 1MB each
    handler = RotatingFileHandler(
        log_file,
        maxBytes=1024*1024,
        backupCount=19,
        encoding='utf-8'
    )

    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[handler]
    )

    cleanup_old_logs(log_dir, max_logs=20)


def cleanup_old_logs(log_dir: str, max_logs: int) -> None:
    """Remove oldest log files if we exceed maximum count."""
    log_files = glob.glob(os.path.join(log_dir, "*.log*"))
    log_files.sort(key=os.path.getctime)  # Sort by creation time

    while len(log_files) > max_logs:
        try:
            os.remove(log_files.pop(0))

        except OSError:
            pass  # Ignore errors removing old logs


def install_global_exception_handler() -> None:
    """Install a global exception handler for uncaught exceptions."""
    logger = logging.getLogger('GlobalExceptionHandler')

    def handle_exception(exc_type: type[BaseException], exc_value: BaseException, exc_traceback: TracebackType | None) -> None:
        """Handle uncaught exceptions and log them."""
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logger.critical(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback),
            stack_info=True
        )
        sys.__excepthook__(exc_type, exc_value, exc_traceback)

    sys.excepthook = handle_exception


def build_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='tray',
        description='Evaluate lines of arithmetic over numbers, characters and strings',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start the interactive prompt
  tray

  # Evaluate a single line
  tray -e "1 + 2 * 3"

  # Evaluate every line of a file independently
  tray sums.tray
"""
    )
    parser.add_argument(
        'file',
        nargs='?',
        help='File whose lines are evaluated one at a time'
    )
    parser.add_argument(
        '-e', '--expression',
        help='Evaluate a single line and exit'
    )
    parser.add_argument(
        '--settings',
        default=DEFAULT_SETTINGS_PATH,
        help=f'Settings file (default: {DEFAULT_SETTINGS_PATH})'
    )
    parser.add_argument(
        '--show-tokens',
        action='store_true',
        help='Print the tokens of each line'
    )
    parser.add_argument(
        '--no-tree',
        action='store_true',
        help='Do not print the expression tree of each line'
    )
    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )
    parser.add_argument(
        '--trace',
        metavar='PATH',
        help='Write tokens, trees and results of every line to a trace file'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to run the interpreter."""
    args = build_parser().parse_args(argv)

    try:
        settings = TraySettings.load_or_default(args.settings)

    except (OSError, ValueError) as e:
        print(f"Error: cannot load settings from {args.settings}: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.log_level)
    install_global_exception_handler()

    if args.show_tokens:
        settings.show_tokens = True

    if args.no_tree:
        settings.show_tree = False

    if args.no_color:
        settings.color = False

    tray = Tray(settings)
    repl = TrayRepl(
        tray,
        show_tokens=settings.show_tokens,
        show_tree=settings.show_tree,
        color=settings.color and sys.stdout.isatty()
    )

    trace_watcher = None
    if args.trace:
        try:
            trace_watcher = TrayFileTraceWatcher(args.trace)

        except RuntimeError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        tray.add_trace_watcher(trace_watcher)

    try:
        if args.expression is not None:
            failures = repl.run([args.expression])

        elif args.file is not None:
            try:
                failures = repl.run_file(args.file)

            except OSError as e:
                print(f"Error: couldn't read file `{args.file}`: {e}", file=sys.stderr)
                return 1

        else:
            # Failed lines in an interactive session don't affect the exit status
            reader = TrayLineReader(sys.stdin, sys.stdout, settings.prompt)
            try:
                repl.run(reader)

            except KeyboardInterrupt:
                print()

            failures = 0

    finally:
        if trace_watcher is not None:
            trace_watcher.close()

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
