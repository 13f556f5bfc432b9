"""
Application entry point.

Usage:
    python -m luasketch [script.lua] [options]

Options:
    --example NAME   Run a bundled example instead of a file
    --list-examples  Print the bundled examples and exit
    --dev            Enable development mode (debug logging, FPS counter)
    --scale N        Display scale factor (1, 2, or 4) [default: 1]
    --fullscreen     Run in fullscreen mode
    --fps N          Target frame rate [default: 60]
    --assets DIR     Preload images from DIR for loadImage()
    --log-file FILE  Also write the log to FILE (rotated)

Keys:
    F5   Re-read the script and run it again
    F6   Stop the script
    Tab  Next bundled example
    Esc  Quit

Examples:
    python -m luasketch --example particles --dev
    python -m luasketch my_sketch.lua --assets assets/ --scale 2
"""

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .config import Config
from .source import ScriptSource, list_examples


def setup_logging(dev_mode: bool = False, log_file: Optional[str] = None) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if dev_mode else logging.INFO

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    # Console handler
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)

    # Root logger
    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)

    if log_file:
        try:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
            logging.info(f"File logging enabled: {log_file}")
        except OSError as e:
            logging.warning(f"Could not enable file logging: {e}")

    logging.info("Logging initialized")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="luasketch",
        description="Run a Lua drawing script in a real-time window"
    )
    parser.add_argument(
        "script",
        nargs="?",
        default=None,
        help="Lua script to run"
    )
    parser.add_argument(
        "--example",
        type=str,
        default=None,
        help="Run a bundled example (see --list-examples)"
    )
    parser.add_argument(
        "--list-examples",
        action="store_true",
        help="List the bundled examples and exit"
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Enable development mode"
    )
    parser.add_argument(
        "--scale",
        type=int,
        choices=[1, 2, 4],
        default=1,
        help="Display scale factor (1, 2, or 4)"
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Run in fullscreen mode"
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Target frame rate"
    )
    parser.add_argument(
        "--assets",
        type=str,
        default=None,
        help="Directory of images available to loadImage()"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also log to this file"
    )

    args = parser.parse_args(argv)
    if args.script and args.example:
        parser.error("give either a script path or --example, not both")
    if args.fps <= 0:
        parser.error("--fps must be positive")
    return args


def build_config(args: argparse.Namespace) -> Config:
    """Configuration from parsed arguments."""
    return Config(
        dev_mode=args.dev,
        scale_factor=args.scale,
        fullscreen=args.fullscreen,
        target_fps=args.fps,
        assets_dir=args.assets,
    )


def resolve_source(args: argparse.Namespace) -> Optional[ScriptSource]:
    """
    The script to run at startup.

    Raises:
        KeyError: --example names no bundled example
    """
    if args.example:
        return ScriptSource.from_example(args.example)
    if args.script:
        return ScriptSource(Path(args.script))
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.list_examples:
        for name in list_examples():
            print(name)
        return 0

    # Setup logging first
    setup_logging(dev_mode=args.dev, log_file=args.log_file)

    logger = logging.getLogger(__name__)
    logger.info("luasketch starting...")

    try:
        source = resolve_source(args)
    except KeyError as e:
        logger.error(e.args[0])
        return 2

    if source is not None and not source.path.is_file():
        logger.error(f"Script not found: {source.path}")
        return 2

    config = build_config(args)
    logger.info(f"Config: dev={config.dev_mode}, scale={config.scale_factor}, fps={config.target_fps}")

    # Imported here so --list-examples works without a display
    from .core.app import Application

    # Create and run application
    app = Application(config, source)

    try:
        app.run()
    except KeyboardInterrupt:
        print("\nShutdown requested...")
    finally:
        app.cleanup()

    return 0


if __name__ == "__main__":
    sys.exit(main())
