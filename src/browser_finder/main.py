"""Command-line entry point: print the browsers installed on this Mac."""

import argparse
import asyncio
import json
import logging
import os
import platform
import sys
from pathlib import Path
from typing import Optional

from .config import CONFIG_FILE, LOG_LEVELS, load_config
from .darwin import BROWSERS, create_finder
from .models import FinderConfig, Quality
from .system import CommandError

logger = logging.getLogger(__name__)

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_SCAN_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="browser-finder",
        description="Find installed browsers, best match first.",
    )
    parser.add_argument("browser", nargs="?", default="chrome", choices=sorted(BROWSERS))
    parser.add_argument(
        "--quality",
        type=Quality.parse,
        choices=[q for q in Quality if q is not Quality.UNKNOWN],
        metavar="{stable,dev,canary,custom}",
        help="only report this release channel",
    )
    parser.add_argument("--all", action="store_true", help="list every installation found")
    parser.add_argument("--json", action="store_true", help="print JSON instead of text")
    parser.add_argument("--config", type=Path, help=f"config file (default: {CONFIG_FILE})")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="override the configured log level")
    return parser


def read_config(config_file: Optional[Path]) -> FinderConfig:
    """Load an explicitly given config file, or the default one if it exists."""
    if config_file is not None:
        return load_config(config_file)
    if CONFIG_FILE.exists():
        return load_config(CONFIG_FILE)
    return FinderConfig()


async def run(args: argparse.Namespace, config: FinderConfig) -> int:
    finder = create_finder(args.browser, config=config, env=os.environ)

    def wanted(exe) -> bool:
        return args.quality is None or exe.quality is args.quality

    try:
        if args.all:
            found = [exe for exe in await finder.find_all() if wanted(exe)]
        else:
            best = await finder.find_where(wanted)
            found = [best] if best is not None else []
    except CommandError as e:
        logger.error(f"Browser scan failed: {e}")
        return EXIT_SCAN_FAILED

    if args.json:
        print(json.dumps(
            [{"path": exe.path, "quality": exe.quality.value} for exe in found],
            indent=2,
        ))
    else:
        for exe in found:
            print(f"{exe.quality.value}\t{exe.path}")

    if not found:
        logger.warning(f"No {args.browser} installation found")
        return EXIT_NOT_FOUND
    return EXIT_FOUND


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = read_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"browser-finder: {e}", file=sys.stderr)
        return EXIT_SCAN_FAILED

    logging.basicConfig(
        level=getattr(logging, args.log_level or config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if platform.system() != "Darwin":
        logger.warning("Launch Services is only available on macOS; the scan will likely fail")

    return asyncio.run(run(args, config))


if __name__ == "__main__":
    sys.exit(main())
