"""Discovery of installed app bundles through the macOS Launch Services register."""

import asyncio
import logging
import posixpath
import re
from typing import Awaitable, Callable, Iterable, Optional

from .system import can_access, run_command

logger = logging.getLogger(__name__)

LSREGISTER_COMMAND = (
    "/System/Library/Frameworks/CoreServices.framework"
    "/Versions/A/Frameworks/LaunchServices.framework"
    "/Versions/A/Support/lsregister -dump"
)

# Appended by Launch Services when several copies of one app are registered,
# e.g. "/Applications/Firefox.app (0x1a2b3c)"
DISAMBIGUATION_SUFFIX = r" \(0x[a-f0-9]+\)"

_DISAMBIGUATION_RE = re.compile(DISAMBIGUATION_SUFFIX + "$", re.IGNORECASE)


def build_lsregister_command(pattern: str) -> str:
    """
    Build the shell pipeline that lists registered apps matching pattern.

    The match is case-insensitive and anchored at the end of the line,
    allowing an optional disambiguation suffix. awk drops the first field
    ("path:") of each matching line.

    Args:
        pattern: Regular expression for the app bundle name, e.g. "Firefox[A-Za-z ]*.app"

    Returns:
        Shell command line
    """
    return (
        f"{LSREGISTER_COMMAND} | awk 'tolower($0) ~ "
        f"/{pattern.lower()}({DISAMBIGUATION_SUFFIX})?$/ "
        "{ $1=\"\"; print $0 }'"
    )


def strip_disambiguation(line: str) -> str:
    """Trim a register line and remove any trailing " (0x...)" marker."""
    return _DISAMBIGUATION_RE.sub("", line.strip()).strip()


def parse_lsregister_output(output: str) -> list[str]:
    """Return the non-empty bundle paths in filtered lsregister output."""
    paths = []
    for line in output.split("\n"):
        path = strip_disambiguation(line)
        if path:
            paths.append(path)
    return paths


def join_suffix(directory: str, suffix: str) -> str:
    """Join an install directory and an executable suffix like "/Contents/MacOS/firefox"."""
    return posixpath.normpath(posixpath.join(directory.strip(), suffix.lstrip("/")))


async def find_registered_apps(
    pattern: str,
    default_paths: Iterable[str],
    suffixes: Iterable[str],
    preferred_path: Optional[str] = None,
    run: Callable[[str], Awaitable[str]] = run_command,
    access: Callable[[str], Awaitable[bool]] = can_access,
) -> list[str]:
    """
    Find accessible executables of apps matching pattern.

    Install directories come from the default paths, the Launch Services
    register and the preferred path, in that order. Each is combined with
    every suffix and kept if the result is accessible.

    Args:
        pattern: App bundle name pattern passed to the register query
        default_paths: Install directories checked even when unregistered
        suffixes: Executable paths relative to an install directory
        preferred_path: Optional user-configured install directory
        run: Command runner
        access: Accessibility check

    Returns:
        Accessible executable paths, deduplicated, in discovery order

    Raises:
        CommandError: If the register query fails
    """
    stdout = await run(build_lsregister_command(pattern))
    registered = parse_lsregister_output(stdout)
    logger.debug(f"Launch Services lists {len(registered)} app(s) for {pattern!r}")

    directories = [p for p in default_paths if p] + registered
    if preferred_path:
        directories.append(preferred_path)

    suffixes = list(suffixes)
    candidates = list(dict.fromkeys(
        join_suffix(directory, suffix)
        for directory in directories
        for suffix in suffixes
    ))

    # Checks are independent; order is restored from candidates
    accessible = await asyncio.gather(*(access(c) for c in candidates))

    installations = []
    for candidate, ok in zip(candidates, accessible):
        if ok:
            installations.append(candidate)
        else:
            logger.debug(f"Skipping inaccessible candidate: {candidate}")
    return installations
