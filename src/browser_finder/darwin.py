"""macOS browser registrations and the Launch Services scan strategy."""

import posixpath
from dataclasses import dataclass
from typing import Awaitable, Callable, Mapping, Optional, Sequence

from .config import resolve_home, resolve_preferred_path
from .finder import BrowserFinder
from .models import Executable, FinderConfig, Quality, VariantSpec
from .priority import build_priority_rules
from .ranking import rank_installations
from .registry import find_registered_apps
from .system import can_access, run_command


@dataclass(frozen=True)
class DarwinBrowser:
    """Everything needed to find one browser family on macOS."""
    name: str
    env_var: str
    well_known_paths: tuple[Executable, ...]
    pattern: str
    default_paths: tuple[str, ...]
    suffixes: tuple[str, ...]
    variants: tuple[VariantSpec, ...]


FIREFOX = DarwinBrowser(
    name="firefox",
    env_var="FIREFOX_PATH",
    well_known_paths=(
        Executable("/Applications/Firefox.app/Contents/MacOS/firefox", Quality.STABLE),
        Executable("/Applications/Firefox Developer Edition.app/Contents/MacOS/firefox", Quality.DEV),
        Executable("/Applications/Firefox Nightly.app/Contents/MacOS/firefox", Quality.CANARY),
    ),
    pattern="Firefox[A-Za-z ]*.app",
    default_paths=("/Applications/Firefox.app",),
    suffixes=("/Contents/MacOS/firefox",),
    variants=(
        VariantSpec("Firefox.app", 0, Quality.STABLE),
        VariantSpec("Firefox Nightly.app", 1, Quality.CANARY),
        VariantSpec("Firefox Developer Edition.app", 2, Quality.DEV),
    ),
)

CHROME = DarwinBrowser(
    name="chrome",
    env_var="CHROME_PATH",
    well_known_paths=(
        Executable("/Applications/Google Chrome.app/Contents/MacOS/Google Chrome", Quality.STABLE),
        Executable(
            "/Applications/Google Chrome Canary.app/Contents/MacOS/Google Chrome Canary",
            Quality.CANARY,
        ),
        Executable("/Applications/Google Chrome Dev.app/Contents/MacOS/Google Chrome Dev", Quality.DEV),
    ),
    pattern="google chrome[A-Za-z() ]*.app",
    default_paths=("/Applications/Google Chrome.app",),
    suffixes=(
        "/Contents/MacOS/Google Chrome Canary",
        "/Contents/MacOS/Google Chrome",
        "/Contents/MacOS/Google Chrome Dev",
    ),
    variants=(
        VariantSpec("Google Chrome.app", 0, Quality.STABLE),
        VariantSpec("Google Chrome Canary.app", 1, Quality.CANARY),
        VariantSpec("Google Chrome Dev.app", 3, Quality.DEV),
    ),
)

EDGE = DarwinBrowser(
    name="edge",
    env_var="EDGE_PATH",
    well_known_paths=(
        Executable("/Applications/Microsoft Edge.app/Contents/MacOS/Microsoft Edge", Quality.STABLE),
        Executable(
            "/Applications/Microsoft Edge Canary.app/Contents/MacOS/Microsoft Edge Canary",
            Quality.CANARY,
        ),
        Executable("/Applications/Microsoft Edge Dev.app/Contents/MacOS/Microsoft Edge Dev", Quality.DEV),
    ),
    pattern="Microsoft Edge[A-Za-z ]*.app",
    default_paths=(),
    suffixes=(
        "/Contents/MacOS/Microsoft Edge",
        "/Contents/MacOS/Microsoft Edge Canary",
        "/Contents/MacOS/Microsoft Edge Dev",
    ),
    variants=(
        VariantSpec("Microsoft Edge.app", 0, Quality.STABLE),
        VariantSpec("Microsoft Edge Canary.app", 1, Quality.CANARY),
        VariantSpec("Microsoft Edge Dev.app", 3, Quality.DEV),
    ),
)

BROWSERS = {b.name: b for b in (FIREFOX, CHROME, EDGE)}


class DarwinVariant:
    """Finds a browser family via well-known paths and the Launch Services register."""

    def __init__(
        self,
        browser: DarwinBrowser,
        home: Optional[str] = None,
        preferred_path: Optional[str] = None,
        run: Callable[[str], Awaitable[str]] = run_command,
        access: Callable[[str], Awaitable[bool]] = can_access,
    ):
        self.browser = browser
        self.home = home
        self._preferred_path = posixpath.normpath(preferred_path) if preferred_path else None
        self._run = run
        self._access = access

    def well_known_paths(self) -> Sequence[Executable]:
        return self.browser.well_known_paths

    def preferred_path(self) -> Optional[str]:
        return self._preferred_path

    async def scan(self) -> list[Executable]:
        installations = await find_registered_apps(
            self.browser.pattern,
            self.browser.default_paths,
            self.browser.suffixes,
            preferred_path=self.preferred_path(),
            run=self._run,
            access=self._access,
        )
        rules = build_priority_rules(
            self.browser.variants,
            home=self.home,
            preferred_path=self.preferred_path(),
        )
        return rank_installations(installations, rules)


def create_finder(
    browser: str,
    config: Optional[FinderConfig] = None,
    env: Optional[Mapping[str, str]] = None,
    run: Callable[[str], Awaitable[str]] = run_command,
    access: Callable[[str], Awaitable[bool]] = can_access,
) -> BrowserFinder:
    """
    Build a finder for a browser family ("firefox", "chrome" or "edge").

    The preferred path and home directory are resolved here from config and
    env; nothing below this reads the environment.

    Raises:
        ValueError: If browser is not a known family
    """
    try:
        registration = BROWSERS[browser.lower()]
    except KeyError:
        raise ValueError(f"Unknown browser: {browser} (expected one of {', '.join(BROWSERS)})") from None

    variant = DarwinVariant(
        registration,
        home=resolve_home(config, env),
        preferred_path=resolve_preferred_path(registration.name, registration.env_var, config, env),
        run=run,
        access=access,
    )
    return BrowserFinder(variant, access=access)
