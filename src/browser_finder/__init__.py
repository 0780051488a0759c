"""browser-finder: locate installed browsers and rank them by location and release channel."""

from .darwin import BROWSERS, CHROME, EDGE, FIREFOX, DarwinBrowser, DarwinVariant, create_finder  # noqa: F401
from .finder import BrowserFinder, BrowserVariant, SingleFlight  # noqa: F401
from .models import Executable, FinderConfig, PriorityRule, Quality, VariantSpec  # noqa: F401
from .system import CommandError  # noqa: F401
