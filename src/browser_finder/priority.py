"""Location-based ranking rules for discovered browser installations."""

import posixpath
import re
from typing import Iterable, Optional

from .models import PriorityRule, Quality, VariantSpec

# Weight of the preferred-path rule; raised if variant weights require it
CUSTOM_WEIGHT = 151

SYSTEM_APPLICATIONS_BONUS = 100
VOLUMES_PENALTY = 100


def escape_path(path: str) -> str:
    """Normalize and escape a path from the environment or config for literal use in a rule."""
    return re.escape(posixpath.normpath(path))


def build_priority_rules(
    variants: Iterable[VariantSpec],
    home: Optional[str] = None,
    preferred_path: Optional[str] = None,
) -> list[PriorityRule]:
    """
    Build ranking rules for a browser family.

    Each variant gets three rules: /Applications (weight + 100), the user's
    ~/Applications (weight) and /Volumes (weight - 100). When a preferred
    path is set, a Custom rule matching it is placed first, outranking
    every location rule.

    Rules are evaluated in order and the first match wins.

    Args:
        variants: Named builds with base weights, in caller order
        home: Home directory; the ~/Applications rule is skipped without one
        preferred_path: Optional user-configured path

    Returns:
        Ordered list of PriorityRule
    """
    variants = list(variants)
    rules = []

    for variant in variants:
        name = re.escape(variant.name)
        rules.append(PriorityRule(
            pattern=re.compile(f"^/Applications/.*{name}"),
            weight=variant.weight + SYSTEM_APPLICATIONS_BONUS,
            quality=variant.quality,
        ))
        if home and posixpath.normpath(home) != "/":
            rules.append(PriorityRule(
                pattern=re.compile(f"^{escape_path(home)}/Applications/.*{name}"),
                weight=variant.weight,
                quality=variant.quality,
            ))
        rules.append(PriorityRule(
            pattern=re.compile(f"^/Volumes/.*{name}"),
            weight=variant.weight - VOLUMES_PENALTY,
            quality=variant.quality,
        ))

    if preferred_path:
        highest = max((v.weight for v in variants), default=0)
        rules.insert(0, PriorityRule(
            pattern=re.compile(f"^{escape_path(preferred_path)}(?:/|$)"),
            weight=max(CUSTOM_WEIGHT, highest + SYSTEM_APPLICATIONS_BONUS + 1),
            quality=Quality.CUSTOM,
        ))

    return rules
