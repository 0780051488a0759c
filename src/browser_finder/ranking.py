"""Ordering of discovered installations by priority rules."""

import logging
from typing import Iterable, Optional

from .models import Executable, PriorityRule

logger = logging.getLogger(__name__)


def _first_match(path: str, rules: list[PriorityRule]) -> Optional[PriorityRule]:
    for rule in rules:
        if rule.matches(path):
            return rule
    return None


def rank_installations(
    installations: Iterable[str],
    rules: Iterable[PriorityRule],
) -> list[Executable]:
    """
    Rank installation paths, best first.

    Each path takes the weight and quality of the first rule it matches.
    Paths matching no rule are dropped. Equal weights keep input order.

    Args:
        installations: Candidate executable paths, in discovery order
        rules: Ordered priority rules

    Returns:
        Executables sorted by descending weight
    """
    rules = list(rules)
    ranked: list[tuple[int, Executable]] = []

    for path in dict.fromkeys(p for p in installations if p):
        rule = _first_match(path, rules)
        if rule is None:
            logger.debug(f"No priority rule matches {path}; dropping it")
            continue
        ranked.append((rule.weight, Executable(path=path, quality=rule.quality)))

    ranked.sort(key=lambda item: item[0], reverse=True)
    return [exe for _, exe in ranked]
