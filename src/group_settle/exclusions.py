"""Rule-based detection of "leave X out of this split" phrases.

This is a best-effort scanner, not a parser. Each rule captures a single word,
so compound phrasing such as "Bob and Alice didn't join" only yields the name
adjacent to the verb. Words that don't resolve to a known participant are
ignored.
"""

import logging
import re
from collections.abc import Callable, Sequence
from typing import NamedTuple

logger = logging.getLogger(__name__)


class ExclusionRule(NamedTuple):
    """A pattern plus a resolver that pulls the candidate name from a match."""

    name: str
    pattern: re.Pattern[str]
    resolve: Callable[[re.Match[str]], str]


def _first_group(match: re.Match[str]) -> str:
    return match.group(1)


_NEGATED_VERB = (
    r"(?:didn't|didnt|did not|wasn't|wasnt|was not|isn't|isnt|is not)"
)
_ACTIVITY = r"(?:join|participate|there|included|eating|drinking)"

# Order matters only for the order names are reported in.
EXCLUSION_RULES: tuple[ExclusionRule, ...] = (
    ExclusionRule(
        name="keyword",
        pattern=re.compile(
            r"\b(?:exclude|without|except|not including|minus)\s+(\w+)",
            re.IGNORECASE,
        ),
        resolve=_first_group,
    ),
    ExclusionRule(
        name="absent",
        pattern=re.compile(
            rf"\b(\w+)\s+{_NEGATED_VERB}\s+{_ACTIVITY}",
            re.IGNORECASE,
        ),
        resolve=_first_group,
    ),
    ExclusionRule(
        name="negation",
        pattern=re.compile(r"\b(?:no|not)\s+(\w+)", re.IGNORECASE),
        resolve=_first_group,
    ),
)


def extract_exclusions(
    text: str,
    participants: Sequence[str],
    rules: Sequence[ExclusionRule] = EXCLUSION_RULES,
) -> list[str]:
    """
    Find participants that free-form text says should be left out.

    Examples:
        "dinner without Carol"  -> ["Carol"]
        "Bob didn't join"       -> ["Bob"]
        "exclude ALICE"         -> ["Alice"]

    Args:
        text: Free-form note attached to an expense
        participants: Known participant names
        rules: Ordered rules to scan with

    Returns:
        Matched participant names (roster spelling), deduplicated, in the
        order they were found
    """
    lowered = text.lower()
    by_lower = {person.lower(): person for person in participants}
    excluded: list[str] = []

    for rule in rules:
        for match in rule.pattern.finditer(lowered):
            token = rule.resolve(match)
            participant = by_lower.get(token.lower())
            if participant is None:
                continue
            if participant not in excluded:
                logger.debug(f"Rule '{rule.name}' excluded {participant}")
                excluded.append(participant)

    return excluded
