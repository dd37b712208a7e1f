"""Column comment heuristics.

Splits a free-text column comment into a display name and, when present,
an embedded enumeration table:

    任务状态 1-待处理 2-处理中 3-成功 4-失败
    任务状态 1：待处理 2：处理中 3：成功 4：失败
    任务状态 1:待处理 2:处理中 3:成功 4:失败
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

EnumPairs = list[tuple[str, str]]
EnumPairMatcher = Callable[[str], Optional[EnumPairs]]

# Leading non-space run, then everything after the first whitespace run
_NAME_SPLIT_RE = re.compile(r"^(.*?)\s+(.*)$", re.DOTALL)


@dataclass(frozen=True)
class PatternMatcher:
    """Finds key/value pairs joined by one delimiter convention."""
    name: str
    pattern: re.Pattern

    def __call__(self, text: str) -> Optional[EnumPairs]:
        if not self.pattern.search(text):
            return None
        return [(m.group(1).strip(), m.group(2).strip()) for m in self.pattern.finditer(text)]


def _pair_pattern(delimiter: str) -> re.Pattern:
    return re.compile(rf"(\w+){delimiter}(\S+)", re.ASCII)


DASH_MATCHER = PatternMatcher("dash", _pair_pattern("-"))
FULLWIDTH_COLON_MATCHER = PatternMatcher("fullwidth_colon", _pair_pattern("："))
COLON_MATCHER = PatternMatcher("colon", _pair_pattern(":"))

DEFAULT_MATCHERS: tuple[EnumPairMatcher, ...] = (
    DASH_MATCHER,
    FULLWIDTH_COLON_MATCHER,
    COLON_MATCHER,
)


def first_match(matchers: Iterable[EnumPairMatcher], text: str) -> Optional[EnumPairs]:
    """Return the result of the first matcher that matches, without merging."""
    for matcher in matchers:
        pairs = matcher(text)
        if pairs is not None:
            return pairs
    return None


def extract_enum_from_comment(
    comment: str,
    matchers: Iterable[EnumPairMatcher] = DEFAULT_MATCHERS,
) -> tuple[str, EnumPairs]:
    """Split a column comment into a display name and enum pairs.

    Args:
        comment: Raw column comment
        matchers: Delimiter strategies, in priority order

    Returns:
        (display_name, [(literal, description), ...]). Pairs keep the order
        in which each key first appears; a repeated key keeps its last
        description. Without a recognisable enum the pair list is empty.
    """
    comment = comment.strip()

    match = _NAME_SPLIT_RE.match(comment)
    if not match:
        return comment, []

    name = match.group(1).strip()
    pairs = first_match(matchers, match.group(2))
    if not pairs:
        return name, []

    enum_map: dict[str, str] = {}
    for key, value in pairs:
        enum_map[key] = value

    return name, list(enum_map.items())


def mentions_json(comment: str) -> bool:
    """Whether a comment marks a string column as JSON.

    Any case-insensitive occurrence of "json" counts, including incidental
    mentions such as "not json".
    """
    return "json" in comment.lower()
