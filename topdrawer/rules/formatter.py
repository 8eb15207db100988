#!/usr/bin/env python3
"""Human-readable descriptions of conditions.

The formatter produces plain text such as ``Extension is 'swift'`` and an
attributed variant: a tuple of segments, each pairing a piece of text with
the caller's attributes for that role (label text or matched value). The
attributes are opaque here; whoever renders the segments owns their meaning.
Joining the segment texts always gives the plain description.

Example:
    >>> display_description(Condition.ext(StringMatcher.exact("swift")))
    "Extension is 'swift'"
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Tuple

from topdrawer.rules.conditions import Condition, ConditionCase
from topdrawer.rules.string_matcher import MatchStrategy, StringMatcher


@dataclass(frozen=True)
class ConditionFormatterAttributes:
    """Attributes applied to the two kinds of text in a description."""

    text_attributes: Mapping[str, Any] = field(default_factory=dict)
    value_attributes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AttributedSegment:
    text: str
    attributes: Mapping[str, Any]


AttributedString = Tuple[AttributedSegment, ...]

_SUBJECTS = {
    ConditionCase.NAME: "Name",
    ConditionCase.EXT: "Extension",
    ConditionCase.FULL_NAME: "Full name",
    ConditionCase.PARENT_CONTAINS: "Parent contains an item where",
    ConditionCase.PARENT_DOESNT_CONTAIN: "Parent doesn't contain an item where",
    ConditionCase.HIERARCHY_CONTAINS: "Hierarchy contains a folder where",
}

_VERBS = {
    MatchStrategy.EXACT: "is",
    MatchStrategy.CONTAINS: "contains",
    MatchStrategy.PREFIX: "begins with",
    MatchStrategy.SUFFIX: "ends with",
    MatchStrategy.WILDCARD: "matches",
}


class ConditionFormatter:
    """Builds descriptions as (text, is_value) parts, then renders them."""

    def string(self, condition: Condition) -> str:
        return "".join(text for text, _ in self._parts(condition))

    def attributed_string(
        self, condition: Condition, attributes: ConditionFormatterAttributes
    ) -> AttributedString:
        """Attributed description.

        Args:
            condition: Condition to describe
            attributes: Attributes for label text and for matched values

        Returns:
            Segments whose texts join to ``string(condition)``
        """
        return tuple(
            AttributedSegment(
                text,
                attributes.value_attributes if is_value else attributes.text_attributes,
            )
            for text, is_value in self._parts(condition)
        )

    def _parts(self, condition: Condition) -> List[Tuple[str, bool]]:
        case = condition.case
        subject = _SUBJECTS[case]

        if case in (ConditionCase.NAME, ConditionCase.EXT, ConditionCase.FULL_NAME):
            return [(f"{subject} ", False)] + self._string_matcher_parts(condition.matcher)
        elif case in (
            ConditionCase.PARENT_CONTAINS,
            ConditionCase.PARENT_DOESNT_CONTAIN,
            ConditionCase.HIERARCHY_CONTAINS,
        ):
            nested = self._parts(condition.matcher.condition)
            return [(f"{subject} ", False)] + _lowercase_first(nested)

        raise ValueError(f"Unhandled condition case: {case}")

    def _string_matcher_parts(self, matcher: StringMatcher) -> List[Tuple[str, bool]]:
        parts = [(f"{_VERBS[matcher.strategy]} ", False), (f"'{matcher.pattern}'", True)]
        if not matcher.case_sensitive:
            parts.append((" (ignoring case)", False))
        return parts


def _lowercase_first(parts: List[Tuple[str, bool]]) -> List[Tuple[str, bool]]:
    # "Parent contains an item where name is ..." reads as one sentence
    if not parts:
        return parts
    text, is_value = parts[0]
    return [(text[:1].lower() + text[1:], is_value)] + parts[1:]


_formatter = ConditionFormatter()


def display_description(condition: Condition) -> str:
    """Plain-text description of a condition."""
    return _formatter.string(condition)


def attributed_display_description(
    condition: Condition, attributes: ConditionFormatterAttributes
) -> AttributedString:
    """Attributed description of a condition."""
    return _formatter.attributed_string(condition, attributes)


def describe_rule(conditions: Tuple[Condition, ...]) -> str:
    """One-line description of a conjunction of conditions."""
    if not conditions:
        return "Every item"
    return " and ".join(display_description(condition) for condition in conditions)
