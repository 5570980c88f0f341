"""
Parsing of the textual tag grammar.

Dispatch order:
1. Leading ``@``     -> Recommendation
2. Contains ``->``   -> Rule (split on the first arrow)
3. ``pred(args)``    -> Fact
4. Anything else     -> TagParseError

Arguments are kept as raw strings. Surrounding whitespace and whitespace
around comparators is dropped so that ``people > 2`` and ``people>2`` name
the same argument.
"""

import re

from .models import Fact, Recommendation, Rule

RULE_ARROW = "->"
RECOMMENDATION_PREFIX = "@"

_FACT_PATTERN = re.compile(r"^\s*([^\s()@,]+)\s*\(([^()]*)\)\s*$")
_COMPARATOR_PATTERN = re.compile(r"\s*(>=|<=|!=|==|=|>|<)\s*")


class TagParseError(ValueError):
    """Raised when text does not match any tag variant."""

    def __init__(self, text: str, reason: str | None = None):
        self.text = text
        message = f"Invalid tag: {text!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


def normalise_argument(arg: str) -> str:
    """Strip an argument and collapse whitespace around comparators."""
    return _COMPARATOR_PATTERN.sub(r"\1", arg.strip())


def _parse_shape(text: str, original: str) -> tuple[str, tuple[str, ...]]:
    """Split ``pred(a, b)`` into its predicate and argument tuple."""
    match = _FACT_PATTERN.match(text)
    if not match:
        raise TagParseError(original, "expected pred(args)")

    predicate, raw_args = match.groups()
    if not raw_args.strip():
        return predicate, ()

    args = tuple(normalise_argument(arg) for arg in raw_args.split(","))
    if any(not arg for arg in args):
        raise TagParseError(original, "empty argument")
    return predicate, args


def parse_fact(text: str) -> Fact:
    """Parse Fact-shaped text."""
    predicate, args = _parse_shape(text, text)
    return Fact(predicate=predicate, args=args)


def parse_tag(text: str) -> Fact | Recommendation | Rule:
    """
    Parse tag text into its variant.

    Args:
        text: Raw tag text, e.g. ``dog(wow, carnivore)``

    Returns:
        The parsed Fact, Recommendation or Rule

    Raises:
        TagParseError: If no variant matches
    """
    stripped = text.strip()
    if not stripped:
        raise TagParseError(text, "empty")

    if stripped.startswith(RECOMMENDATION_PREFIX):
        predicate, args = _parse_shape(stripped[1:], text)
        return Recommendation(predicate=predicate, args=args)

    if RULE_ARROW in stripped:
        left, right = stripped.split(RULE_ARROW, 1)
        if left.strip().startswith(RECOMMENDATION_PREFIX):
            raise TagParseError(text, "rule premise must be a fact")
        if RULE_ARROW in right:
            raise TagParseError(text, "rule conclusion must be a fact or recommendation")

        premise = parse_fact(left)
        conclusion = parse_tag(right)
        return Rule(premise=premise, conclusion=conclusion)

    predicate, args = _parse_shape(stripped, text)
    return Fact(predicate=predicate, args=args)
