"""Symbolic tags: facts, recommendations and rules."""

from .models import Fact, Recommendation, Rule, Tag
from .parser import TagParseError, parse_fact, parse_tag

__all__ = [
    "Fact",
    "Recommendation",
    "Rule",
    "Tag",
    "TagParseError",
    "parse_fact",
    "parse_tag",
]
