"""
Input adapter between the upstream classifier and the network.

The classifier emits ``(label, confidence)`` pairs. Labels arrive in three
shapes:
- bare identifiers: ``monkey``
- fact or recommendation text: ``@isAnimal(calm,bark)``
- meta-bracketed rules: ``{ [[A 100.0% ]]=>[[B 100.0% ]]100.0% }``

This is the only module that knows about upstream string formats; everything
past it works on parsed tags.
"""

import logging
import re
from collections.abc import Iterable, Mapping

from pydantic import BaseModel, Field

from ..tags import Fact, Recommendation, Rule, Tag, parse_tag
from ..tags.parser import RULE_ARROW
from .node import KnowledgeNode

logger = logging.getLogger(__name__)

# Classifier confidences are on a 0-10 scale; the network works in percent
CONFIDENCE_SCALE = 10.0

_BARE_IDENTIFIER = re.compile(r"^[A-Za-z_][\w]*$")
_META_RULE = re.compile(r"^\{\s*\[\[(?P<premise>.*?)\]\]\s*=>\s*\[\[(?P<conclusion>.*?)\]\].*\}$")
_TRAILING_PERCENT = re.compile(r"\s*-?[\d.]+\s*%\s*$")


class ClassifierOutput(BaseModel):
    """A single labelled output of the upstream classifier."""

    label: str = Field(..., min_length=1, description="Label text in any recognised shape")
    confidence: int = Field(..., ge=0, le=10, description="Classifier confidence on a 0-10 scale")

    model_config = {"frozen": True}


def as_classifier_output(item: "ClassifierOutput | tuple[str, int]") -> ClassifierOutput:
    """Accept either a ClassifierOutput or a plain ``(label, confidence)`` pair."""
    if isinstance(item, ClassifierOutput):
        return item
    label, confidence = item
    return ClassifierOutput(label=label, confidence=confidence)


def normalise_confidence(confidence: float) -> float:
    """Scale a classifier confidence to percent, clamped to [0, 100]."""
    return max(0.0, min(100.0, confidence * CONFIDENCE_SCALE))


def _clean_meta_part(part: str) -> str:
    """``friend([nice, kind]) 100.0% `` -> ``friend(nice, kind)``."""
    part = _TRAILING_PERCENT.sub("", part.strip())
    return part.replace("[", "").replace("]", "").strip()


def unwrap_meta_rule(label: str) -> str | None:
    """
    Convert a meta-bracketed rule to ``A -> B`` form.

    Returns:
        The canonical rule text, or None if the label is not meta-bracketed
    """
    match = _META_RULE.match(label.strip())
    if not match:
        return None
    premise = _clean_meta_part(match.group("premise"))
    conclusion = _clean_meta_part(match.group("conclusion"))
    return f"{premise} {RULE_ARROW} {conclusion}"


def parse_label(label: str) -> Fact | Recommendation | Rule:
    """
    Parse an upstream label into a tag.

    Bare identifiers become argument-less facts (``chair`` -> ``chair()``).

    Raises:
        TagParseError: If the label matches no known shape
    """
    text = label.strip()
    unwrapped = unwrap_meta_rule(text)
    if unwrapped is not None:
        return parse_tag(unwrapped)
    if _BARE_IDENTIFIER.match(text):
        return Fact(predicate=text)
    return parse_tag(text)


def resolve_node(
    nodes: Mapping[Tag, KnowledgeNode],
    tag: Fact | Recommendation | Rule,
) -> KnowledgeNode | None:
    """
    Find the node an upstream tag refers to.

    An exact input-tag match wins. An argument-less fact (a bare label) also
    matches the first fact or recommendation node with the same predicate.
    """
    node = nodes.get(tag)
    if node is not None:
        return node

    if isinstance(tag, Fact) and not tag.args:
        for candidate in nodes.values():
            input_tag = candidate.input_tag
            if isinstance(input_tag, (Fact, Recommendation)) and input_tag.predicate == tag.predicate:
                return candidate
    return None


def collect_input_tags(
    nodes: Mapping[Tag, KnowledgeNode],
    outputs: Iterable["ClassifierOutput | tuple[str, int]"],
) -> dict:
    """
    Turn classifier outputs into search input confidences.

    Known tags are keyed by their node's input tag at the normalised
    confidence; unknown tags are kept at 0.0 so callers can see the miss.
    """
    collected: dict = {}
    for item in outputs:
        output = as_classifier_output(item)
        tag = parse_label(output.label)
        node = resolve_node(nodes, tag)
        if node is None:
            logger.debug(f"No knowledge node for {output.label!r}, recording {tag} at 0.0")
            collected[tag] = 0.0
        else:
            collected[node.input_tag] = normalise_confidence(output.confidence)
    return collected
