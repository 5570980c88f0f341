"""
Tests for the classifier input adapter.
"""

import pytest
from pydantic import ValidationError

from knowledgenet.knn.adapter import (
    ClassifierOutput,
    collect_input_tags,
    normalise_confidence,
    parse_label,
    resolve_node,
    unwrap_meta_rule,
)
from knowledgenet.knn.node import KnowledgeNode
from knowledgenet.tags import Fact, Recommendation, Rule, TagParseError, parse_tag

META_RULE = "{ [[friend([nice, kind]) 100.0% ]]=>[[@meet([community, people > 2]) 100.0% ]]100.0% }"


def _nodes(*input_texts: str) -> dict:
    nodes = {}
    for text in input_texts:
        node = KnowledgeNode.from_spec([text, "100"])
        nodes[node.input_tag] = node
    return nodes


class TestParseLabel:
    def test_dispatch(self):
        assert isinstance(parse_label("@isAnimal(calm,bark)"), Recommendation)
        assert isinstance(parse_label("friend(nice,kind) -> @meet(community,people>2)"), Rule)
        assert isinstance(parse_label("monkey(intelligent,length>50,weight>3)"), Fact)

    def test_bare_identifier_becomes_empty_fact(self):
        assert parse_label("chair") == parse_tag("chair()")
        assert parse_label("  banana ") == Fact(predicate="banana")

    def test_meta_rule(self):
        assert parse_label(META_RULE) == parse_tag("friend(nice,kind) -> @meet(community,people>2)")

    def test_unrecognised_label(self):
        with pytest.raises(TagParseError):
            parse_label("two words")


class TestUnwrapMetaRule:
    def test_unwraps_to_arrow_form(self):
        assert unwrap_meta_rule(META_RULE) == "friend(nice, kind) -> @meet(community, people > 2)"

    def test_non_meta_label(self):
        assert unwrap_meta_rule("friend(nice,kind)") is None


class TestConfidence:
    @pytest.mark.parametrize(
        "raw, expected",
        [(0, 0.0), (5, 50.0), (10, 100.0), (80, 100.0)],
    )
    def test_normalise(self, raw, expected):
        assert normalise_confidence(raw) == expected

    def test_output_validation(self):
        with pytest.raises(ValidationError):
            ClassifierOutput(label="dog", confidence=11)
        with pytest.raises(ValidationError):
            ClassifierOutput(label="dog", confidence=-1)
        with pytest.raises(ValidationError):
            ClassifierOutput(label="", confidence=1)


class TestResolveNode:
    def test_exact_match(self):
        nodes = _nodes("monkey(intelligent,length>50,weight>3)")
        node = resolve_node(nodes, parse_tag("monkey(intelligent, length > 50, weight > 3)"))
        assert node is nodes[parse_tag("monkey(intelligent,length>50,weight>3)")]

    def test_bare_label_matches_predicate(self):
        nodes = _nodes("monkey(intelligent)", "@isAnimal(calm,bark)")
        assert resolve_node(nodes, Fact(predicate="isAnimal")).input_tag == parse_tag("@isAnimal(calm,bark)")

    def test_bare_label_does_not_match_rules(self):
        nodes = _nodes("friend(nice,kind) -> @meet(community)")
        assert resolve_node(nodes, Fact(predicate="friend")) is None

    def test_fact_with_args_needs_exact_match(self):
        nodes = _nodes("monkey(intelligent)")
        assert resolve_node(nodes, parse_tag("monkey(lazy)")) is None


class TestCollect:
    def test_hits_and_misses(self):
        nodes = _nodes("monkey(intelligent)", "@isAnimal(calm,bark)")
        collected = collect_input_tags(
            nodes,
            [ClassifierOutput(label="monkey", confidence=7), ("isAnimal", 10), ("banana", 10)],
        )
        assert collected == {
            parse_tag("monkey(intelligent)"): 70.0,
            parse_tag("@isAnimal(calm,bark)"): 100.0,
            Fact(predicate="banana"): 0.0,
        }

    def test_mid_range_confidences_stay_distinct(self):
        nodes = _nodes("monkey(a)", "tiger(a)")
        collected = collect_input_tags(nodes, [("monkey", 5), ("tiger", 9)])
        assert collected == {parse_tag("monkey(a)"): 50.0, parse_tag("tiger(a)"): 90.0}

    def test_percent_scale_input_rejected(self):
        nodes = _nodes("monkey(a)")
        with pytest.raises(ValidationError):
            collect_input_tags(nodes, [("monkey", 50)])

    def test_later_output_overwrites(self):
        nodes = _nodes("monkey(intelligent)")
        collected = collect_input_tags(nodes, [("monkey", 2), ("monkey", 9)])
        assert collected == {parse_tag("monkey(intelligent)"): 90.0}
