"""
Tests for knowledge file loading.
"""

import pytest

from knowledgenet.knn.loader import load_knowledge_file, parse_knowledge_lines, tokenize_line
from knowledgenet.knn.network import KnowledgeNodeNetwork
from knowledgenet.knn.node import MalformedNodeSpecError
from knowledgenet.tags import TagParseError, parse_tag


def test_tokenize_line():
    assert tokenize_line("a(x); 100; b(y); 50;") == ["a(x)", "100", "b(y)", "50"]
    assert tokenize_line("a(x)|100", delimiter="|") == ["a(x)", "100"]


def test_parse_skips_blanks_and_comments():
    nodes = parse_knowledge_lines(["# header", "", "a(x); 100; b(y); 50", "   "])
    assert len(nodes) == 1
    assert nodes[0].input_tag == parse_tag("a(x)")


def test_malformed_line_reports_location():
    with pytest.raises(MalformedNodeSpecError) as exc_info:
        parse_knowledge_lines(["a(x); 100", "b(y); high"], source="kb.txt")
    assert "kb.txt:2" in str(exc_info.value)
    assert exc_info.value.data == ["b(y)", "high"]


def test_bad_tag_reports_location():
    with pytest.raises(TagParseError) as exc_info:
        parse_knowledge_lines(["chair; 100"], source="kb.txt")
    assert "kb.txt:1" in str(exc_info.value)
    assert exc_info.value.text == "chair"


def test_load_pet_file(pet_data_path, clock):
    network = KnowledgeNodeNetwork(clock=clock)
    nodes = load_knowledge_file(network, pet_data_path)

    assert len(nodes) == 5
    assert len(network) == 5
    dog = network.get_knowledge_node(parse_tag("dog(wow, carnivore)"))
    assert dog is nodes[0]
    assert dog.initial_age_timestamp == clock.now
    assert dog.weight_for(parse_tag("animal(multicellular,vertebrate,invertebrate)")) == 90


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_knowledge_file(KnowledgeNodeNetwork(), tmp_path / "missing.txt")


def test_custom_delimiter(tmp_path):
    path = tmp_path / "kb.txt"
    path.write_text("a(x) | 100 | @b(y) | 30\n", encoding="utf-8")

    network = KnowledgeNodeNetwork()
    load_knowledge_file(network, path, delimiter="|")

    assert network.get_knowledge_node(parse_tag("a(x)")).weight_for(parse_tag("@b(y)")) == 30
