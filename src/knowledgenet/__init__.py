"""
Knowledgenet - Symbolic activation and belief propagation over knowledge nodes.

Maps uncertain labels from an upstream classifier onto symbolic tags (facts,
rules, recommendations), propagates activation and belief through a network
of knowledge nodes, and reports the tags that fired.

Example:
    from knowledgenet import KnowledgeNodeNetwork, load_knowledge_file

    network = KnowledgeNodeNetwork()
    load_knowledge_file(network, "pets.txt")

    network.get_input_for_forward_search([("husky", 10), ("banana", 10)])
    network.forward_search(score=50)
    print(network.get_active_tags())
"""

__version__ = "0.1.0"

from .knn.adapter import ClassifierOutput
from .knn.loader import load_knowledge_file
from .knn.network import KnowledgeNodeNetwork
from .knn.node import KnowledgeNode, MalformedNodeSpecError
from .tags import Fact, Recommendation, Rule, TagParseError, parse_tag

__all__ = [
    "__version__",
    "ClassifierOutput",
    "Fact",
    "KnowledgeNode",
    "KnowledgeNodeNetwork",
    "MalformedNodeSpecError",
    "Recommendation",
    "Rule",
    "TagParseError",
    "load_knowledge_file",
    "parse_tag",
]
