"""Knowledge node network: nodes, propagation, search and input adaptation."""

from .adapter import ClassifierOutput, normalise_confidence, parse_label, unwrap_meta_rule
from .loader import load_knowledge_file, parse_knowledge_lines
from .network import KnowledgeNodeNetwork
from .node import (
    ACTIVATION_INCREMENT,
    AGE_THRESHOLD,
    EXCITATION_UNIT,
    SIGMOID_VALUES,
    KnowledgeNode,
    MalformedNodeSpecError,
    OutputEdge,
)
from .views import render_active_tags, render_network_summary

__all__ = [
    "ACTIVATION_INCREMENT",
    "AGE_THRESHOLD",
    "EXCITATION_UNIT",
    "SIGMOID_VALUES",
    "ClassifierOutput",
    "KnowledgeNode",
    "KnowledgeNodeNetwork",
    "MalformedNodeSpecError",
    "OutputEdge",
    "load_knowledge_file",
    "normalise_confidence",
    "parse_knowledge_lines",
    "parse_label",
    "render_active_tags",
    "render_network_summary",
    "unwrap_meta_rule",
]
