"""
Knowledge file loading.

A knowledge file holds one node per line:

    <inputTag>; <threshold>; <outputTag1>; <weight1>; <outputTag2>; <weight2>; ...

Blank lines and lines starting with ``#`` are ignored.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from ..tags import TagParseError
from .network import KnowledgeNodeNetwork
from .node import Clock, KnowledgeNode, MalformedNodeSpecError

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = ";"
COMMENT_PREFIX = "#"


def tokenize_line(line: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """Split a knowledge line into stripped tokens, dropping a trailing empty field."""
    tokens = [token.strip() for token in line.split(delimiter)]
    if tokens and not tokens[-1]:
        tokens.pop()
    return tokens


def parse_knowledge_lines(
    lines: Iterable[str],
    source: str = "<memory>",
    delimiter: str = DEFAULT_DELIMITER,
    clock: Clock | None = None,
) -> list[KnowledgeNode]:
    """
    Build nodes from knowledge lines.

    Args:
        lines: Lines of a knowledge file
        source: Name used in error messages
        delimiter: Field separator
        clock: Time source for the created nodes

    Returns:
        Nodes in line order

    Raises:
        MalformedNodeSpecError: If a line is not a valid node spec
        TagParseError: If a line contains invalid tag text
    """
    nodes = []
    for line_number, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue

        tokens = tokenize_line(stripped, delimiter)
        try:
            nodes.append(KnowledgeNode.from_spec(tokens, clock=clock))
        except MalformedNodeSpecError as e:
            raise MalformedNodeSpecError(f"{source}:{line_number}: {e}", tokens) from e
        except TagParseError as e:
            raise TagParseError(e.text, f"{source}:{line_number}") from e
    return nodes


def load_knowledge_file(
    network: KnowledgeNodeNetwork,
    path: str | Path,
    delimiter: str = DEFAULT_DELIMITER,
) -> list[KnowledgeNode]:
    """
    Load a knowledge file into a network.

    Args:
        network: Network receiving the nodes
        path: Knowledge file path
        delimiter: Field separator

    Returns:
        The loaded nodes in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Knowledge file not found: {path}")

    lines = path.read_text(encoding="utf-8").splitlines()
    nodes = parse_knowledge_lines(lines, source=str(path), delimiter=delimiter, clock=network.clock)
    for node in nodes:
        network.add_knowledge_node(node)

    logger.info(f"Loaded {len(nodes)} knowledge node(s) from {path}")
    return nodes
