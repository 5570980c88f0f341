"""
Plain-text views of a knowledge node network.

- render_active_tags: tags sorted by confidence, highest first
- render_network_summary: node counts and per-node state
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING

from ..tags import Fact, Recommendation, Rule

if TYPE_CHECKING:
    from .network import KnowledgeNodeNetwork
    from .node import KnowledgeNode


def tag_kind(tag: Fact | Recommendation | Rule) -> str:
    """Human-readable variant name."""
    if isinstance(tag, Rule):
        return "Rule"
    if isinstance(tag, Recommendation):
        return "Recommendation"
    return "Fact"


def _format_confidence(conf: float) -> str:
    if conf >= 80:
        return f"✓ {conf:6.2f}"
    elif conf >= 50:
        return f"• {conf:6.2f}"
    else:
        return f"· {conf:6.2f}"


def render_active_tags(tags: Mapping, title: str = "Active tags") -> str:
    """
    Render a tag -> confidence mapping, highest confidence first.

    Ties are broken by the tag text so the output is stable.
    """
    if not tags:
        return f"{title} (none)"

    lines = [f"{title} ({len(tags)})"]
    for tag, conf in sorted(tags.items(), key=lambda item: (-item[1], str(item[0]))):
        lines.append(f"  {_format_confidence(conf)}  {tag_kind(tag):<14} {tag}")
    return "\n".join(lines)


def _node_state(node: "KnowledgeNode") -> str:
    if node.is_expired:
        return "expired"
    return "fired" if node.is_fired() else "idle"


def render_network_summary(network: "KnowledgeNodeNetwork") -> str:
    """Render node counts by variant and each node's state."""
    if not network.nodes:
        return "Knowledge Node Network (Empty)"

    counts: dict[str, int] = {}
    for tag in network.nodes:
        kind = tag_kind(tag)
        counts[kind] = counts.get(kind, 0) + 1
    breakdown = ", ".join(f"{kind}: {count}" for kind, count in sorted(counts.items()))

    lines = [f"Knowledge Node Network ({len(network.nodes)} nodes; {breakdown})"]
    for node in sorted(network.nodes.values(), key=lambda n: str(n.input_tag)):
        lines.append(
            f"  [{_node_state(node)}] {node.input_tag} "
            f"(threshold={node.threshold}, activation={node.activation:.0f}, "
            f"belief={node.belief:.2f}, outputs={len(node.outputs)})"
        )
    return "\n".join(lines)
