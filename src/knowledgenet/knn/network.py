"""
Knowledge Node Network: excitation, firing and belief propagation.

This module implements the KnowledgeNodeNetwork class which provides:
- Node registry keyed by input tag (one node per tag)
- Excite / fire / update operations with output-tag attribution
- Active-tag and search-input bookkeeping
- Forward search (facts toward consequents) and backward search
  (goals toward antecedents)

Attribution: a fired node passes ``belief * weight / 100`` along each output
edge. Every source keeps one current contribution per output tag; the output
tag's confidence is the mean of those contributions.
"""

from collections import deque
from collections.abc import Iterable

from ..tags import Fact, Rule, Tag
from ..utils.logging import StructuredLogger
from .adapter import ClassifierOutput, collect_input_tags
from .node import EXCITATION_UNIT, FULL_BELIEF, Clock, KnowledgeNode, monotonic_ms

DEFAULT_MAX_DEPTH = 10


def _clamp_belief(value: float) -> float:
    return max(0.0, min(FULL_BELIEF, value))


class KnowledgeNodeNetwork:
    """
    Directed activation network over knowledge nodes.

    Usage:
        network = KnowledgeNodeNetwork()
        load_knowledge_file(network, "pets.txt")
        network.get_input_for_forward_search([("husky", 10)])
        activated = network.forward_search(score=50)
    """

    def __init__(self, clock: Clock | None = None, name: str = "default"):
        """
        Initialize an empty network.

        Args:
            clock: Time source in milliseconds handed to nodes built for this network
            name: Network name used as logging context
        """
        self.clock = clock or monotonic_ms
        self.name = name
        self.nodes: dict[Tag, KnowledgeNode] = {}
        self.active_tags: dict[Tag, float] = {}
        self.input_tags: dict[Tag, float] = {}
        # output tag -> {source input tag -> contribution}
        self._contributions: dict[Tag, dict[Tag, float]] = {}
        self.logger = StructuredLogger(__name__, network=name)

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def add_knowledge_node(self, node: KnowledgeNode) -> None:
        """Register a node; a node with the same input tag is replaced."""
        if node.input_tag in self.nodes:
            self.logger.warning(f"Replacing knowledge node for {node.input_tag}")
        self.nodes[node.input_tag] = node

    def get_knowledge_node(self, tag: Tag) -> KnowledgeNode | None:
        return self.nodes.get(tag)

    def reset_empty(self) -> None:
        """Drop all nodes and tags."""
        self.nodes.clear()
        self.active_tags.clear()
        self.input_tags.clear()
        self._contributions.clear()

    def get_active_tags(self) -> dict[Tag, float]:
        return dict(self.active_tags)

    def get_input_tags(self) -> dict[Tag, float]:
        return dict(self.input_tags)

    # ------------------------------------------------------------------
    # Excitation and firing
    # ------------------------------------------------------------------

    def fire(self, node: KnowledgeNode) -> None:
        """
        Treat a node as fired and attribute its outputs.

        The node's belief is used as given. Expired nodes are skipped.
        """
        if node.check_expired():
            self.logger.debug(f"Skipping fire on expired node {node.input_tag}")
            return

        if not node.is_fired():
            node.activation = float(node.threshold)
        self._attribute(node)

    def excite(self, node: KnowledgeNode, delta: int) -> bool:
        """
        Excite a node by ``delta``; ``EXCITATION_UNIT`` equals one increment.

        Args:
            node: Node to excite
            delta: Excitation amount (non-negative)

        Returns:
            True if the node fired as a result of this call
        """
        if delta < 0:
            raise ValueError(f"Excitation must be non-negative, got {delta}")
        if node.check_expired():
            self.logger.debug(f"Skipping excite on expired node {node.input_tag}")
            return False

        newly_fired = False
        for _ in range(delta // EXCITATION_UNIT):
            if node.excite():
                newly_fired = True

        if newly_fired:
            self._seed_belief(node)
            self.logger.debug(
                f"Fired {node.input_tag} (activation={node.activation:.0f}, belief={node.belief:.2f})"
            )
            self._attribute(node)
        return newly_fired

    def update_confidence(self, node: KnowledgeNode) -> None:
        """Re-attribute a fired node's outputs from its current belief."""
        if node.check_expired() or not node.is_fired():
            return

        self.active_tags[node.input_tag] = node.belief
        self._attribute(node)

    def _seed_belief(self, node: KnowledgeNode) -> None:
        """Give a newly fired node a belief if the caller has not set one."""
        if node.belief > 0:
            return

        tag = node.input_tag
        if tag in self.active_tags:
            node.belief = _clamp_belief(self.active_tags[tag])
        elif isinstance(tag, Rule) and tag.premise in self.active_tags:
            node.belief = _clamp_belief(self.active_tags[tag.premise])
        else:
            node.belief = FULL_BELIEF

    def _attribute(self, node: KnowledgeNode, visited: set | None = None) -> None:
        """
        Record a fired node's input and outputs in the active tags.

        Fired nodes keyed by an updated output take that output's confidence
        as their belief and are re-attributed. Each node is visited at most
        once per call, which keeps cyclic graphs bounded.
        """
        if visited is None:
            visited = set()
        visited.add(node.input_tag)

        self.active_tags.setdefault(node.input_tag, node.belief)

        for edge in node.outputs:
            sources = self._contributions.setdefault(edge.tag, {})
            sources[node.input_tag] = node.belief * edge.weight / 100
            self.active_tags[edge.tag] = sum(sources.values()) / len(sources)

        for edge in node.outputs:
            downstream = self.nodes.get(edge.tag)
            if downstream is None or downstream is node or edge.tag in visited:
                continue
            if downstream.is_expired or not downstream.is_fired():
                continue
            downstream.belief = _clamp_belief(self.active_tags[edge.tag])
            self._attribute(downstream, visited)

    # ------------------------------------------------------------------
    # Search inputs
    # ------------------------------------------------------------------

    def get_input_for_forward_search(
        self, outputs: Iterable["ClassifierOutput | tuple[str, int]"]
    ) -> dict[Tag, float]:
        """
        Record classifier outputs as forward-search inputs.

        Returns:
            The updated input tags
        """
        collected = collect_input_tags(self.nodes, outputs)
        self.input_tags.update(collected)
        self.logger.info(f"Forward search inputs: {len(collected)} tag(s)")
        return self.get_input_tags()

    def get_input_for_backward_search(
        self, outputs: Iterable["ClassifierOutput | tuple[str, int]"]
    ) -> dict[Tag, float]:
        """
        Record classifier outputs as backward-search goals.

        Collection matches the forward case; only the consuming search differs.
        """
        collected = collect_input_tags(self.nodes, outputs)
        self.input_tags.update(collected)
        self.logger.info(f"Backward search goals: {len(collected)} tag(s)")
        return self.get_input_tags()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _rule_nodes_for_premise(self, tag: Tag) -> list[KnowledgeNode]:
        if not isinstance(tag, Fact):
            return []
        return [
            node
            for node in self.nodes.values()
            if isinstance(node.input_tag, Rule) and node.input_tag.premise == tag
        ]

    def forward_search(self, score: float) -> set:
        """
        Propagate activation from the input tags toward consequents.

        Input tags at or above ``score`` that have a node are excited by one
        unit with their confidence as belief. Every node that fires excites
        the nodes keyed by its sufficiently confident outputs, along with rule
        nodes whose premise is such an output.

        Args:
            score: Minimum confidence for a tag to drive excitation

        Returns:
            Tags that became active during this search
        """
        before = set(self.active_tags)
        queue: deque[KnowledgeNode] = deque()

        for tag, confidence in self.input_tags.items():
            node = self.nodes.get(tag)
            if node is None or confidence < score:
                continue
            if not node.is_fired():
                node.belief = _clamp_belief(confidence)
            queue.append(node)
            queue.extend(self._rule_nodes_for_premise(tag))

        excitations = 0
        while queue:
            node = queue.popleft()
            excitations += 1
            if not self.excite(node, EXCITATION_UNIT):
                continue

            for edge in node.outputs:
                if self.active_tags.get(edge.tag, 0.0) < score:
                    continue
                downstream = self.nodes.get(edge.tag)
                if downstream is not None and not downstream.is_fired():
                    queue.append(downstream)
                queue.extend(
                    rule_node
                    for rule_node in self._rule_nodes_for_premise(edge.tag)
                    if not rule_node.is_fired()
                )

        activated = set(self.active_tags) - before
        self.logger.info(
            f"Forward search (score={score}) activated {len(activated)} tag(s) "
            f"in {excitations} excitation(s)"
        )
        return activated

    def _antecedents(self, goal: Tag) -> list[tuple[Tag, int | None]]:
        """Tags that directly support ``goal`` with the weight of the support."""
        found: list[tuple[Tag, int | None]] = []
        for node in self.nodes.values():
            weight = node.weight_for(goal)
            if weight is not None:
                found.append((node.input_tag, weight))
            if isinstance(node.input_tag, Rule) and node.input_tag.conclusion == goal:
                found.append((node.input_tag, None))
        if isinstance(goal, Rule):
            found.append((goal.premise, None))
        return found

    def backward_search(self, score: float, max_depth: int = DEFAULT_MAX_DEPTH) -> dict[Tag, float]:
        """
        Walk from the input tags toward the antecedents that would justify them.

        Each goal starts at full belief; an antecedent reached over an edge of
        weight ``w`` gets ``goal * w / 100``, rule premises and rules that
        conclude a goal inherit the goal's confidence. Activation is untouched.

        Args:
            score: Minimum confidence for an antecedent to be kept and expanded
            max_depth: Maximum number of hops from any goal

        Returns:
            Best confidence found for each antecedent
        """
        goals = set(self.input_tags)
        found: dict[Tag, float] = {}
        frontier: deque[tuple[Tag, float, int]] = deque(
            (goal, FULL_BELIEF, 0) for goal in goals
        )

        while frontier:
            tag, confidence, depth = frontier.popleft()
            if depth >= max_depth:
                continue
            for antecedent, weight in self._antecedents(tag):
                attributed = confidence if weight is None else confidence * weight / 100
                if attributed < score or antecedent in goals:
                    continue
                if attributed <= found.get(antecedent, -1.0):
                    continue
                found[antecedent] = attributed
                frontier.append((antecedent, attributed, depth + 1))

        self.logger.info(
            f"Backward search (score={score}) found {len(found)} antecedent(s) "
            f"for {len(goals)} goal(s)"
        )
        return found

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, tag: object) -> bool:
        return tag in self.nodes
