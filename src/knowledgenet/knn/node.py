"""
Knowledge Node: a single unit of the knowledge node network.

A node wraps one input tag and a set of weighted output tags. Exciting the
node accumulates activation; once activation reaches the threshold the node
is fired and the network attributes confidence to its outputs.
"""

import logging
import time
from collections.abc import Callable, Sequence

from pydantic import BaseModel, Field, PrivateAttr

from ..tags import Tag, parse_tag

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

# Age (in clock units) after which a node stops responding to excitation
AGE_THRESHOLD = 1_000_000
# Activation added by a single excitation
ACTIVATION_INCREMENT = 100
# Sigmoid-shaped activation table, reserved for graded activation
SIGMOID_VALUES = (0, 2, 5, 11, 27, 50, 73, 88, 95, 98, 100)
# Caller-side excitation amount that equals one ACTIVATION_INCREMENT
EXCITATION_UNIT = 10
FULL_BELIEF = 100.0


def monotonic_ms() -> float:
    """Default clock: monotonic time in milliseconds."""
    return time.monotonic() * 1000


class MalformedNodeSpecError(ValueError):
    """Raised when a node specification cannot be turned into a node."""

    def __init__(self, message: str, data: Sequence[str] | None = None):
        self.data = list(data) if data is not None else None
        super().__init__(message)


class OutputEdge(BaseModel):
    """A weighted edge from a node to one of its output tags."""

    tag: Tag
    weight: int = Field(..., ge=0, le=100, description="Percentage of the source belief passed on")

    model_config = {"frozen": True}


def _parse_int(value: str, what: str, data: Sequence[str]) -> int:
    try:
        return int(value.strip())
    except (AttributeError, ValueError) as e:
        raise MalformedNodeSpecError(f"Invalid {what}: {value!r}", data) from e


class KnowledgeNode(BaseModel):
    """
    A node in the knowledge node network.

    Structure (input tag, outputs, threshold) is fixed at construction; the
    numeric state (activation, belief, age) changes as the network runs.
    ``strength`` and ``max_age`` are carried for graded propagation and
    age-weighted decay but do not influence excitation yet.
    """

    # Structure
    input_tag: Tag = Field(..., frozen=True, description="Tag that activates this node")
    outputs: tuple[OutputEdge, ...] = Field(
        default=(), frozen=True, description="Weighted output tags produced on firing"
    )
    threshold: int = Field(..., ge=0, frozen=True, description="Activation needed to fire")
    strength: int = Field(default=1, frozen=True)
    max_age: float = Field(default=60, frozen=True)

    # State
    activation: float = Field(default=0.0, ge=0.0)
    belief: float = Field(default=0.0, ge=0.0, le=100.0)
    age: float = Field(default=0.0, ge=0.0)
    initial_age_timestamp: float = Field(default_factory=monotonic_ms)
    is_expired: bool = False

    # Injected time source; None falls back to monotonic_ms
    _clock: Clock | None = PrivateAttr(default=None)

    model_config = {"validate_assignment": True}

    @classmethod
    def from_spec(cls, data: Sequence[str], clock: Clock | None = None) -> "KnowledgeNode":
        """
        Build a node from ``[input, threshold, out1, weight1, out2, weight2, ...]``.

        Args:
            data: Node specification tokens
            clock: Time source in milliseconds (defaults to a monotonic clock)

        Returns:
            The new node

        Raises:
            MalformedNodeSpecError: On a short spec, bad threshold, a weight outside
                0..100 or an output tag without a weight
            TagParseError: If any tag text is invalid
        """
        if len(data) < 2:
            raise MalformedNodeSpecError(
                f"Node spec needs an input tag and a threshold, got {len(data)} element(s)",
                data,
            )

        input_tag = parse_tag(data[0])
        threshold = _parse_int(data[1], "threshold", data)
        if threshold < 0:
            raise MalformedNodeSpecError(f"Negative threshold: {threshold}", data)

        output_section = data[2:]
        if len(output_section) % 2:
            raise MalformedNodeSpecError(
                f"Output tag {output_section[-1]!r} has no weight", data
            )

        # One edge per distinct output tag, last weight wins
        weights: dict = {}
        for i in range(0, len(output_section), 2):
            tag = parse_tag(output_section[i])
            weight = _parse_int(output_section[i + 1], "weight", data)
            if not 0 <= weight <= 100:
                raise MalformedNodeSpecError(f"Weight out of range 0..100: {weight}", data)
            weights[tag] = weight

        clock = clock or monotonic_ms
        node = cls(
            input_tag=input_tag,
            outputs=tuple(OutputEdge(tag=t, weight=w) for t, w in weights.items()),
            threshold=threshold,
            initial_age_timestamp=clock(),
        )
        node._clock = clock
        return node

    @property
    def output_tags(self) -> frozenset:
        """The set of tags this node produces when fired."""
        return frozenset(edge.tag for edge in self.outputs)

    def weight_for(self, tag: Tag) -> int | None:
        """Weight of the edge to ``tag``, or None if it is not an output."""
        for edge in self.outputs:
            if edge.tag == tag:
                return edge.weight
        return None

    def check_expired(self) -> bool:
        """Apply the age rule; the expired flag never resets."""
        if not self.is_expired and self.age > AGE_THRESHOLD:
            self.is_expired = True
            logger.debug(f"Knowledge node {self.input_tag} expired at age {self.age:.0f}")
        return self.is_expired

    def excite(self) -> bool:
        """
        Add one activation increment.

        Returns:
            True if the node was newly fired by this excitation
        """
        if self.check_expired():
            return False

        old_activation = self.activation
        self.activation += ACTIVATION_INCREMENT
        return old_activation < self.threshold and self.is_fired()

    def is_fired(self) -> bool:
        return self.activation >= self.threshold

    def _now(self) -> float:
        return (self._clock or monotonic_ms)()

    def current_age(self) -> float:
        """Time elapsed since the last age update, without resetting it."""
        return self._now() - self.initial_age_timestamp

    def update_age(self) -> float:
        """
        Age the node.

        Returns:
            The age (time elapsed since creation or the last update)
        """
        now = self._now()
        self.age = now - self.initial_age_timestamp
        self.initial_age_timestamp = now
        return self.age

    def get_belief(self) -> float:
        return self.belief

    def set_belief(self, belief: float) -> None:
        self.belief = belief

    def update_belief(self) -> None:
        """Hook for belief revision; belief is currently set by the network or caller."""

    def structural_hash(self) -> int:
        return hash(
            (
                self.input_tag,
                self.outputs,
                self.threshold,
                self.strength,
                self.max_age,
                self.age,
                self.belief,
                self.activation,
            )
        )

    def __lt__(self, other: "KnowledgeNode") -> bool:
        # Hash breaks age ties so distinct nodes survive in age-sorted sets
        return (self.age, self.structural_hash()) < (other.age, other.structural_hash())

    def __str__(self) -> str:
        outputs = ", ".join(str(edge.tag) for edge in self.outputs)
        return f"KnowledgeNode[inputTag={self.input_tag}, outputTags={{{outputs}}}]"
