"""
Edge compatibility rules deciding which edge pairs may enter the product graph.

A compatibility predicate answers whether an edge of graph A and an edge of
graph B may represent the same relation. Because edges are undirected, an
edge pair can be aligned in two ways; rules that look at endpoint
attributes report which of the two alignments they accept.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Tuple, Union

from .exceptions import ConfigurationError
from .graph import Edge


class Alignment(Enum):
    """Endpoint alignment of an (edge_a, edge_b) pair."""
    PARALLEL = "parallel"   # source->source, target->target
    CROSSED = "crossed"     # source->target, target->source

    def map_endpoints(self, edge_a: Edge, edge_b: Edge) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """Return the two (index_a, index_b) vertex pairs implied by this alignment."""
        if self is Alignment.PARALLEL:
            return ((edge_a.source.index, edge_b.source.index),
                    (edge_a.target.index, edge_b.target.index))
        return ((edge_a.source.index, edge_b.target.index),
                (edge_a.target.index, edge_b.source.index))


BOTH_ALIGNMENTS = (Alignment.PARALLEL, Alignment.CROSSED)


@dataclass(frozen=True)
class CompatibilityConfig:
    """
    Which attributes must agree for two edges to be compatible.

    Attributes:
        edge_attributes: Edge attribute keys whose values must be equal.
        vertex_attributes: Vertex attribute keys that must be equal for the
            vertices paired by an alignment.
        missing_attribute_matches: Whether a key absent on both sides counts as equal.
    """
    edge_attributes: Tuple[str, ...] = ("spatial",)
    vertex_attributes: Tuple[str, ...] = ("sse_type",)
    missing_attribute_matches: bool = False

    def validate(self) -> "CompatibilityConfig":
        """
        Check the configuration.

        Raises:
            ConfigurationError: If a key list is not a tuple of unique, non-empty strings.
        """
        for label, keys in (("edge_attributes", self.edge_attributes),
                            ("vertex_attributes", self.vertex_attributes)):
            if isinstance(keys, str) or not isinstance(keys, (tuple, list)):
                raise ConfigurationError(f"{label} must be a sequence of attribute names, got {keys!r}")
            for key in keys:
                if not isinstance(key, str) or not key.strip():
                    raise ConfigurationError(f"Invalid attribute name {key!r} in {label}")
            if len(set(keys)) != len(keys):
                raise ConfigurationError(f"Duplicate attribute names in {label}: {list(keys)}")
        return self


class AttributeCompatibility:
    """
    Compatibility predicate driven by a CompatibilityConfig.

    Two edges are compatible if all configured edge attributes are equal and
    at least one endpoint alignment pairs vertices whose configured vertex
    attributes are equal.
    """

    def __init__(self, config: CompatibilityConfig):
        self.config = config.validate()

    def _equal(self, left, right) -> bool:
        if left is None or right is None:
            return self.config.missing_attribute_matches and left is None and right is None
        return left == right

    def _edges_match(self, edge_a: Edge, edge_b: Edge) -> bool:
        return all(self._equal(edge_a.get(key), edge_b.get(key))
                   for key in self.config.edge_attributes)

    def _vertices_match(self, vertex_a, vertex_b) -> bool:
        return all(self._equal(vertex_a.get(key), vertex_b.get(key))
                   for key in self.config.vertex_attributes)

    def alignments(self, edge_a: Edge, edge_b: Edge) -> Tuple[Alignment, ...]:
        """Return the alignments under which the edge pair is compatible."""
        if not self._edges_match(edge_a, edge_b):
            return ()
        accepted = []
        if (self._vertices_match(edge_a.source, edge_b.source)
                and self._vertices_match(edge_a.target, edge_b.target)):
            accepted.append(Alignment.PARALLEL)
        if (self._vertices_match(edge_a.source, edge_b.target)
                and self._vertices_match(edge_a.target, edge_b.source)):
            accepted.append(Alignment.CROSSED)
        return tuple(accepted)

    def __call__(self, edge_a: Edge, edge_b: Edge) -> bool:
        return bool(self.alignments(edge_a, edge_b))

    def __repr__(self) -> str:
        return f"AttributeCompatibility({self.config!r})"


def match_any() -> AttributeCompatibility:
    """Predicate that accepts every edge pair under both alignments."""
    return AttributeCompatibility(CompatibilityConfig(edge_attributes=(), vertex_attributes=()))


Predicate = Union[CompatibilityConfig, AttributeCompatibility, Callable[[Edge, Edge], bool]]


def make_predicate(rule: Predicate) -> Callable[[Edge, Edge], bool]:
    """
    Normalise a compatibility rule into a callable predicate.

    Args:
        rule: A CompatibilityConfig, an AttributeCompatibility or any callable
            taking (edge_a, edge_b) and returning a bool.

    Returns:
        A callable predicate. Predicates built from a configuration also
        expose `alignments(edge_a, edge_b)`.

    Raises:
        ConfigurationError: If no usable rule was supplied.
    """
    if rule is None:
        raise ConfigurationError("No compatibility rule supplied")
    if isinstance(rule, CompatibilityConfig):
        return AttributeCompatibility(rule)
    if isinstance(rule, AttributeCompatibility):
        rule.config.validate()
        return rule
    if callable(rule):
        return rule
    raise ConfigurationError(f"Unsupported compatibility rule: {rule!r}")


def predicate_alignments(predicate: Callable[[Edge, Edge], bool],
                         edge_a: Edge, edge_b: Edge) -> Tuple[Alignment, ...]:
    """
    Return the alignments a predicate accepts for an edge pair.

    Plain callables know nothing about alignments, so an accepted pair is
    treated as compatible under both.
    """
    alignments = getattr(predicate, "alignments", None)
    if alignments is not None:
        return tuple(alignments(edge_a, edge_b))
    return BOTH_ALIGNMENTS if predicate(edge_a, edge_b) else ()
