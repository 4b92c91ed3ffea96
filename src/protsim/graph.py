"""
Attributed undirected graph model for protein topology graphs.

Vertices are secondary structure elements carrying the identifier they had
in the parsed input file plus a string attribute mapping. Edges are the
spatial or sequential relations between them.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from .exceptions import GraphModelError


def _freeze(attributes: Optional[Mapping]) -> Mapping[str, str]:
    if not attributes:
        return MappingProxyType({})
    return MappingProxyType({str(k): str(v) for k, v in attributes.items()})


@dataclass(frozen=True)
class Vertex:
    """A vertex with its dense internal index and external identifier."""
    index: int
    original_id: int
    attributes: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(key, default)


@dataclass(frozen=True)
class Edge:
    """An undirected edge; `source` and `target` follow input order."""
    index: int
    source: Vertex
    target: Vertex
    attributes: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def endpoints(self) -> Tuple[int, int]:
        return self.source.index, self.target.index

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(key, default)


class GraphModel:
    """
    Immutable attributed graph consumed by the product graph builder.

    Args:
        vertices: Sequence of (original_id, attributes) in internal index order.
        edges: Sequence of (source_index, target_index, attributes).
        name: Optional label used in progress output.

    Raises:
        GraphModelError: If an identifier is not an integer or repeats, an endpoint is out of range,
            an edge is a self-loop or the same vertex pair is connected twice.
    """

    def __init__(self, vertices: Sequence[Tuple[int, Mapping]],
                 edges: Sequence[Tuple[int, int, Mapping]],
                 name: Optional[str] = None):
        self.name = name or "graph"

        built_vertices: List[Vertex] = []
        seen_ids = set()
        for index, (original_id, attributes) in enumerate(vertices):
            try:
                original_id = int(original_id)
            except (TypeError, ValueError):
                raise GraphModelError(
                    f"Vertex {index} has non-integer id {original_id!r} in {self.name}"
                )
            if original_id in seen_ids:
                raise GraphModelError(
                    f"Duplicate vertex id {original_id} in {self.name}"
                )
            seen_ids.add(original_id)
            built_vertices.append(Vertex(index, original_id, _freeze(attributes)))

        n = len(built_vertices)
        built_edges: List[Edge] = []
        seen_pairs = set()
        for source, target, attributes in edges:
            if not (0 <= source < n and 0 <= target < n):
                raise GraphModelError(
                    f"Edge ({source}, {target}) references a vertex outside 0..{n - 1} in {self.name}"
                )
            if source == target:
                raise GraphModelError(f"Self-loop on vertex {source} in {self.name}")
            pair = (min(source, target), max(source, target))
            if pair in seen_pairs:
                raise GraphModelError(f"Parallel edge {pair} in {self.name}")
            seen_pairs.add(pair)
            built_edges.append(Edge(len(built_edges), built_vertices[source],
                                    built_vertices[target], _freeze(attributes)))

        self._vertices: Tuple[Vertex, ...] = tuple(built_vertices)
        self._edges: Tuple[Edge, ...] = tuple(built_edges)

    @property
    def vertices(self) -> Tuple[Vertex, ...]:
        return self._vertices

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    @property
    def num_vertices(self) -> int:
        return len(self._vertices)

    @property
    def num_edges(self) -> int:
        return len(self._edges)

    def vertex(self, index: int) -> Vertex:
        return self._vertices[index]

    def original_ids(self, indices: Iterable[int]) -> List[int]:
        """Map internal vertex indices to the identifiers from the input file."""
        return [self._vertices[i].original_id for i in indices]

    def __repr__(self) -> str:
        return f"GraphModel(name={self.name!r}, vertices={self.num_vertices}, edges={self.num_edges})"

    @classmethod
    def from_networkx(cls, graph: nx.Graph, id_attribute: str = "id",
                      name: Optional[str] = None) -> "GraphModel":
        """
        Build a graph model from a networkx graph.

        Nodes are indexed in ascending node order. The original identifier is
        read from `id_attribute` when present, otherwise the node key itself
        is used. Edges are ordered by their (smaller, larger) internal index
        pair so construction does not depend on insertion order.

        Args:
            graph: An undirected networkx graph.
            id_attribute: Node attribute holding the external identifier.
            name: Optional label; defaults to the graph's `name` attribute.

        Returns:
            The corresponding GraphModel.
        """
        if graph.is_directed():
            raise GraphModelError("Protein topology graphs must be undirected")
        if graph.is_multigraph():
            raise GraphModelError("Multigraphs are not supported")

        nodes = sorted(graph.nodes())
        node_to_idx = {node: i for i, node in enumerate(nodes)}

        vertices = []
        for node in nodes:
            data = dict(graph.nodes[node])
            original_id = data.pop(id_attribute, node)
            try:
                original_id = int(original_id)
            except (TypeError, ValueError):
                raise GraphModelError(
                    f"Vertex {node!r} has non-integer id {original_id!r}"
                )
            vertices.append((original_id, data))

        edges = []
        for u, v, data in graph.edges(data=True):
            i, j = node_to_idx[u], node_to_idx[v]
            if i > j:
                i, j = j, i
            edges.append((i, j, data))
        edges.sort(key=lambda e: (e[0], e[1]))

        return cls(vertices, edges, name=name or graph.graph.get("name") or None)

    def to_networkx(self) -> nx.Graph:
        """Return a networkx view with internal indices as node keys."""
        graph = nx.Graph(name=self.name)
        for vertex in self._vertices:
            graph.add_node(vertex.index, id=vertex.original_id, **dict(vertex.attributes))
        for edge in self._edges:
            graph.add_edge(edge.source.index, edge.target.index, **dict(edge.attributes))
        return graph


def graph_from_edge_list(edges: Iterable[Tuple[int, int]],
                         edge_attributes: Optional[Dict] = None,
                         vertex_attributes: Optional[Dict[int, Dict]] = None,
                         name: Optional[str] = None) -> GraphModel:
    """
    Convenience constructor for graphs whose vertex ids equal their indices.

    Args:
        edges: Pairs of vertex ids.
        edge_attributes: Attributes shared by every edge.
        vertex_attributes: Optional per-vertex attribute dicts keyed by id.
        name: Optional label.
    """
    graph = nx.Graph()
    for u, v in edges:
        graph.add_edge(u, v, **(edge_attributes or {}))
    for node, attributes in (vertex_attributes or {}).items():
        graph.add_node(node, **attributes)
    return GraphModel.from_networkx(graph, name=name)
