"""
Construction of the product (compatibility) graph of two protein graphs.

Each product vertex stands for a compatible edge pair (edge_a, edge_b). Two
product vertices are adjacent if the vertex correspondences they imply can
hold at the same time: no vertex of A is sent to two different vertices of B
and no two vertices of A are sent to the same vertex of B.

Adjacency is decided pair by pair, and each pair may pick its own endpoint
alignment. A clique is therefore pairwise consistent but not always a
single consistent vertex mapping: when two edges can be aligned either way,
different pairs in the clique may imply different images for one vertex.
"""

import logging
import time
from dataclasses import dataclass
from itertools import product
from typing import Callable, FrozenSet, List, Tuple

import networkx as nx
import numpy as np

from .compatibility import Alignment, make_predicate, predicate_alignments
from .graph import Edge, GraphModel

logger = logging.getLogger(__name__)

# Product vertices processed per numpy block when computing adjacency.
_BLOCK_SIZE = 512


@dataclass(frozen=True)
class ProductVertex:
    """A compatible edge pair and the endpoint alignments it admits."""
    index: int
    edge_a: Edge
    edge_b: Edge
    alignments: Tuple[Alignment, ...]

    def vertex_pairs(self, alignment: Alignment) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        return alignment.map_endpoints(self.edge_a, self.edge_b)


class ProductGraph:
    """
    Read-only product graph of two GraphModels.

    The underlying networkx graph uses product vertex indices 0..n-1 as node
    keys; each node carries `edge_a`, `edge_b` and `alignments` attributes.
    """

    def __init__(self, graph_a: GraphModel, graph_b: GraphModel,
                 vertices: List[ProductVertex], graph: nx.Graph):
        self.graph_a = graph_a
        self.graph_b = graph_b
        self._vertices = tuple(vertices)
        self._graph = graph
        self._adjacency = tuple(frozenset(graph.neighbors(v.index)) for v in self._vertices)

    @property
    def graph(self) -> nx.Graph:
        """A copy of the networkx representation."""
        return self._graph.copy()

    @property
    def vertices(self) -> Tuple[ProductVertex, ...]:
        return self._vertices

    def number_of_vertices(self) -> int:
        return len(self._vertices)

    def number_of_edges(self) -> int:
        return self._graph.number_of_edges()

    def vertex(self, index: int) -> ProductVertex:
        return self._vertices[index]

    def neighbors(self, index: int) -> FrozenSet[int]:
        return self._adjacency[index]

    def has_edge(self, u: int, v: int) -> bool:
        return v in self._adjacency[u]

    def adjacency(self) -> Tuple[FrozenSet[int], ...]:
        """Neighbour sets indexed by product vertex."""
        return self._adjacency

    def __len__(self) -> int:
        return len(self._vertices)

    def __repr__(self) -> str:
        return (f"ProductGraph({self.graph_a.name!r} x {self.graph_b.name!r}, "
                f"vertices={self.number_of_vertices()}, edges={self.number_of_edges()})")


def _mapping_is_injective(pairs) -> bool:
    forward = {}
    backward = {}
    for a, b in pairs:
        if forward.setdefault(a, b) != b or backward.setdefault(b, a) != a:
            return False
    return True


def pairs_consistent(p1: ProductVertex, p2: ProductVertex) -> bool:
    """
    Check whether two product vertices may belong to the same clique.

    They must be distinct, and some alignment of each must give a vertex
    mapping that stays one-to-one when both are combined.
    """
    if p1.edge_a.index == p2.edge_a.index and p1.edge_b.index == p2.edge_b.index:
        return False
    for first, second in product(p1.alignments, p2.alignments):
        if _mapping_is_injective(p1.vertex_pairs(first) + p2.vertex_pairs(second)):
            return True
    return False


def _alignment_rows(vertices: List[ProductVertex]) -> np.ndarray:
    """
    Encode every product vertex as two alignment rows (a0, b0, a1, b1).

    Vertices admitting a single alignment repeat it in both rows so the
    result can be reshaped to (n, 2, 4).
    """
    rows = np.empty((len(vertices), 2, 4), dtype=np.int64)
    for pv in vertices:
        alignments = pv.alignments if len(pv.alignments) == 2 else pv.alignments * 2
        for slot, alignment in enumerate(alignments):
            (a0, b0), (a1, b1) = pv.vertex_pairs(alignment)
            rows[pv.index, slot] = (a0, b0, a1, b1)
    return rows.reshape(-1, 4)


def _pairs_agree(ua: np.ndarray, ub: np.ndarray, va: np.ndarray, vb: np.ndarray) -> np.ndarray:
    # (u -> x) and (v -> y) are compatible iff u == v exactly when x == y
    return (ua[:, None] == va[None, :]) == (ub[:, None] == vb[None, :])


def _consistency_block(rows: np.ndarray, start: int, stop: int) -> np.ndarray:
    """Boolean adjacency between product vertices [start, stop) and all vertices."""
    block = rows[2 * start:2 * stop]
    a0, b0, a1, b1 = (block[:, k] for k in range(4))
    c0, d0, c1, d1 = (rows[:, k] for k in range(4))

    agree = _pairs_agree(a0, b0, c0, d0)
    agree &= _pairs_agree(a0, b0, c1, d1)
    agree &= _pairs_agree(a1, b1, c0, d0)
    agree &= _pairs_agree(a1, b1, c1, d1)

    n = rows.shape[0] // 2
    return agree.reshape(stop - start, 2, n, 2).any(axis=(1, 3))


def build_product_graph(graph_a: GraphModel, graph_b: GraphModel,
                        predicate: Callable[[Edge, Edge], bool],
                        verbose: bool = False) -> ProductGraph:
    """
    Build the product graph of two graph models.

    Product vertices are created in A-edge-major order for every edge pair
    accepted by the predicate, so construction is deterministic for a fixed
    edge order. Adjacency is computed with numpy in blocks of product
    vertices.

    Args:
        graph_a: First input graph.
        graph_b: Second input graph.
        predicate: Compatibility rule (see `compatibility.make_predicate`).
        verbose: Whether to print progress information.

    Returns:
        The product graph. It is empty if no edge pair is compatible.

    Raises:
        ConfigurationError: If the predicate is missing or unusable.
    """
    predicate = make_predicate(predicate)
    start_time = time.time()

    vertices: List[ProductVertex] = []
    for edge_a in graph_a.edges:
        for edge_b in graph_b.edges:
            alignments = predicate_alignments(predicate, edge_a, edge_b)
            if alignments:
                vertices.append(ProductVertex(len(vertices), edge_a, edge_b, alignments))

    graph = nx.Graph()
    for pv in vertices:
        graph.add_node(pv.index, edge_a=pv.edge_a, edge_b=pv.edge_b, alignments=pv.alignments)

    n = len(vertices)
    if n > 0:
        rows = _alignment_rows(vertices)
        for start in range(0, n, _BLOCK_SIZE):
            stop = min(start + _BLOCK_SIZE, n)
            adjacent = _consistency_block(rows, start, stop)
            local, other = np.nonzero(adjacent)
            mine = local + start
            # Keep each undirected edge once and drop the diagonal
            keep = other > mine
            graph.add_edges_from(zip(mine[keep].tolist(), other[keep].tolist()))

    runtime = time.time() - start_time
    logger.debug("Product graph of %s and %s: %d vertices, %d edges (%.3fs)",
                 graph_a.name, graph_b.name, n, graph.number_of_edges(), runtime)
    if verbose:
        print(f"Product graph: {n} vertices from {graph_a.num_edges} x {graph_b.num_edges} edge pairs, "
              f"{graph.number_of_edges()} edges ({runtime:.3f}s)")

    return ProductGraph(graph_a, graph_b, vertices, graph)
