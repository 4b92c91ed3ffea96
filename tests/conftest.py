"""
Pytest configuration and common fixtures for the test suite.
"""

import pytest
import networkx as nx
import os
import sys

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from protsim.graph import GraphModel, graph_from_edge_list


def protein_graph(sse_types, edges, name=None, first_id=1):
    """
    Build a small protein graph.

    Args:
        sse_types: SSE type per vertex ("H" helix, "E" strand), in index order.
        edges: (u, v, spatial) triples using vertex indices.
        first_id: Original id of vertex 0; later vertices count up from it.
    """
    G = nx.Graph(name=name or "protein")
    for i, sse in enumerate(sse_types):
        G.add_node(i, id=first_id + i, sse_type=sse)
    for u, v, spatial in edges:
        G.add_edge(u, v, spatial=spatial)
    return GraphModel.from_networkx(G)


@pytest.fixture
def triangle_pair():
    """Two unlabelled triangles."""
    A = graph_from_edge_list([(0, 1), (1, 2), (2, 0)], name="A")
    B = graph_from_edge_list([(0, 1), (1, 2), (2, 0)], name="B")
    return A, B


@pytest.fixture
def small_protein_pair():
    """
    Two four-SSE proteins sharing a helix-strand-strand motif.

    A: H1 -p- E2 -a- E3, plus H1 -m- H4
    B: E10 -a- E11 -p- H12, plus E11 -m- H13
    """
    A = protein_graph(
        ["H", "E", "E", "H"],
        [(0, 1, "p"), (1, 2, "a"), (0, 3, "m")],
        name="A",
    )
    B = protein_graph(
        ["E", "E", "H", "H"],
        [(0, 1, "a"), (1, 2, "p"), (1, 3, "m")],
        name="B",
        first_id=10,
    )
    return A, B


@pytest.fixture
def product_test_graphs():
    """Small graphs with known maximal clique structure, nodes 0..n-1."""
    graphs = []

    # Complete graph K4 - one maximal clique of size 4
    graphs.append(("Complete K4", nx.complete_graph(4)))

    # 5-cycle - five maximal cliques of size 2
    graphs.append(("5-cycle", nx.cycle_graph(5)))

    # Triangle plus isolated vertex
    G = nx.complete_graph(3)
    G.add_node(3)
    graphs.append(("Triangle + isolated", G))

    # Petersen graph
    graphs.append(("Petersen", nx.petersen_graph()))

    # Random graphs
    graphs.append(("Random G(12,0.4)", nx.erdos_renyi_graph(12, 0.4, seed=42)))
    graphs.append(("Random G(15,0.6)", nx.erdos_renyi_graph(15, 0.6, seed=123)))

    return graphs


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")


@pytest.fixture
def make_protein_graph():
    """Fixture exposing the `protein_graph` builder to tests."""
    return protein_graph
