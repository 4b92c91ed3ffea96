"""
Unit tests for the attributed graph model.
"""

import pytest
import networkx as nx

from protsim.graph import GraphModel, graph_from_edge_list
from protsim.exceptions import GraphModelError


class TestGraphModelConstruction:
    """Test building graph models directly and from networkx."""

    def test_direct_construction(self):
        G = GraphModel([(5, {"sse_type": "H"}), (9, {"sse_type": "E"})],
                       [(0, 1, {"spatial": "p"})], name="toy")
        assert G.num_vertices == 2
        assert G.num_edges == 1
        assert G.vertex(1).original_id == 9
        assert G.vertex(0).get("sse_type") == "H"
        assert G.edges[0].endpoints == (0, 1)
        assert G.edges[0].get("spatial") == "p"

    def test_attributes_are_strings(self):
        G = GraphModel([(1, {"num": 3}), (2, {})], [(0, 1, {"weight": 1.5})])
        assert G.vertex(0).get("num") == "3"
        assert G.edges[0].get("weight") == "1.5"

    def test_attributes_are_read_only(self):
        G = GraphModel([(1, {"sse_type": "H"})], [])
        with pytest.raises(TypeError):
            G.vertex(0).attributes["sse_type"] = "E"

    def test_duplicate_original_id_rejected(self):
        with pytest.raises(GraphModelError):
            GraphModel([(1, {}), (1, {})], [])

    def test_non_integer_id_rejected_by_constructor(self):
        with pytest.raises(GraphModelError):
            GraphModel([("alpha", {})], [])
        with pytest.raises(GraphModelError):
            GraphModel([(None, {})], [])

    def test_edge_out_of_range_rejected(self):
        with pytest.raises(GraphModelError):
            GraphModel([(1, {}), (2, {})], [(0, 2, {})])

    def test_self_loop_rejected(self):
        with pytest.raises(GraphModelError):
            GraphModel([(1, {})], [(0, 0, {})])

    def test_parallel_edge_rejected(self):
        with pytest.raises(GraphModelError):
            GraphModel([(1, {}), (2, {})], [(0, 1, {}), (1, 0, {})])

    def test_from_networkx_uses_id_attribute(self):
        G = nx.Graph()
        G.add_node("b", id=20, sse_type="E")
        G.add_node("a", id=10, sse_type="H")
        G.add_edge("b", "a", spatial="p")

        model = GraphModel.from_networkx(G, name="named")
        assert model.name == "named"
        # Nodes are indexed in ascending node order
        assert [v.original_id for v in model.vertices] == [10, 20]
        assert model.edges[0].endpoints == (0, 1)
        assert model.vertex(0).get("sse_type") == "H"
        assert "id" not in model.vertex(0).attributes

    def test_from_networkx_falls_back_to_node_key(self):
        model = GraphModel.from_networkx(nx.path_graph(3))
        assert model.original_ids(range(3)) == [0, 1, 2]

    def test_from_networkx_edge_order_is_deterministic(self):
        G1 = nx.Graph()
        G1.add_edges_from([(2, 3), (0, 1), (1, 2)])
        G2 = nx.Graph()
        G2.add_edges_from([(1, 0), (3, 2), (2, 1)])
        edges1 = [e.endpoints for e in GraphModel.from_networkx(G1).edges]
        edges2 = [e.endpoints for e in GraphModel.from_networkx(G2).edges]
        assert edges1 == edges2 == [(0, 1), (1, 2), (2, 3)]

    def test_directed_graph_rejected(self):
        with pytest.raises(GraphModelError):
            GraphModel.from_networkx(nx.DiGraph([(0, 1)]))

    def test_non_integer_id_rejected(self):
        G = nx.Graph()
        G.add_node(0, id="alpha")
        with pytest.raises(GraphModelError):
            GraphModel.from_networkx(G)

    def test_to_networkx_round_trip_structure(self):
        model = graph_from_edge_list([(0, 1), (1, 2)], edge_attributes={"spatial": "a"})
        G = model.to_networkx()
        assert sorted(G.edges()) == [(0, 1), (1, 2)]
        assert G.nodes[2]["id"] == 2
        assert G.edges[0, 1]["spatial"] == "a"
