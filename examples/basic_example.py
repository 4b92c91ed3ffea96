"""
Basic example of the protsim common-substructure search.

Builds two small protein topology graphs, searches their common
substructures and prints the vertex correspondences.
"""

import networkx as nx
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from protsim import (
    CompatibilityConfig,
    GraphModel,
    SearchSettings,
    SelectionPolicy,
    find_common_substructures,
    match_any
)
from protsim.graph import graph_from_edge_list


def make_protein(name, sse_types, edges, first_id):
    """Build a protein graph; `edges` are (u, v, spatial) triples on vertex positions."""
    G = nx.Graph(name=name)
    for i, sse in enumerate(sse_types):
        G.add_node(i, id=first_id + i, sse_type=sse)
    for u, v, spatial in edges:
        G.add_edge(u, v, spatial=spatial)
    return GraphModel.from_networkx(G)


def run_on_triangles():
    """Two unlabelled triangles: six permutations, one unique mapping."""
    print("=== Two triangles, every edge pair compatible ===")

    A = graph_from_edge_list([(0, 1), (1, 2), (2, 0)], name="A")
    B = graph_from_edge_list([(0, 1), (1, 2), (2, 0)], name="B")

    for filter_permutations in (False, True):
        settings = SearchSettings(selection=SelectionPolicy.LARGEST,
                                  filter_permutations=filter_permutations,
                                  verbose=True)
        result = find_common_substructures(A, B, settings, predicate=match_any())
        print(f"  filter_permutations={filter_permutations}: {len(result.records)} records")
        for record in result.records:
            print(f"    {record.to_dict()}")


def run_on_proteins():
    """Two four-SSE proteins sharing a helix-strand-strand motif."""
    print("\n" + "=" * 50)
    print("=== Protein graphs, matching SSE types and spatial relations ===")

    A = make_protein("1abc_A", ["H", "E", "E", "H"],
                     [(0, 1, "p"), (1, 2, "a"), (0, 3, "m")], first_id=1)
    B = make_protein("2xyz_B", ["E", "E", "H", "H"],
                     [(0, 1, "a"), (1, 2, "p"), (1, 3, "m")], first_id=10)

    settings = SearchSettings(compatibility=CompatibilityConfig(), verbose=True)
    result = find_common_substructures(A, B, settings)

    if result.is_empty:
        print("  No common substructure found.")
    for record in result.records:
        print(f"  {A.name} vertices {list(record.first)} <-> {B.name} vertices {list(record.second)}")


def main():
    """Run the basic examples."""
    print("Bron-Kerbosch protein graph similarity")
    print("=" * 50)

    run_on_triangles()
    run_on_proteins()


if __name__ == "__main__":
    main()
