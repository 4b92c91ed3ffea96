"""
Bron-Kerbosch based protein graph similarity.

This package searches maximum common substructures in pairs of protein
topology graphs by:
1. Building the product (compatibility) graph of compatible edge pairs
2. Enumerating its maximal cliques with a pivoting Bron-Kerbosch search
3. Projecting the cliques back onto vertex correspondences of both graphs
"""

from .graph import GraphModel, Vertex, Edge, graph_from_edge_list
from .compatibility import (
    Alignment,
    AttributeCompatibility,
    CompatibilityConfig,
    make_predicate,
    match_any
)
from .product_graph import ProductGraph, ProductVertex, build_product_graph, pairs_consistent
from .cliques import (
    BronKerbosch,
    CancellationToken,
    CliqueSearchResult,
    find_maximal_cliques,
    verify_clique,
    verify_maximal_clique
)
from .results import (
    Correspondence,
    DedupeStats,
    SelectionPolicy,
    canonicalize,
    project_clique,
    project_clique_indices,
    select_cliques
)
from .pipeline import SearchSettings, SimilarityResult, find_common_substructures
from .exceptions import ProtsimError, ConfigurationError, GraphModelError
from .io import read_gml_graph

__version__ = "0.2.0"
__all__ = [
    # Graph model
    "GraphModel",
    "Vertex",
    "Edge",
    "graph_from_edge_list",
    # Compatibility rules
    "Alignment",
    "AttributeCompatibility",
    "CompatibilityConfig",
    "make_predicate",
    "match_any",
    # Product graph
    "ProductGraph",
    "ProductVertex",
    "build_product_graph",
    "pairs_consistent",
    # Clique search
    "BronKerbosch",
    "CancellationToken",
    "CliqueSearchResult",
    "find_maximal_cliques",
    "verify_clique",
    "verify_maximal_clique",
    # Post-processing
    "Correspondence",
    "DedupeStats",
    "SelectionPolicy",
    "canonicalize",
    "project_clique",
    "project_clique_indices",
    "select_cliques",
    # Entry point
    "SearchSettings",
    "SimilarityResult",
    "find_common_substructures",
    # Errors and I/O
    "ProtsimError",
    "ConfigurationError",
    "GraphModelError",
    "read_gml_graph"
]
