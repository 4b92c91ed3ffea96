"""
Entry point of the common-substructure search.

Runs product graph construction, maximal clique enumeration, selection,
projection and permutation filtering for one pair of graphs.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from .cliques import CancellationToken, Clique, find_maximal_cliques
from .compatibility import CompatibilityConfig, make_predicate
from .exceptions import ConfigurationError
from .graph import Edge, GraphModel
from .product_graph import build_product_graph
from .results import (
    Correspondence,
    DedupeStats,
    SelectionPolicy,
    canonicalize,
    project_clique,
    select_cliques,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchSettings:
    """
    Immutable settings for one search run.

    Attributes:
        compatibility: Attribute rule used when no explicit predicate is given.
        selection: Which cliques to report. Names and short flags are
            accepted; unknown values fall back to SelectionPolicy.ALL.
        min_size: Threshold for SelectionPolicy.MIN_SIZE.
        filter_permutations: Whether to canonicalize and deduplicate records.
        timeout_seconds: Optional wall-clock budget for the clique search.
        max_cliques: Optional budget on the number of enumerated cliques.
        workers: Threads used for the clique search.
        verbose: Whether to print progress information.
    """
    compatibility: CompatibilityConfig = field(default_factory=CompatibilityConfig)
    selection: Union[SelectionPolicy, str, None] = SelectionPolicy.ALL
    min_size: int = 0
    filter_permutations: bool = False
    timeout_seconds: Optional[float] = None
    max_cliques: Optional[int] = None
    workers: int = 1
    verbose: bool = False

    def validate(self) -> "SearchSettings":
        """
        Raises:
            ConfigurationError: If a value is out of range.
        """
        if self.min_size < 0:
            raise ConfigurationError(f"min_size must be non-negative, got {self.min_size}")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ConfigurationError(f"timeout_seconds must be positive, got {self.timeout_seconds}")
        if self.max_cliques is not None and self.max_cliques <= 0:
            raise ConfigurationError(f"max_cliques must be positive, got {self.max_cliques}")
        if self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")
        if self.compatibility is not None:
            self.compatibility.validate()
        return self

    def make_token(self) -> Optional[CancellationToken]:
        if self.timeout_seconds is None and self.max_cliques is None:
            return None
        return CancellationToken(deadline_seconds=self.timeout_seconds, max_cliques=self.max_cliques)


@dataclass
class SimilarityResult:
    """Correspondence records found for a pair of graphs."""
    records: List[Correspondence] = field(default_factory=list)
    cliques: List[Clique] = field(default_factory=list)
    cancelled: bool = False
    dedupe: Optional[DedupeStats] = None
    selection: SelectionPolicy = SelectionPolicy.ALL
    selection_recognised: bool = True
    product_vertices: int = 0
    product_edges: int = 0
    runtime_seconds: float = 0.0

    @property
    def is_empty(self) -> bool:
        """True if no common substructure was found."""
        return not self.records

    @property
    def is_partial(self) -> bool:
        """True if the clique search was stopped by a budget."""
        return self.cancelled


def find_common_substructures(graph_a: GraphModel, graph_b: GraphModel,
                              settings: Optional[SearchSettings] = None,
                              predicate: Optional[Callable[[Edge, Edge], bool]] = None,
                              token: Optional[CancellationToken] = None) -> SimilarityResult:
    """
    Find common substructures of two protein graphs.

    Args:
        graph_a: First graph.
        graph_b: Second graph.
        settings: Search settings; defaults to SearchSettings().
        predicate: Optional compatibility predicate overriding
            `settings.compatibility`.
        token: Optional cancellation token. When omitted, one is created
            from the settings' budgets.

    Returns:
        A SimilarityResult. An empty result means no common substructure;
        `is_partial` tells whether the search was cut short.

    Raises:
        ConfigurationError: If the settings or the compatibility rule are
            invalid. Raised before any product graph work is done.
    """
    settings = (settings or SearchSettings()).validate()
    rule = predicate if predicate is not None else settings.compatibility
    predicate = make_predicate(rule)
    if token is None:
        token = settings.make_token()
    policy, recognised = SelectionPolicy.parse(settings.selection)

    start_time = time.time()
    if settings.verbose:
        print(f"Graph {graph_a.name} has {graph_a.num_vertices} vertices, {graph_a.num_edges} edges.")
        print(f"Graph {graph_b.name} has {graph_b.num_vertices} vertices, {graph_b.num_edges} edges.")

    pg = build_product_graph(graph_a, graph_b, predicate, verbose=settings.verbose)

    # Only MIN_SIZE knows a bound ahead of the search
    hint = settings.min_size if policy is SelectionPolicy.MIN_SIZE else 0
    search = find_maximal_cliques(pg, min_size=hint, token=token,
                                  workers=settings.workers, verbose=settings.verbose)
    if search.cancelled:
        logger.warning("Clique search cancelled after %d cliques; results are partial",
                       len(search.cliques))

    selected = select_cliques(search.cliques, policy, settings.min_size)
    records = [project_clique(pg, clique) for clique in selected]

    dedupe = None
    if settings.filter_permutations:
        records, dedupe = canonicalize(records)
        if settings.verbose:
            print(f"Found {dedupe.before} possible vertex mappings. "
                  f"Filtered permutations, {dedupe.after} elements remaining.")

    result = SimilarityResult(
        records=records,
        cliques=selected,
        cancelled=search.cancelled,
        dedupe=dedupe,
        selection=policy,
        selection_recognised=recognised,
        product_vertices=pg.number_of_vertices(),
        product_edges=pg.number_of_edges(),
        runtime_seconds=time.time() - start_time,
    )
    logger.debug("Search finished: %d records (%d cliques selected) in %.3fs",
                 len(result.records), len(selected), result.runtime_seconds)
    return result
