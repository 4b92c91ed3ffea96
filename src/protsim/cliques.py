"""
Maximal clique enumeration on product graphs (Bron-Kerbosch with pivoting).

The search keeps three vertex sets per call: R, the clique being grown, P,
the vertices that can still extend R, and X, the vertices already explored
from R. R is reported when P and X are both empty. Every branch receives
fresh copies of its P and X, so sibling branches never share mutable state.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import combinations
from typing import Callable, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

import networkx as nx

logger = logging.getLogger(__name__)

Clique = Tuple[int, ...]


class CancellationToken:
    """
    Cooperative cancellation signal for a clique search.

    The search polls `cancelled` at every recursive entry. A token can be
    cancelled explicitly, by a wall-clock budget or by a result-count budget.

    Args:
        deadline_seconds: Cancel once this many seconds have passed since creation.
        max_cliques: Cancel once this many cliques have been recorded.
        clock: Monotonic time source used for the deadline.
    """

    def __init__(self, deadline_seconds: Optional[float] = None, max_cliques: Optional[int] = None,
                 clock: Callable[[], float] = time.monotonic):
        if deadline_seconds is not None and deadline_seconds <= 0:
            raise ValueError(f"deadline_seconds must be positive, got {deadline_seconds}")
        if max_cliques is not None and max_cliques <= 0:
            raise ValueError(f"max_cliques must be positive, got {max_cliques}")
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._clock = clock
        self._deadline = None if deadline_seconds is None else clock() + deadline_seconds
        self.max_cliques = max_cliques
        self.cliques_recorded = 0

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and self._clock() >= self._deadline:
            self._event.set()
            return True
        return False

    def try_record(self) -> bool:
        """
        Reserve a slot for one more clique.

        Returns:
            False if the token is cancelled or the clique budget is used up.
        """
        with self._lock:
            if self.cancelled:
                return False
            if self.max_cliques is not None and self.cliques_recorded >= self.max_cliques:
                self._event.set()
                return False
            self.cliques_recorded += 1
            if self.max_cliques is not None and self.cliques_recorded >= self.max_cliques:
                self._event.set()
            return True


@dataclass
class CliqueSearchResult:
    """Outcome of a maximal clique enumeration."""
    cliques: List[Clique] = field(default_factory=list)
    cancelled: bool = False
    recursive_calls: int = 0
    runtime_seconds: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.cliques

    @property
    def max_size(self) -> int:
        return max((len(c) for c in self.cliques), default=0)


class BronKerbosch:
    """
    Bron-Kerbosch maximal clique enumeration with Tomita pivoting.

    Candidates are visited in ascending vertex order and the pivot is the
    vertex of P | X with the most neighbours in P (smallest index on ties),
    so identical input always yields cliques in identical order.

    Args:
        adjacency: Neighbour sets indexed by vertex 0..n-1.
        min_size: Only report cliques with at least this many vertices; used
            to prune branches that cannot reach the size.
        token: Optional cancellation token.
    """

    def __init__(self, adjacency: Sequence[FrozenSet[int]], min_size: int = 0,
                 token: Optional[CancellationToken] = None):
        self.adjacency = adjacency
        self.min_size = max(0, int(min_size))
        self.token = token
        self.cliques: List[Clique] = []
        self.recursive_calls = 0
        self.cancelled = False

    def _choose_pivot(self, P: Set[int], X: Set[int]) -> int:
        best, best_count = -1, -1
        for u in sorted(P | X):
            count = len(P & self.adjacency[u])
            if count > best_count:
                best, best_count = u, count
        return best

    def _emit(self, R: List[int]) -> None:
        if self.token is not None and not self.token.try_record():
            self.cancelled = True
            return
        self.cliques.append(tuple(sorted(R)))

    def expand(self, R: List[int], P: Set[int], X: Set[int]) -> None:
        """Report every maximal clique containing R and contained in R | P."""
        self.recursive_calls += 1
        if self.cancelled or (self.token is not None and self.token.cancelled):
            self.cancelled = True
            return

        if not P and not X:
            if len(R) >= self.min_size and R:
                self._emit(R)
            return
        if len(R) + len(P) < self.min_size:
            return
        if not P:
            return

        pivot = self._choose_pivot(P, X)
        for v in sorted(P - self.adjacency[pivot]):
            neighbours = self.adjacency[v]
            self.expand(R + [v], P & neighbours, X & neighbours)
            if self.cancelled:
                return
            P = P - {v}
            X = X | {v}

    def top_level_branches(self) -> List[Tuple[int, Set[int], Set[int]]]:
        """
        Split the root call into independent branches.

        Returns:
            (v, P, X) triples; running `expand([v], P, X)` for each, in order,
            reproduces the sequential search.
        """
        P = set(range(len(self.adjacency)))
        X: Set[int] = set()
        if not P:
            return []
        pivot = self._choose_pivot(P, X)
        branches = []
        for v in sorted(P - self.adjacency[pivot]):
            neighbours = self.adjacency[v]
            branches.append((v, P & neighbours, X & neighbours))
            P = P - {v}
            X = X | {v}
        return branches

    def run(self) -> CliqueSearchResult:
        start_time = time.time()
        self.expand([], set(range(len(self.adjacency))), set())
        return CliqueSearchResult(
            cliques=self.cliques,
            cancelled=self.cancelled,
            recursive_calls=self.recursive_calls,
            runtime_seconds=time.time() - start_time,
        )


def _adjacency_of(graph) -> Sequence[FrozenSet[int]]:
    if isinstance(graph, nx.Graph):
        nodes = sorted(graph.nodes())
        if nodes != list(range(len(nodes))):
            raise ValueError("Graph nodes must be the integers 0..n-1")
        return [frozenset(graph.neighbors(v)) for v in nodes]
    return graph.adjacency()


def find_maximal_cliques(graph, min_size: int = 0, token: Optional[CancellationToken] = None,
                         workers: int = 1, verbose: bool = False) -> CliqueSearchResult:
    """
    Enumerate all maximal cliques of a product graph.

    With `workers > 1` the branches of the root call run on a thread pool.
    Each branch owns its frontier sets and its own result list; the lists
    are merged in branch order, so the output matches a sequential run
    unless the search is cancelled.

    Args:
        graph: A ProductGraph, or a networkx graph with nodes 0..n-1.
        min_size: Pruning hint; smaller cliques are not reported.
        token: Optional cancellation token checked at every recursive call.
        workers: Number of worker threads.
        verbose: Whether to print a summary.

    Returns:
        A CliqueSearchResult. `cancelled` is True when the token stopped the
        search; the cliques found up to that point are all maximal.
    """
    adjacency = _adjacency_of(graph)
    start_time = time.time()

    if workers <= 1 or len(adjacency) < 2:
        result = BronKerbosch(adjacency, min_size=min_size, token=token).run()
    else:
        root = BronKerbosch(adjacency, min_size=min_size, token=token)
        branches = root.top_level_branches()
        merge_lock = threading.Lock()
        per_branch: List[Optional[BronKerbosch]] = [None] * len(branches)

        def run_branch(position: int, v: int, P: Set[int], X: Set[int]) -> None:
            searcher = BronKerbosch(adjacency, min_size=min_size, token=token)
            searcher.expand([v], set(P), set(X))
            with merge_lock:
                per_branch[position] = searcher

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(run_branch, i, v, P, X)
                       for i, (v, P, X) in enumerate(branches)]
            for future in futures:
                future.result()

        result = CliqueSearchResult(recursive_calls=1)
        for searcher in per_branch:
            result.cliques.extend(searcher.cliques)
            result.recursive_calls += searcher.recursive_calls
            result.cancelled = result.cancelled or searcher.cancelled
        result.runtime_seconds = time.time() - start_time

    logger.debug("Found %d maximal cliques in %.3fs (%d calls, cancelled=%s)",
                 len(result.cliques), result.runtime_seconds, result.recursive_calls, result.cancelled)
    if verbose:
        status = " (search cancelled, partial result)" if result.cancelled else ""
        print(f"Clique search: {len(result.cliques)} maximal cliques, largest {result.max_size}, "
              f"{result.recursive_calls} calls, {result.runtime_seconds:.3f}s{status}")
    return result


def verify_clique(graph, clique: Iterable[int]) -> bool:
    """
    Verify that a set of vertices is pairwise adjacent.

    Args:
        graph: A ProductGraph or networkx graph.
        clique: Vertex indices.

    Returns:
        True if every pair of vertices is connected.
    """
    for u, v in combinations(set(clique), 2):
        if not graph.has_edge(u, v):
            return False
    return True


def verify_maximal_clique(graph, clique: Iterable[int]) -> bool:
    """Verify that a clique cannot be extended by any other vertex."""
    members = set(clique)
    if not verify_clique(graph, members):
        return False
    adjacency = _adjacency_of(graph)
    for v in range(len(adjacency)):
        if v not in members and members <= adjacency[v]:
            return False
    return True
