"""
Post-processing of maximal cliques into vertex correspondence records.

Cliques pass through two explicit stages: product-vertex indices are first
projected onto internal vertex indices of each input graph, which are then
mapped through the graphs' original identifiers. Selection filters cliques
by size and canonicalization removes records that only differ in the order
they were discovered in.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

from .product_graph import ProductGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Correspondence:
    """Two sets of original vertex identifiers forming one common substructure."""
    first: Tuple[int, ...]
    second: Tuple[int, ...]

    def canonical(self) -> "Correspondence":
        """Return the record with both sides sorted ascending."""
        return Correspondence(tuple(sorted(self.first)), tuple(sorted(self.second)))

    def to_dict(self) -> Dict[str, List[int]]:
        return {"first": list(self.first), "second": list(self.second)}


def project_clique_indices(pg: ProductGraph, clique: Iterable[int]) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
    """
    Project a clique onto internal vertex indices of both input graphs.

    Every product vertex contributes both endpoints of its A edge and of its
    B edge. Each side is deduplicated and sorted ascending.
    """
    first, second = set(), set()
    for index in clique:
        pv = pg.vertex(index)
        first.update(pv.edge_a.endpoints)
        second.update(pv.edge_b.endpoints)
    return tuple(sorted(first)), tuple(sorted(second))


def project_clique(pg: ProductGraph, clique: Iterable[int]) -> Correspondence:
    """
    Map a clique to the original vertex identifiers of both input graphs.

    Args:
        pg: The product graph the clique was found in.
        clique: Product vertex indices.

    Returns:
        A Correspondence with each side ascending by original identifier.
    """
    first, second = project_clique_indices(pg, clique)
    return Correspondence(
        tuple(sorted(pg.graph_a.original_ids(first))),
        tuple(sorted(pg.graph_b.original_ids(second))),
    )


class SelectionPolicy(Enum):
    """Which enumerated cliques are reported."""
    ALL = "all"
    LARGEST = "largest"
    MIN_SIZE = "min_size"

    @classmethod
    def parse(cls, value: Union[str, "SelectionPolicy", None]) -> Tuple["SelectionPolicy", bool]:
        """
        Translate a selector value into a policy.

        Accepts policy members, their names or values, and the short flags
        `a`, `l` and `s` (with or without a leading dash, any case).

        Returns:
            (policy, recognised). Unknown or missing values give
            (SelectionPolicy.ALL, False); reporting the fallback is up to the caller.
        """
        if isinstance(value, cls):
            return value, True
        if value is None:
            return cls.ALL, False
        key = str(value).strip().lstrip("-").lower()
        aliases = {
            "a": cls.ALL, "all": cls.ALL,
            "l": cls.LARGEST, "largest": cls.LARGEST,
            "s": cls.MIN_SIZE, "min_size": cls.MIN_SIZE, "min-size": cls.MIN_SIZE,
        }
        if key in aliases:
            return aliases[key], True
        return cls.ALL, False


def select_cliques(cliques: Sequence[Tuple[int, ...]], policy: SelectionPolicy,
                   min_size: int = 0) -> List[Tuple[int, ...]]:
    """
    Filter cliques by a selection policy.

    Args:
        cliques: Enumerated cliques.
        policy: ALL keeps everything, LARGEST keeps every clique of maximum
            size, MIN_SIZE keeps cliques with at least `min_size` vertices.
        min_size: Threshold for MIN_SIZE; 0 keeps everything.

    Returns:
        The kept cliques in their original order.
    """
    if policy is SelectionPolicy.LARGEST:
        if not cliques:
            return []
        largest = max(len(c) for c in cliques)
        return [c for c in cliques if len(c) == largest]
    if policy is SelectionPolicy.MIN_SIZE:
        return [c for c in cliques if len(c) >= min_size]
    return list(cliques)


@dataclass(frozen=True)
class DedupeStats:
    """Record counts before and after permutation filtering."""
    before: int
    after: int

    @property
    def removed(self) -> int:
        return self.before - self.after


def canonicalize(records: Iterable[Correspondence]) -> Tuple[List[Correspondence], DedupeStats]:
    """
    Remove permutation-equivalent correspondence records.

    Two records are duplicates if they are equal once both sides are sorted
    ascending. The first occurrence of each record is kept, in canonical form,
    and relative order is preserved, so applying this twice changes nothing.

    Returns:
        The deduplicated records and the before/after counts.
    """
    seen = set()
    unique: List[Correspondence] = []
    total = 0
    for record in records:
        total += 1
        canonical = record.canonical()
        if canonical in seen:
            continue
        seen.add(canonical)
        unique.append(canonical)

    stats = DedupeStats(before=total, after=len(unique))
    logger.debug("Found %d possible vertex mappings. Filtered permutations, %d elements remaining.",
                stats.before, stats.after)
    return unique, stats


def records_summary(records: Sequence[Correspondence]) -> Dict[str, Any]:
    """Size statistics of a record list, for progress output."""
    if not records:
        return {"count": 0, "largest_first": 0, "largest_second": 0}
    return {
        "count": len(records),
        "largest_first": max(len(r.first) for r in records),
        "largest_second": max(len(r.second) for r in records),
    }
