"""
Reading protein graphs and writing correspondence records.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

import networkx as nx

from .exceptions import GraphModelError
from .graph import GraphModel
from .results import Correspondence

logger = logging.getLogger(__name__)


def read_gml_graph(file_path: Union[str, Path]) -> GraphModel:
    """
    Read a protein graph from a GML file.

    Nodes are keyed by their GML `id`, which becomes the vertex's original
    identifier. Node and edge attributes (e.g. `sse_type`, `spatial`) are
    kept as strings.

    Args:
        file_path: Path to the GML file.

    Returns:
        GraphModel representation.

    Raises:
        GraphModelError: If the file does not describe a simple undirected graph.
    """
    try:
        graph = nx.read_gml(str(file_path), label='id')
    except nx.NetworkXError as e:
        raise GraphModelError(f"Could not parse GML file '{file_path}': {e}")

    if graph.is_directed():
        graph = graph.to_undirected()
    return GraphModel.from_networkx(graph, name=Path(file_path).name)


def int_list_to_json(values: Sequence[int]) -> str:
    """Format integers as a compact single-line JSON list."""
    return json.dumps([int(v) for v in values])


def correspondence_to_json(record: Correspondence) -> str:
    """Format one record as `{"first": [...], "second": [...]}`."""
    return json.dumps(record.to_dict())


def vertex_mapping_string(ids: Sequence[int], prefix: str) -> str:
    """
    Map vertex identifiers to symbolic labels, one `<id>=<prefix><n>` per line.

    Both sides of a record use the same numbering, so vertex n of the first
    graph corresponds to vertex n of the second.
    """
    return "".join(f"{vertex_id}={prefix}{idx}\n" for idx, vertex_id in enumerate(ids))


def write_mapping_files(records: Iterable[Correspondence],
                        output_path: Union[str, Path] = ".") -> List[Tuple[Path, Path]]:
    """
    Write `results_<n>_first.txt` and `results_<n>_second.txt` for every record.

    Args:
        records: Correspondence records, usually after permutation filtering.
        output_path: Target directory, created if missing.

    Returns:
        The written (first, second) file paths.
    """
    directory = Path(output_path)
    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for idx, record in enumerate(records):
        first_file = directory / f"results_{idx}_first.txt"
        second_file = directory / f"results_{idx}_second.txt"
        first_file.write_text(vertex_mapping_string(record.first, "A"))
        second_file.write_text(vertex_mapping_string(record.second, "B"))
        logger.debug("Wrote result mapping pair #%d to '%s' and '%s'", idx, first_file, second_file)
        written.append((first_file, second_file))
    return written
