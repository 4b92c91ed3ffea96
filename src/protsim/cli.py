#!/usr/bin/env python3
"""
Search maximum common substructures in a pair of protein graphs.

Constructs the compatibility graph of G1 and G2 and runs a Bron-Kerbosch
search on it. The cliques found correspond to common substructures
(compatible vertex mappings) between G1 and G2.

USAGE:
    protsim graph1.gml graph2.gml [OPTIONS]

EXAMPLES:
    # All cliques (default)
    protsim example1.gml example2.gml

    # Only cliques with at least 8 product vertices, unique mappings only
    protsim example1.gml example2.gml -s 8 -f

    # Largest cliques, give up after 30 seconds
    protsim example1.gml example2.gml -l --timeout 30
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import Settings, load_settings
from .exceptions import ProtsimError
from .io import correspondence_to_json, read_gml_graph, write_mapping_files
from .pipeline import SearchSettings, find_common_substructures
from .results import SelectionPolicy, records_summary

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protsim",
        description="Bron-Kerbosch based protein graph similarity",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Example: protsim example1.gml example2.gml -s 8\n"
               "  This will output all cliques with at least 8 vertices.",
    )
    parser.add_argument("first", help="First graph file (GML)")
    parser.add_argument("second", help="Second graph file (GML)")

    selection = parser.add_mutually_exclusive_group()
    selection.add_argument("-a", "--all", dest="select", action="store_const", const="all",
                           help="Output all cliques (default)")
    selection.add_argument("-l", "--largest", dest="select", action="store_const", const="largest",
                           help="Output only largest cliques")
    selection.add_argument("-s", "--min-size", dest="min_size", type=int, nargs="?", const=0,
                           metavar="N", help="Output only cliques with minimum size N vertices")
    selection.add_argument("--select", dest="select",
                           help="Selection policy by name (all, largest, min_size)")

    parser.add_argument("-f", "--filter-permutations", action="store_true",
                        help="Filter permutations, i.e. print unique mappings only")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Stop the clique search after this many seconds")
    parser.add_argument("--max-cliques", type=int, default=None,
                        help="Stop the clique search after this many cliques")
    parser.add_argument("--workers", type=int, default=1,
                        help="Threads for the clique search (default: 1)")
    parser.add_argument("--output-path", default=None,
                        help="Directory for mapping files (overrides the settings file)")
    parser.add_argument("--no-mapping-files", action="store_true",
                        help="Do not write results_<n>_first/second.txt files")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Suppress progress output")
    return parser


def resolve_selection(args: argparse.Namespace):
    """Turn parsed flags into (policy, min_size), warning on unknown selectors."""
    if args.min_size is not None:
        if args.min_size == 0:
            logger.warning("No size given for parameter '-s', assuming 0.")
        return SelectionPolicy.MIN_SIZE, args.min_size
    if args.select is None:
        logger.info("No output parameter given, using default (all cliques).")
        return SelectionPolicy.ALL, 0
    policy, recognised = SelectionPolicy.parse(args.select)
    if not recognised:
        logger.warning("Unknown output parameter '%s', using default (all cliques).", args.select)
    return policy, 0


def run(args: argparse.Namespace, settings: Settings) -> int:
    verbose = not (args.quiet or settings.silent)
    policy, min_size = resolve_selection(args)

    search_settings = SearchSettings(
        compatibility=settings.compatibility(),
        selection=policy,
        min_size=min_size,
        filter_permutations=args.filter_permutations,
        timeout_seconds=args.timeout,
        max_cliques=args.max_cliques,
        workers=args.workers,
        verbose=verbose,
    )

    graph_a = read_gml_graph(args.first)
    graph_b = read_gml_graph(args.second)

    result = find_common_substructures(graph_a, graph_b, search_settings)

    for record in result.records:
        print(correspondence_to_json(record))

    if verbose:
        summary = records_summary(result.records)
        print(f"{summary['count']} mappings, largest covers {summary['largest_first']} / "
              f"{summary['largest_second']} vertices.")
        if result.is_partial:
            print("Search stopped by budget; results are partial.")
        elif result.is_empty:
            print("No common substructure found.")

    if args.filter_permutations and settings.write_mapping_files and not args.no_mapping_files:
        output_path = args.output_path or settings.output_path
        written = write_mapping_files(result.records, output_path)
        if verbose:
            print(f"Wrote {len(written)} result mapping pairs to '{output_path}'.")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING if args.quiet else logging.INFO,
                        format="[protsim] %(levelname)s: %(message)s")

    try:
        settings = load_settings()
        return run(args, settings)
    except ProtsimError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
