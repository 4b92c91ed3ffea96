"""
Test suite for the protsim common-substructure search.

This package contains organized tests covering:
- Unit tests for the core components (graph model, compatibility rules,
  product graph, clique enumeration, result post-processing)
- Unit tests for settings files and GML/result I/O
- Integration tests for the search pipeline and the command line tool
"""
