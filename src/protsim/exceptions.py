"""
Custom exceptions for the protsim common-substructure search.
"""


class ProtsimError(Exception):
    """Base exception for protsim errors."""
    pass


class ConfigurationError(ProtsimError):
    """Raised when the compatibility or search configuration is invalid or missing."""
    pass


class GraphModelError(ProtsimError):
    """Raised when an input graph violates the graph model invariants."""
    pass
