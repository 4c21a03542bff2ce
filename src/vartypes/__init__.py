"""vartypes - generated variable-type wrappers for a project tree."""

__version__ = "0.3.0"
