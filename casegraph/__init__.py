"""Casegraph: link-graph analytics for investigative casework."""

__version__ = "0.1.0"
