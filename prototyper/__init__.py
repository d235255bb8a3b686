"""Compile declarative form definitions into navigable page templates."""

__version__ = "0.1.0"
