"""Markdown documentation server exposing a doc tree through one query tool."""

__version__ = "0.1.0"
