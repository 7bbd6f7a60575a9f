"""Mecha Board: a small news board with human and machine voting."""

__version__ = "0.1.0"
