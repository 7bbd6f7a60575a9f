"""Database configuration and utilities."""

from .session import Base, build_engine

__all__ = ["Base", "build_engine"]
