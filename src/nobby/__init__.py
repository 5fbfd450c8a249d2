"""Nobby, a bulletin board style forum backend."""

__version__ = "0.1.0"
