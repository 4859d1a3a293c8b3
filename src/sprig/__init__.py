"""Sprig: a front end for a small imperative language."""

__version__ = "0.1.0"
