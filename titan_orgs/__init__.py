"""Titan Organizations — organization hierarchy, roles and chain-of-command reports."""

__version__ = "1.0.0"
