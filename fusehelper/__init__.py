"""Fuse helper: item lookup and fusion planning for a crafting catalog."""

__version__ = "1.0.0"
