"""
Set Generation Module: Score track pairs and order playlists.

- Weighted multi-factor pair scoring
- Greedy nearest-neighbour ordering (no backtracking)
- One transition plan per consecutive pair
"""

__all__ = ["scoring", "selector", "playlist"]
