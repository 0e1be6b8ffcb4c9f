"""
Track Analysis Module: musical models over pre-computed catalog data.

- key: Camelot wheel mapping and harmonic compatibility
- bpm: Tempo compatibility (tolerance, half/double time)
- genre: Genre families and genre compatibility
- structure: Intro/outro, breakdown/build/drop and transition points
"""

__all__ = ["bpm", "key", "genre", "structure"]
