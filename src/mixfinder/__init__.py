# MixFinder: track mixability scoring and playlist sequencing
# Package: mixfinder

__version__ = "1.0.0"
__author__ = "MixFinder Contributors"
__description__ = "Harmonic, tempo and genre compatibility scoring with greedy playlist ordering"

# Module structure:
#   - mixfinder.analyze   : Key, tempo, genre and structure models
#   - mixfinder.generate  : Pair scoring, sequencing & transition planning
#   - mixfinder.models    : Track / feature / analysis records
#   - mixfinder.config    : Configuration management
