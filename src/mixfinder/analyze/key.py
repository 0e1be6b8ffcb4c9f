"""
Camelot key model.

Maps catalog key data (pitch class 0-11 + mode) to Camelot notation
(1A, 1B, ..., 12B) and evaluates harmonic compatibility on the wheel:
- Same key
- Relative major/minor (same number, opposite letter)
- Adjacent numbers on the wheel, same letter (12 wraps to 1)
"""

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Optional

logger = logging.getLogger(__name__)

UNKNOWN_KEY = "Unknown"

# Pitch class order used by the catalog: 0 = C ... 11 = B
NOTE_NAMES = ("C", "C#/Db", "D", "Eb", "E", "F", "F#/Gb", "G", "Ab", "A", "Bb", "B")

STANDARD_TO_CAMELOT_MAJOR = MappingProxyType({
    "C": "8B",
    "C#": "3B",
    "Db": "3B",
    "D": "10B",
    "D#": "5B",
    "Eb": "5B",
    "E": "12B",
    "F": "7B",
    "F#": "2B",
    "Gb": "2B",
    "G": "9B",
    "G#": "4B",
    "Ab": "4B",
    "A": "11B",
    "A#": "6B",
    "Bb": "6B",
    "B": "1B",
})

STANDARD_TO_CAMELOT_MINOR = MappingProxyType({
    "C": "5A",
    "C#": "12A",
    "Db": "12A",
    "D": "7A",
    "D#": "2A",
    "Eb": "2A",
    "E": "9A",
    "F": "4A",
    "F#": "11A",
    "Gb": "11A",
    "G": "6A",
    "G#": "1A",
    "Ab": "1A",
    "A": "8A",
    "A#": "3A",
    "Bb": "3A",
    "B": "10A",
})


def _first_name(note: str) -> str:
    return note.split("/")[0]


# Pitch class -> (minor label, major label)
PITCH_CLASS_TO_CAMELOT = MappingProxyType({
    pitch_class: (
        STANDARD_TO_CAMELOT_MINOR[_first_name(note)],
        STANDARD_TO_CAMELOT_MAJOR[_first_name(note)],
    )
    for pitch_class, note in enumerate(NOTE_NAMES)
})

_CAMELOT_PATTERN = re.compile(r"^(\d+)([AB])$")

# Harmonic score tiers
EXACT_MATCH_SCORE = 1.0
RELATIVE_MATCH_SCORE = 0.8
ADJACENT_MATCH_SCORE = 0.6


class CamelotParseError(ValueError):
    """Raised when a string is not a Camelot label."""
    pass


@dataclass(frozen=True)
class CamelotKey:
    """A position (1-12) and polarity (A = minor, B = major) on the wheel."""

    position: int
    polarity: str

    @property
    def label(self) -> str:
        return f"{self.position}{self.polarity}"

    @property
    def is_minor(self) -> bool:
        return self.polarity == "A"

    def relative(self) -> "CamelotKey":
        """Same position, opposite polarity."""
        return CamelotKey(self.position, "B" if self.is_minor else "A")

    def shifted(self, steps: int) -> "CamelotKey":
        """Move around the wheel, wrapping 12 -> 1 and 1 -> 12."""
        return CamelotKey((self.position - 1 + steps) % 12 + 1, self.polarity)

    def __str__(self) -> str:
        return self.label


def to_camelot(pitch_class: int, mode: int) -> str:
    """
    Convert a catalog key and mode to Camelot notation.

    Args:
        pitch_class: Pitch class 0-11 (0 = C), or -1 if undetected
        mode: 0 = minor, anything else = major

    Returns:
        Camelot label (e.g. "8B"), or "Unknown"
    """
    labels = PITCH_CLASS_TO_CAMELOT.get(pitch_class)
    if labels is None:
        return UNKNOWN_KEY
    minor, major = labels
    return minor if mode == 0 else major


def key_name(pitch_class: int, mode: int) -> str:
    """Human-readable key, e.g. "C Major" or "F#/Gb Minor"."""
    if pitch_class not in PITCH_CLASS_TO_CAMELOT:
        return UNKNOWN_KEY
    return f"{NOTE_NAMES[pitch_class]} {'Minor' if mode == 0 else 'Major'}"


def parse_camelot(label: str) -> CamelotKey:
    """
    Parse a Camelot label into position and polarity.

    Raises:
        CamelotParseError: For "Unknown" or any string not matching <1-12><A|B>
    """
    if label == UNKNOWN_KEY:
        raise CamelotParseError("Cannot parse the Unknown key")

    match = _CAMELOT_PATTERN.match(label or "")
    if not match:
        raise CamelotParseError(f"Invalid Camelot notation: {label!r}")

    position = int(match.group(1))
    if not 1 <= position <= 12:
        raise CamelotParseError(f"Invalid Camelot number: {position}")

    return CamelotKey(position, match.group(2))


def try_parse_camelot(label: str) -> Optional[CamelotKey]:
    """Like parse_camelot, but returns None instead of raising."""
    try:
        return parse_camelot(label)
    except CamelotParseError:
        return None


def _is_adjacent(key1: CamelotKey, key2: CamelotKey) -> bool:
    diff = abs(key1.position - key2.position)
    # 11 covers the 12 <-> 1 wraparound
    return diff == 1 or diff == 11


def harmonic_score(camelot1: str, camelot2: str) -> float:
    """
    Score harmonic compatibility of two Camelot labels.

    Tiers, evaluated in order:
    - Unknown or malformed on either side: 0.0
    - Exact match: 1.0
    - Relative major/minor: 0.8
    - Adjacent on the wheel: 0.6
    - Anything else: 0.0
    """
    if camelot1 == UNKNOWN_KEY or camelot2 == UNKNOWN_KEY:
        return 0.0

    key1 = try_parse_camelot(camelot1)
    key2 = try_parse_camelot(camelot2)
    if key1 is None or key2 is None:
        logger.debug(f"Malformed key: {camelot1} or {camelot2}, scoring 0")
        return 0.0

    if key1 == key2:
        return EXACT_MATCH_SCORE

    if key1.position == key2.position:
        return RELATIVE_MATCH_SCORE

    if _is_adjacent(key1, key2):
        return ADJACENT_MATCH_SCORE

    return 0.0


def is_harmonic_match(camelot1: str, camelot2: str) -> bool:
    """
    Check if two Camelot labels mix harmonically.

    Adjacency compares positions only, so "8B" and "9A" also match.
    """
    if camelot1 == UNKNOWN_KEY or camelot2 == UNKNOWN_KEY:
        return False
    if camelot1 == camelot2:
        return True

    key1 = try_parse_camelot(camelot1)
    key2 = try_parse_camelot(camelot2)
    if key1 is None or key2 is None:
        return False

    if key1.position == key2.position and key1.polarity != key2.polarity:
        return True

    return _is_adjacent(key1, key2)


def compatible_keys(camelot: str) -> FrozenSet[str]:
    """
    All labels that mix with the given one: itself, its relative, and its
    two neighbours on the same ring. Empty for "Unknown" or malformed input.
    """
    key = try_parse_camelot(camelot)
    if key is None:
        return frozenset()

    return frozenset({
        key.label,
        key.relative().label,
        key.shifted(1).label,
        key.shifted(-1).label,
    })


def next_key(camelot: str) -> str:
    """Next position on the same ring (energy boost move)."""
    key = try_parse_camelot(camelot)
    return key.shifted(1).label if key else UNKNOWN_KEY


def previous_key(camelot: str) -> str:
    """Previous position on the same ring."""
    key = try_parse_camelot(camelot)
    return key.shifted(-1).label if key else UNKNOWN_KEY


def is_relative(key1: int, mode1: int, key2: int, mode2: int) -> bool:
    """
    Relative major/minor check on raw pitch classes.

    The relative minor of a major key sits three semitones below it.
    """
    if mode1 == 1 and mode2 == 0:
        return key2 == (key1 + 12 - 3) % 12
    if mode1 == 0 and mode2 == 1:
        return key2 == (key1 + 3) % 12
    return False
