"""
BPM compatibility between tracks.

Two tempos mix when they are equal, within an absolute BPM tolerance, or
(optionally) in a half-time / double-time relationship. The half/double
window is an absolute ratio window of ``tolerance / 100`` around 2.0, so the
default tolerance of 4 BPM accepts ratios in [1.96, 2.04].
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List

# Common harmonic tempo ratios
HARMONIC_RATIOS = (1.0, 1.5, 2.0, 2.5, 3.0, 4.0)

HALF_DOUBLE_SCORE = 0.8
MIN_TOLERANCE_SCORE = 0.7


class TempoClass(str, Enum):
    """How two tempos relate."""

    EXACT = "exact"
    TOLERANCE = "tolerance"
    HALF_TIME = "half-time"
    DOUBLE_TIME = "double-time"
    INCOMPATIBLE = "incompatible"


@dataclass(frozen=True)
class BPMCompatibility:
    """Result of a tempo comparison."""

    compatible: bool
    score: float
    ratio: float
    kind: TempoClass


_INCOMPATIBLE = BPMCompatibility(compatible=False, score=0.0, ratio=0.0, kind=TempoClass.INCOMPATIBLE)


def _check_bpm(bpm: float) -> None:
    if bpm is None or bpm <= 0:
        raise ValueError(f"BPM must be positive, got {bpm}")


def tempo_compatibility(
    bpm1: float,
    bpm2: float,
    tolerance: float = 4.0,
    allow_half_double: bool = True,
) -> BPMCompatibility:
    """
    Classify the tempo relationship of two tracks.

    Evaluated in order:
    1. Equal BPM: exact, score 1.0
    2. |diff| <= tolerance: score max(0.7, 1 - (diff / tolerance) * 0.3)
    3. Half/double time disabled: incompatible
    4. bpm1 / bpm2 within tolerance / 100 of 2.0: half-time, score 0.8
    5. bpm2 / bpm1 within tolerance / 100 of 2.0: double-time, score 0.8
    6. Otherwise incompatible, score 0

    Args:
        bpm1: Tempo of the outgoing track
        bpm2: Tempo of the incoming track
        tolerance: Allowed absolute BPM difference
        allow_half_double: Accept 2:1 and 1:2 tempo relationships

    Returns:
        BPMCompatibility

    Raises:
        ValueError: If either BPM is not positive
    """
    _check_bpm(bpm1)
    _check_bpm(bpm2)

    diff = abs(bpm1 - bpm2)

    if diff == 0:
        return BPMCompatibility(compatible=True, score=1.0, ratio=1.0, kind=TempoClass.EXACT)

    if diff <= tolerance:
        score = 1 - (diff / tolerance) * 0.3
        return BPMCompatibility(
            compatible=True,
            score=max(MIN_TOLERANCE_SCORE, score),
            ratio=1.0,
            kind=TempoClass.TOLERANCE,
        )

    if not allow_half_double:
        return _INCOMPATIBLE

    ratio_window = tolerance / 100

    if abs(bpm1 / bpm2 - 2) <= ratio_window:
        return BPMCompatibility(compatible=True, score=HALF_DOUBLE_SCORE, ratio=2.0, kind=TempoClass.HALF_TIME)

    if abs(bpm2 / bpm1 - 2) <= ratio_window:
        return BPMCompatibility(compatible=True, score=HALF_DOUBLE_SCORE, ratio=0.5, kind=TempoClass.DOUBLE_TIME)

    return _INCOMPATIBLE


def bpm_score(
    bpm1: float,
    bpm2: float,
    tolerance: float = 4.0,
    allow_half_double: bool = True,
) -> float:
    """Tempo compatibility score (0.0-1.0)."""
    return tempo_compatibility(bpm1, bpm2, tolerance, allow_half_double).score


def is_harmonic_bpm(bpm1: float, bpm2: float, tolerance: float = 2.0) -> bool:
    """
    Check whether two tempos sit in a common harmonic ratio.

    The ratio is checked in both directions against 1, 1.5, 2, 2.5, 3 and 4,
    with an absolute window of ``tolerance / 100``.
    """
    _check_bpm(bpm1)
    _check_bpm(bpm2)

    window = tolerance / 100
    for ratio in HARMONIC_RATIOS:
        if abs(bpm1 / bpm2 - ratio) <= window:
            return True
        if abs(bpm2 / bpm1 - ratio) <= window:
            return True
    return False


def optimal_bpm(bpm1: float, bpm2: float) -> float:
    """Meeting tempo for a blend: the mean of both."""
    return (bpm1 + bpm2) / 2


def compatible_bpms(base_bpm: float, tolerance: float = 4.0, allow_half_double: bool = True) -> List[float]:
    """
    Enumerate tempos that mix with ``base_bpm``.

    Offsets step by 1 BPM from ``-tolerance`` up to ``+tolerance`` (so a
    tolerance of 4.5 gives -4.5, -3.5, ..., 4.5), skipping a zero offset,
    plus half and double tempo when enabled. Non-positive values are dropped.
    """
    steps = int(2 * tolerance) + 1 if tolerance >= 0 else 0
    offsets = [-tolerance + step for step in range(steps)]
    compatible = [base_bpm + offset for offset in offsets if offset != 0]

    if allow_half_double:
        compatible.append(base_bpm / 2)
        compatible.append(base_bpm * 2)

    return [bpm for bpm in compatible if bpm > 0]


def bpm_drift(start_bpm: float, end_bpm: float, duration_seconds: float) -> float:
    """BPM change per second over a ramp."""
    if duration_seconds <= 0:
        raise ValueError(f"Duration must be positive, got {duration_seconds}")
    return (end_bpm - start_bpm) / duration_seconds


def bpm_transition_curve(
    start_bpm: float,
    end_bpm: float,
    duration_seconds: float,
    curve: str = "linear",
) -> Callable[[float], float]:
    """
    Build a tempo ramp function time -> BPM.

    Args:
        start_bpm: Tempo at t=0
        end_bpm: Tempo reached at t=duration_seconds (held afterwards)
        duration_seconds: Ramp length
        curve: "linear", "exponential" (slow start) or "logarithmic" (fast start)

    Returns:
        Callable mapping elapsed seconds to BPM
    """
    if duration_seconds <= 0:
        raise ValueError(f"Duration must be positive, got {duration_seconds}")
    if curve not in ("linear", "exponential", "logarithmic"):
        raise ValueError(f"Unknown curve type: {curve}")

    delta = end_bpm - start_bpm

    def tempo_at(time: float) -> float:
        progress = min(time / duration_seconds, 1.0)
        if curve == "exponential":
            return start_bpm + delta * progress * progress
        if curve == "logarithmic":
            return start_bpm + delta * progress ** 0.5
        return start_bpm + delta * progress

    return tempo_at


def describe_tempo_compatibility(result: BPMCompatibility) -> str:
    """Short human-readable description of a tempo comparison."""
    if result.kind == TempoClass.EXACT:
        return "Perfect BPM match"
    if result.kind == TempoClass.TOLERANCE:
        return f"BPM within tolerance (score {result.score:.2f})"
    if result.kind == TempoClass.HALF_TIME:
        return "Half-time transition (2:1 ratio)"
    if result.kind == TempoClass.DOUBLE_TIME:
        return "Double-time transition (1:2 ratio)"
    return "BPM incompatible"


def crossfade_seconds(tempo: float, bars: int = 8, time_signature: int = 4) -> float:
    """Length in seconds of a crossfade spanning ``bars`` bars at ``tempo``."""
    _check_bpm(tempo)
    return (60.0 / tempo) * bars * time_signature
