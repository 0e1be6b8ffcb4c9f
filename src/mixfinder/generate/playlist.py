"""
Playlist ordering and transition plans.

Runs the greedy sequencer over a seed track and candidate pool, then derives
one TransitionPlan per consecutive pair:
- offset_seconds: outro point of the outgoing track
- bars: bars of the outgoing track within +/- window around the offset (min 1)
- key_note: Camelot key of the incoming track
- compatibility_score: the score that won the selection
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..analyze.structure import optimal_transition_points, transition_bar_count, transition_key_info
from ..models import MixConfig, Track
from .scoring import ScoringWeights
from .selector import GreedySequencer

logger = logging.getLogger(__name__)

DEFAULT_TRANSITION_WINDOW_SECONDS = 10.0


@dataclass(frozen=True, repr=False)
class TransitionPlan:
    """Represents a single transition between two tracks."""

    source: Track  # Outgoing track
    destination: Track  # Incoming track
    offset_seconds: float  # Time within the source track to start the transition
    bars: int  # Transition length in bars
    key_note: str  # Camelot key of the destination track
    compatibility_score: float  # Overall score of the pair

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "from_track_id": self.source.id,
            "to_track_id": self.destination.id,
            "offset_seconds": self.offset_seconds,
            "bars": self.bars,
            "key_note": self.key_note,
            "compatibility_score": self.compatibility_score,
        }

    def __repr__(self) -> str:
        return (
            f"TransitionPlan({self.source.id} -> {self.destination.id}, "
            f"offset={self.offset_seconds:.1f}s, bars={self.bars}, key={self.key_note}, "
            f"score={self.compatibility_score:.2f})"
        )


class OrderedPlaylist:
    """Ordered tracks plus the transition plan between each consecutive pair."""

    def __init__(self, ordered: List[Track], transitions: List[TransitionPlan]):
        self.ordered = ordered
        self.transitions = transitions

    @property
    def total_duration_seconds(self) -> float:
        return sum(track.duration_ms for track in self.ordered) / 1000.0

    @property
    def average_score(self) -> float:
        """Mean compatibility score of the transitions (0.0 if there are none)."""
        if not self.transitions:
            return 0.0
        return sum(t.compatibility_score for t in self.transitions) / len(self.transitions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "track_ids": [track.id for track in self.ordered],
            "total_duration_seconds": self.total_duration_seconds,
            "transitions": [t.to_dict() for t in self.transitions],
        }

    def __repr__(self) -> str:
        return f"OrderedPlaylist(tracks={len(self.ordered)}, transitions={len(self.transitions)})"


def plan_transition(
    source: Track,
    destination: Track,
    compatibility_score: float,
    window_seconds: float = DEFAULT_TRANSITION_WINDOW_SECONDS,
) -> TransitionPlan:
    """
    Build the transition plan from ``source`` into ``destination``.

    Args:
        source: Outgoing track
        destination: Incoming track
        compatibility_score: Overall score that selected this pair
        window_seconds: Half-width of the bar-counting window around the offset

    Returns:
        TransitionPlan
    """
    points = optimal_transition_points(source, destination)
    bars = transition_bar_count(source, points.outro - window_seconds, points.outro + window_seconds)
    key_info = transition_key_info(destination)

    return TransitionPlan(
        source=source,
        destination=destination,
        offset_seconds=points.outro,
        bars=max(1, bars),
        key_note=key_info.camelot,
        compatibility_score=compatibility_score,
    )


def order_tracks(
    base_track: Track,
    candidates: Sequence[Track],
    config: Optional[MixConfig] = None,
    weights: Optional[ScoringWeights] = None,
    window_seconds: float = DEFAULT_TRANSITION_WINDOW_SECONDS,
) -> OrderedPlaylist:
    """
    Order tracks for mixing, starting from the base track.

    Args:
        base_track: Seed track (always first)
        candidates: Tracks to order after the seed
        config: Mix policy
        weights: Scoring weights
        window_seconds: Half-width of the bar-counting window

    Returns:
        OrderedPlaylist with len(candidates) + 1 tracks and len(candidates)
        transitions
    """
    if not candidates:
        logger.debug(f"No candidates; playlist is just seed {base_track.id}")
        return OrderedPlaylist(ordered=[base_track], transitions=[])

    sequencer = GreedySequencer(config, weights)
    steps = sequencer.order(base_track, candidates)

    ordered = [base_track]
    transitions = []
    for previous, chosen, score in steps:
        ordered.append(chosen)
        transitions.append(plan_transition(previous, chosen, score.overall, window_seconds))

    playlist = OrderedPlaylist(ordered=ordered, transitions=transitions)
    logger.info(
        f"✅ Playlist ordered: {len(ordered)} tracks, {len(transitions)} transitions, "
        f"avg score {playlist.average_score:.2f}"
    )
    return playlist
