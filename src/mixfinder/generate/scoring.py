"""
Pairwise compatibility scoring.

Combines five components into one weighted score per track pair:
- Tempo (BPM tolerance, half/double time)
- Key (Camelot harmonic score)
- Energy continuity
- Danceability similarity
- Genre compatibility

Feature toggles in MixConfig give full credit (1.0) to disabled components.
A track without audio features scores 0 against everything.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..analyze.bpm import bpm_score
from ..analyze.genre import simple_genre_score
from ..analyze.key import harmonic_score, to_camelot
from ..models import AudioAnalysis, CompatibilityScore, MixConfig, Track

logger = logging.getLogger(__name__)

GenreScorer = Callable[[Sequence[str], Sequence[str]], float]

LARGE_TEMPO_GAP_BPM = 20
LARGE_ENERGY_GAP = 0.5


@dataclass(frozen=True)
class ScoringWeights:
    """Component weights. By convention they sum to 1.0."""

    tempo: float = 0.3
    key: float = 0.25
    energy: float = 0.2
    danceability: float = 0.15
    genre: float = 0.1

    @property
    def total(self) -> float:
        return self.tempo + self.key + self.energy + self.danceability + self.genre


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class ScoreBand:
    label: str
    color: str


SCORE_BANDS = (
    (0.9, ScoreBand("Excellent", "#4CAF50")),
    (0.8, ScoreBand("Very Good", "#8BC34A")),
    (0.7, ScoreBand("Good", "#CDDC39")),
    (0.6, ScoreBand("Fair", "#FFC107")),
    (0.5, ScoreBand("Poor", "#FF9800")),
)
LOWEST_BAND = ScoreBand("Very Poor", "#F44336")

DIFFICULTY_BANDS = (
    (0.2, "Easy"),
    (0.4, "Moderate"),
    (0.6, "Challenging"),
    (0.8, "Difficult"),
)


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def compatibility_score(
    track1: Track,
    track2: Track,
    config: Optional[MixConfig] = None,
    weights: Optional[ScoringWeights] = None,
    genre_scorer: Optional[GenreScorer] = None,
) -> CompatibilityScore:
    """
    Score how well ``track2`` follows ``track1``.

    Args:
        track1: Current track
        track2: Candidate track
        config: Mix policy (defaults to MixConfig())
        weights: Component weights (defaults to DEFAULT_WEIGHTS)
        genre_scorer: Genre formula (defaults to simple_genre_score)

    Returns:
        CompatibilityScore; all zero if either track lacks audio features
    """
    config = config or MixConfig()
    weights = weights or DEFAULT_WEIGHTS
    genre_scorer = genre_scorer or simple_genre_score

    features1 = track1.audio_features
    features2 = track2.audio_features

    if features1 is None or features2 is None:
        logger.debug(f"Missing audio features for {track1.id} or {track2.id}; scoring 0")
        return CompatibilityScore.zero()

    if features1.tempo > 0 and features2.tempo > 0:
        tempo = bpm_score(
            features1.tempo,
            features2.tempo,
            config.bpm_tolerance,
            config.allow_half_double_time,
        )
    else:
        logger.debug(f"Undetected tempo for {track1.id} or {track2.id}; tempo score 0")
        tempo = 0.0

    if config.harmonic_matching:
        key = harmonic_score(
            to_camelot(features1.key, features1.mode),
            to_camelot(features2.key, features2.mode),
        )
    else:
        key = 1.0

    if config.maintain_energy:
        energy = 1 - abs(features1.energy - features2.energy)
    else:
        energy = 1.0

    danceability = 1 - abs(features1.danceability - features2.danceability)

    if config.same_genre:
        genre = genre_scorer(track1.genres or (), track2.genres or ())
    else:
        genre = 1.0

    overall = (
        tempo * weights.tempo
        + key * weights.key
        + energy * weights.energy
        + danceability * weights.danceability
        + genre * weights.genre
    )

    return CompatibilityScore(
        overall=_clamp(overall),
        tempo=tempo,
        key=key,
        energy=energy,
        danceability=danceability,
        genre=genre,
    )


def transition_difficulty(track1: Track, track2: Track, config: Optional[MixConfig] = None) -> float:
    """
    Difficulty of mixing ``track1`` into ``track2`` (0.0 easy - 1.0 expert).

    1 - overall score, plus 0.2 for a tempo gap over 20 BPM and 0.1 for an
    energy gap over 0.5, kept within [0, 1].
    """
    score = compatibility_score(track1, track2, config)
    difficulty = 1 - score.overall

    features1 = track1.audio_features
    features2 = track2.audio_features
    if features1 is not None and features2 is not None:
        if abs(features1.tempo - features2.tempo) > LARGE_TEMPO_GAP_BPM:
            difficulty += 0.2
        if abs(features1.energy - features2.energy) > LARGE_ENERGY_GAP:
            difficulty += 0.1

    return _clamp(difficulty)


def score_description(score: float) -> ScoreBand:
    """Label and display color for an overall score."""
    for threshold, band in SCORE_BANDS:
        if score >= threshold:
            return band
    return LOWEST_BAND


def difficulty_description(difficulty: float) -> str:
    for threshold, label in DIFFICULTY_BANDS:
        if difficulty <= threshold:
            return label
    return "Expert"


def rank_candidates(
    base_track: Track,
    candidates: Sequence[Track],
    config: Optional[MixConfig] = None,
    weights: Optional[ScoringWeights] = None,
    limit: Optional[int] = None,
) -> List[Tuple[Track, CompatibilityScore]]:
    """
    Rank candidates by compatibility with the base track (best first).

    The sort is stable, so equal scores keep their input order.
    """
    scored = [(candidate, compatibility_score(base_track, candidate, config, weights)) for candidate in candidates]
    scored.sort(key=lambda item: item[1].overall, reverse=True)

    if limit is not None:
        scored = scored[:limit]

    logger.debug(f"Ranked {len(scored)} candidates against {base_track.id}")
    return scored


def _outro_search_score(analysis: AudioAnalysis, target_time: float) -> float:
    if any(s.start > target_time - 30 for s in analysis.sections):
        return 0.9
    if any(b.start > target_time - 20 for b in analysis.bars):
        return 0.7
    return 0.5


def _intro_search_score(analysis: AudioAnalysis, target_time: float) -> float:
    if any(s.start < target_time + 30 for s in analysis.sections):
        return 0.9
    if any(b.start < target_time + 20 for b in analysis.bars):
        return 0.7
    return 0.5


def transition_point_score(track1: Track, track2: Track, transition_time: float) -> float:
    """
    How well-supported a transition at ``transition_time`` is by structure.

    Sections near the target score 0.9, bars 0.7, nothing 0.5; the result is
    the mean of the outgoing and incoming side. 0.5 without analysis.
    """
    analysis1 = track1.audio_analysis
    analysis2 = track2.audio_analysis
    if analysis1 is None or analysis2 is None:
        return 0.5

    return (_outro_search_score(analysis1, transition_time) + _intro_search_score(analysis2, transition_time)) / 2
