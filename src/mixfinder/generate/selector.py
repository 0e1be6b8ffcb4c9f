"""
Greedy track sequencer.

Nearest-neighbour traversal over the candidate pool:
- Start from the seed (base) track
- At each step pick the remaining candidate with the strictly highest
  compatibility score against the current track
- Ties keep the first candidate in pool order
- No backtracking; the result is not a globally optimal tour

O(n^2) score evaluations for n candidates.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..models import CompatibilityScore, MixConfig, Track
from .scoring import DEFAULT_WEIGHTS, ScoringWeights, compatibility_score

logger = logging.getLogger(__name__)


class GreedySequencer:
    """
    Deterministic greedy sequencer.

    Holds only the scoring policy; every call to ``order`` starts from a fresh
    pool, so one instance can be shared between threads.
    """

    def __init__(self, config: Optional[MixConfig] = None, weights: Optional[ScoringWeights] = None):
        """
        Args:
            config: Mix policy used for scoring
            weights: Component weights used for scoring
        """
        self.config = config or MixConfig()
        self.weights = weights or DEFAULT_WEIGHTS

    def choose_next(
        self,
        current_track: Track,
        pool: Sequence[Track],
    ) -> Optional[Tuple[int, CompatibilityScore]]:
        """
        Choose the best next track from the pool.

        Args:
            current_track: Track currently playing
            pool: Remaining candidates, in pool order

        Returns:
            Tuple (index into pool, winning score), or None if the pool is empty.
            If every candidate scores 0 the first one is returned.
        """
        if not pool:
            return None

        best_index = 0
        best_score = None

        for index, candidate in enumerate(pool):
            score = compatibility_score(current_track, candidate, self.config, self.weights)

            logger.debug(
                f"Candidate {candidate.id} after {current_track.id}: "
                f"overall={score.overall:.3f} (tempo={score.tempo:.2f}, key={score.key:.2f}, "
                f"energy={score.energy:.2f}, dance={score.danceability:.2f}, genre={score.genre:.2f})"
            )

            if best_score is None or score.overall > best_score.overall:
                best_index = index
                best_score = score

        return (best_index, best_score)

    def order(self, base_track: Track, candidates: Sequence[Track]) -> List[Tuple[Track, Track, CompatibilityScore]]:
        """
        Order candidates after the base track.

        Args:
            base_track: Seed track, always first
            candidates: Tracks to place after the seed

        Returns:
            One (previous track, chosen track, score) step per candidate
        """
        remaining = list(candidates)
        steps = []
        current_track = base_track
        iteration = 1

        logger.info(f"Sequencing {len(remaining)} candidates from seed {base_track.id}")

        while remaining:
            best_index, score = self.choose_next(current_track, remaining)
            chosen = remaining.pop(best_index)
            steps.append((current_track, chosen, score))

            logger.debug(
                f"Iteration {iteration}: added {chosen.id} "
                f"(score: {score.overall:.3f}, remaining: {len(remaining)})"
            )

            current_track = chosen
            iteration += 1

        return steps
