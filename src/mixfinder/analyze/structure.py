"""
Structural analysis: intro/outro, breakdown, build and drop regions.

Works on pre-computed catalog analysis (sections, bars, beats). Two
fallback levels:
- No analysis at all: regions derived from the track duration
- Analysis with no sections: synthetic intro/outro from the analysis duration

Loudness thresholds (dB):
- Breakdown: quietest section, kept if below -20
- Drop: loudest section, kept if above -10
- Build: first section below -15 that is quieter than the next one
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .key import UNKNOWN_KEY, to_camelot
from ..models import AudioAnalysis, Track

logger = logging.getLogger(__name__)

INTRO_WINDOW_SECONDS = 30.0
DEFAULT_SECTION_CONFIDENCE = 0.5
DEFAULT_KEY_CONFIDENCE = 0.5

BREAKDOWN_MAX_LOUDNESS = -20.0
DROP_MIN_LOUDNESS = -10.0
BUILD_MAX_LOUDNESS = -15.0

FALLBACK_OUTRO_RATIO = 0.8
FALLBACK_INTRO_RATIO = 0.1
FALLBACK_CONFIDENCE = 0.3


@dataclass(frozen=True)
class Region:
    """A time region with a confidence, in seconds."""

    start: float
    end: float
    confidence: float


@dataclass(frozen=True)
class IntroOutro:
    intro: Region
    outro: Region


@dataclass(frozen=True)
class Span:
    """A start time and duration, in seconds."""

    start: float
    duration: float


@dataclass(frozen=True)
class TrackStructure:
    """Mix-relevant regions of a track. Missing regions are None."""

    intro: Span
    outro: Span
    breakdown: Optional[Span] = None
    build: Optional[Span] = None
    drop: Optional[Span] = None


@dataclass(frozen=True)
class TransitionPoints:
    """Where to leave the outgoing track and enter the incoming one."""

    outro: float  # seconds into the outgoing track
    intro: float  # seconds into the incoming track
    confidence: float


@dataclass(frozen=True)
class TransitionRecommendation:
    kind: str  # "breakdown_build", "drop_drop" or "intro_outro"
    confidence: float
    description: str


@dataclass(frozen=True)
class KeyInfo:
    camelot: str
    confidence: float
    mode: str


def find_intro_outro(analysis: AudioAnalysis) -> IntroOutro:
    """
    Locate intro and outro regions.

    Intro: first section starting before 30s, else a synthetic 0-30s region.
    Outro: last section, else the last 30s of the track.
    Synthetic regions get confidence 0.5.
    """
    sections = analysis.sections

    intro_section = next((s for s in sections if s.start < INTRO_WINDOW_SECONDS), None)
    if intro_section is not None:
        intro = Region(intro_section.start, intro_section.end, intro_section.confidence)
    else:
        intro = Region(0.0, INTRO_WINDOW_SECONDS, DEFAULT_SECTION_CONFIDENCE)

    if sections:
        outro_section = sections[-1]
        outro = Region(outro_section.start, outro_section.end, outro_section.confidence)
    else:
        outro = Region(
            max(0.0, analysis.duration - INTRO_WINDOW_SECONDS),
            analysis.duration,
            DEFAULT_SECTION_CONFIDENCE,
        )

    return IntroOutro(intro=intro, outro=outro)


def analyze_structure(track: Track) -> TrackStructure:
    """
    Derive intro, outro, breakdown, build and drop regions for a track.

    Without analysis, only intro and outro are estimated from the duration:
    intro = [0, min(30, 10%)], outro = [80%, min(30, 20%)].
    """
    analysis = track.audio_analysis

    if analysis is None:
        duration = track.duration_ms / 1000.0
        logger.debug(f"No analysis for track {track.id}; using duration fallback ({duration:.1f}s)")
        return TrackStructure(
            intro=Span(0.0, min(INTRO_WINDOW_SECONDS, duration * 0.1)),
            outro=Span(duration * 0.8, min(INTRO_WINDOW_SECONDS, duration * 0.2)),
        )

    sections = analysis.sections
    duration = analysis.duration

    intro_section = next((s for s in sections if s.start < INTRO_WINDOW_SECONDS), None)
    if intro_section is not None:
        intro = Span(intro_section.start, intro_section.duration)
    else:
        intro = Span(0.0, min(INTRO_WINDOW_SECONDS, duration * 0.1))

    if sections:
        outro = Span(sections[-1].start, sections[-1].duration)
    else:
        outro = Span(duration * 0.8, min(INTRO_WINDOW_SECONDS, duration * 0.2))

    breakdown = None
    drop = None
    build = None

    if sections:
        # min/max return the first candidate on ties
        quietest = min(sections, key=lambda s: s.loudness)
        if quietest.loudness < BREAKDOWN_MAX_LOUDNESS:
            breakdown = Span(quietest.start, quietest.duration)

        loudest = max(sections, key=lambda s: s.loudness)
        if loudest.loudness > DROP_MIN_LOUDNESS:
            drop = Span(loudest.start, loudest.duration)

        for current, following in zip(sections, sections[1:]):
            if current.loudness < following.loudness and current.loudness < BUILD_MAX_LOUDNESS:
                build = Span(current.start, current.duration)
                break

    return TrackStructure(intro=intro, outro=outro, breakdown=breakdown, build=build, drop=drop)


def optimal_transition_points(track1: Track, track2: Track) -> TransitionPoints:
    """
    Pick the outro point of ``track1`` and the intro point of ``track2``.

    If either track lacks analysis, fall back to 80% of track1's duration and
    10% of track2's, with confidence 0.3.
    """
    analysis1 = track1.audio_analysis
    analysis2 = track2.audio_analysis

    if analysis1 is None or analysis2 is None:
        return TransitionPoints(
            outro=track1.duration_seconds * FALLBACK_OUTRO_RATIO,
            intro=track2.duration_seconds * FALLBACK_INTRO_RATIO,
            confidence=FALLBACK_CONFIDENCE,
        )

    outro = find_intro_outro(analysis1).outro
    intro = find_intro_outro(analysis2).intro

    return TransitionPoints(
        outro=outro.start,
        intro=intro.start,
        confidence=(outro.confidence + intro.confidence) / 2,
    )


def transition_recommendation(track1: Track, track2: Track) -> TransitionRecommendation:
    """
    Recommend a transition style from the structure of both tracks.

    breakdown_build (0.9) if track1 has a breakdown and track2 a build,
    else drop_drop (0.8) if both have a drop, else intro_outro (0.7).
    """
    structure1 = analyze_structure(track1)
    structure2 = analyze_structure(track2)

    if structure1.breakdown is not None and structure2.build is not None:
        return TransitionRecommendation(
            kind="breakdown_build",
            confidence=0.9,
            description="Breakdown to build transition - perfect for energy building",
        )

    if structure1.drop is not None and structure2.drop is not None:
        return TransitionRecommendation(
            kind="drop_drop",
            confidence=0.8,
            description="Drop to drop transition - high energy maintained",
        )

    return TransitionRecommendation(
        kind="intro_outro",
        confidence=0.7,
        description="Standard intro to outro transition",
    )


def transition_bar_count(track: Track, start_time: float, end_time: float) -> int:
    """Number of bars starting within [start_time, end_time]; 0 without analysis."""
    analysis = track.audio_analysis
    if analysis is None:
        return 0
    return sum(1 for bar in analysis.bars if start_time <= bar.start <= end_time)


def transition_key_info(track: Track) -> KeyInfo:
    """Camelot key, key confidence and mode name of the incoming track."""
    features = track.audio_features
    if features is None:
        return KeyInfo(camelot=UNKNOWN_KEY, confidence=0.0, mode=UNKNOWN_KEY)

    confidence = DEFAULT_KEY_CONFIDENCE
    if track.audio_analysis is not None and track.audio_analysis.key_confidence:
        confidence = track.audio_analysis.key_confidence

    return KeyInfo(
        camelot=to_camelot(features.key, features.mode),
        confidence=confidence,
        mode="Major" if features.mode == 1 else "Minor",
    )
