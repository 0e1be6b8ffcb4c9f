"""Shared fixtures: track builders."""

import pytest

from mixfinder.models import AudioAnalysis, AudioFeatures, Section, TimeInterval, Track


def build_track(
    track_id="track-1",
    tempo=120.0,
    key=0,
    mode=1,
    energy=0.5,
    danceability=0.5,
    valence=0.5,
    duration_ms=180000,
    genres=None,
    analysis=None,
    with_features=True,
):
    features = None
    if with_features:
        features = AudioFeatures(
            tempo=tempo,
            key=key,
            mode=mode,
            energy=energy,
            danceability=danceability,
            valence=valence,
        )
    return Track(
        id=track_id,
        name=f"Track {track_id}",
        artists=("Test Artist",),
        duration_ms=duration_ms,
        audio_features=features,
        audio_analysis=analysis,
        genres=tuple(genres) if genres is not None else None,
    )


def build_analysis(sections, duration=200.0, bar_step=2.0, key_confidence=None):
    """Analysis with (start, duration, confidence, loudness) sections and evenly spaced bars."""
    bar_count = int(duration // bar_step)
    return AudioAnalysis(
        duration=duration,
        key_confidence=key_confidence,
        sections=tuple(Section(start=s, duration=d, confidence=c, loudness=l) for s, d, c, l in sections),
        bars=tuple(TimeInterval(start=i * bar_step, duration=bar_step, confidence=0.9) for i in range(bar_count)),
    )


@pytest.fixture
def make_track():
    """Factory for tracks with audio features."""
    return build_track


@pytest.fixture
def make_analysis():
    """Factory for structural analyses."""
    return build_analysis


@pytest.fixture
def club_analysis():
    """
    A 200s track: quiet intro, build, loud drop, breakdown, outro.

    Bars every 2 seconds.
    """
    return build_analysis([
        (0.0, 20.0, 0.8, -25.0),
        (20.0, 40.0, 0.6, -18.0),
        (60.0, 60.0, 0.9, -5.0),
        (120.0, 50.0, 0.7, -22.0),
        (170.0, 30.0, 0.5, -12.0),
    ])
