"""
Track data model for MixFinder.

Records mirror the shape returned by the music catalog (audio features,
audio analysis, artist genres) but are strict: optional substructures are
explicit ``None`` rather than missing keys, so "analysis absent" and
"analysis present with no sections" stay distinguishable.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioFeatures:
    """Per-track scalar attributes from the catalog."""

    tempo: float
    key: int  # Pitch class 0-11, -1 if undetected
    mode: int  # 0 = minor, 1 = major
    energy: float
    danceability: float
    valence: float = 0.5
    duration_ms: Optional[int] = None
    loudness: Optional[float] = None
    time_signature: int = 4

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AudioFeatures":
        return cls(
            tempo=float(data["tempo"]),
            key=int(data.get("key", -1)),
            mode=int(data.get("mode", 1)),
            energy=float(data.get("energy", 0.0)),
            danceability=float(data.get("danceability", 0.0)),
            valence=float(data.get("valence", 0.5)),
            duration_ms=data.get("duration_ms"),
            loudness=data.get("loudness"),
            time_signature=int(data.get("time_signature") or 4),
        )


@dataclass(frozen=True)
class TimeInterval:
    """A bar or a beat."""

    start: float
    duration: float
    confidence: float = 1.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimeInterval":
        return cls(
            start=float(data["start"]),
            duration=float(data.get("duration", 0.0)),
            confidence=float(data.get("confidence", 1.0)),
        )


@dataclass(frozen=True)
class Section:
    """A structural section with its own loudness, key and tempo estimate."""

    start: float
    duration: float
    confidence: float
    loudness: float
    tempo: Optional[float] = None
    key: int = -1
    mode: int = 1

    @property
    def end(self) -> float:
        return self.start + self.duration

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Section":
        return cls(
            start=float(data["start"]),
            duration=float(data.get("duration", 0.0)),
            confidence=float(data.get("confidence", 0.5)),
            loudness=float(data.get("loudness", 0.0)),
            tempo=data.get("tempo"),
            key=int(data.get("key", -1)),
            mode=int(data.get("mode", 1)),
        )


@dataclass(frozen=True)
class AudioAnalysis:
    """
    Structural decomposition of a track.

    Sections, bars and beats are ordered by start time; sections need not be
    contiguous.
    """

    duration: float  # seconds
    key_confidence: Optional[float] = None
    sections: Tuple[Section, ...] = field(default_factory=tuple)
    bars: Tuple[TimeInterval, ...] = field(default_factory=tuple)
    beats: Tuple[TimeInterval, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AudioAnalysis":
        """
        Build from a catalog analysis payload.

        The track-level aggregate lives under ``data["track"]`` in catalog
        payloads; a flat ``duration`` key is accepted too.
        """
        summary = data.get("track") or {}
        duration = summary.get("duration", data.get("duration", 0.0))
        return cls(
            duration=float(duration),
            key_confidence=summary.get("key_confidence", data.get("key_confidence")),
            sections=tuple(sorted(
                (Section.from_dict(s) for s in data.get("sections") or []),
                key=lambda s: s.start,
            )),
            bars=tuple(TimeInterval.from_dict(b) for b in data.get("bars") or []),
            beats=tuple(TimeInterval.from_dict(b) for b in data.get("beats") or []),
        )


@dataclass(frozen=True)
class Track:
    """Immutable input record: identity plus optional features/analysis/genres."""

    id: str
    name: str = ""
    artists: Tuple[str, ...] = field(default_factory=tuple)
    duration_ms: int = 0
    audio_features: Optional[AudioFeatures] = None
    audio_analysis: Optional[AudioAnalysis] = None
    genres: Optional[Tuple[str, ...]] = None

    @property
    def duration_seconds(self) -> float:
        """Duration in seconds, preferring the feature record's duration."""
        duration_ms = self.duration_ms
        if self.audio_features is not None and self.audio_features.duration_ms:
            duration_ms = self.audio_features.duration_ms
        return duration_ms / 1000.0

    def with_changes(self, **changes: Any) -> "Track":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Track":
        """
        Build a Track from a catalog-shaped record.

        Args:
            data: Dict with ``id`` and optionally ``name``, ``artists`` (names or
                  ``{"id", "name"}`` objects), ``duration_ms``,
                  ``audio_features``, ``audio_analysis`` and ``artist_genres``
                  (or ``genres``).

        Raises:
            ValueError: If the record has no ``id``.
        """
        track_id = data.get("id")
        if not track_id:
            raise ValueError(f"Track record without id: {data!r}")

        artists = []
        for artist in data.get("artists") or []:
            if isinstance(artist, dict):
                artists.append(artist.get("name", ""))
            else:
                artists.append(str(artist))

        features = data.get("audio_features")
        analysis = data.get("audio_analysis")
        genres = data.get("artist_genres", data.get("genres"))

        if not features:
            logger.debug(f"Track {track_id} has no audio features; it will score 0 against every track")
        if not analysis:
            logger.debug(f"Track {track_id} has no audio analysis; structure falls back to duration")

        return cls(
            id=str(track_id),
            name=data.get("name", ""),
            artists=tuple(artists),
            duration_ms=int(data.get("duration_ms") or 0),
            audio_features=AudioFeatures.from_dict(features) if features else None,
            audio_analysis=AudioAnalysis.from_dict(analysis) if analysis else None,
            genres=tuple(genres) if genres is not None else None,
        )

    def __repr__(self) -> str:
        return f"Track(id={self.id!r}, name={self.name!r})"


@dataclass(frozen=True)
class MixConfig:
    """Scoring and ordering policy, read-only per invocation."""

    bpm_tolerance: float = 4.0
    harmonic_matching: bool = True
    same_genre: bool = True
    maintain_energy: bool = True
    allow_half_double_time: bool = True

    def replace(self, **changes: Any) -> "MixConfig":
        """Return a copy with some settings changed."""
        return replace(self, **changes)


@dataclass(frozen=True)
class CompatibilityScore:
    """Component scores for a track pair plus the weighted overall score."""

    overall: float
    tempo: float
    key: float
    energy: float
    danceability: float
    genre: float

    @classmethod
    def zero(cls) -> "CompatibilityScore":
        return cls(overall=0.0, tempo=0.0, key=0.0, energy=0.0, danceability=0.0, genre=0.0)

    def to_dict(self) -> Dict[str, float]:
        return {
            "overall": self.overall,
            "tempo": self.tempo,
            "key": self.key,
            "energy": self.energy,
            "danceability": self.danceability,
            "genre": self.genre,
        }
