"""
Unit tests for BPM compatibility.

Tests tolerance scoring, half/double-time detection and tempo helpers.
"""

import pytest
from mixfinder.analyze.bpm import (
    TempoClass,
    bpm_drift,
    bpm_score,
    bpm_transition_curve,
    compatible_bpms,
    crossfade_seconds,
    describe_tempo_compatibility,
    is_harmonic_bpm,
    optimal_bpm,
    tempo_compatibility,
)


class TestTempoCompatibility:
    """Test tempo classification."""

    def test_exact_match(self):
        result = tempo_compatibility(120, 120, 4)
        assert result.compatible is True
        assert result.score == 1.0
        assert result.ratio == 1.0
        assert result.kind == TempoClass.EXACT

    def test_within_tolerance(self):
        """Score falls linearly with the BPM gap inside the tolerance."""
        result = tempo_compatibility(120, 122, 4)
        assert result.compatible is True
        assert result.kind == TempoClass.TOLERANCE
        # 1 - (2 / 4) * 0.3
        assert result.score == pytest.approx(0.85)
        assert result.ratio == 1.0

    def test_tolerance_edge_keeps_floor(self):
        """A gap equal to the tolerance still scores 0.7."""
        result = tempo_compatibility(120, 124, 4)
        assert result.kind == TempoClass.TOLERANCE
        assert result.score == pytest.approx(0.7)

    def test_outside_tolerance(self):
        result = tempo_compatibility(120, 130, 4)
        assert result.compatible is False
        assert result.kind == TempoClass.INCOMPATIBLE
        assert result.score == 0.0
        assert result.ratio == 0.0

    def test_half_time(self):
        result = tempo_compatibility(120, 60, 4, True)
        assert result.compatible is True
        assert result.kind == TempoClass.HALF_TIME
        assert result.ratio == 2.0
        assert result.score == 0.8

    def test_double_time(self):
        result = tempo_compatibility(60, 120, 4, True)
        assert result.compatible is True
        assert result.kind == TempoClass.DOUBLE_TIME
        assert result.ratio == 0.5
        assert result.score == 0.8

    def test_half_double_disabled(self):
        result = tempo_compatibility(120, 60, 4, False)
        assert result.compatible is False
        assert result.kind == TempoClass.INCOMPATIBLE

    def test_half_time_ratio_window_is_absolute(self):
        """Tolerance 4 gives a ratio window of 0.04 around 2.0."""
        # 120 / 59 = 2.034
        assert tempo_compatibility(120, 59, 4).kind == TempoClass.HALF_TIME
        # 120 / 58 = 2.069
        assert tempo_compatibility(120, 58, 4).kind == TempoClass.INCOMPATIBLE

    def test_zero_tolerance(self):
        """Zero tolerance still accepts exact tempos and exact 2:1 ratios."""
        assert tempo_compatibility(120, 120, 0).kind == TempoClass.EXACT
        assert tempo_compatibility(120, 120.5, 0).compatible is False
        assert tempo_compatibility(120, 60, 0).kind == TempoClass.HALF_TIME

    def test_kind_is_string_valued(self):
        assert tempo_compatibility(60, 120).kind == "double-time"

    def test_non_positive_bpm_rejected(self):
        with pytest.raises(ValueError):
            tempo_compatibility(0, 120)
        with pytest.raises(ValueError):
            tempo_compatibility(120, -1)


class TestBPMScore:
    def test_exact(self):
        assert bpm_score(120, 120, 4) == 1.0

    def test_close(self):
        assert bpm_score(120, 121, 4) > 0.9

    def test_incompatible(self):
        assert bpm_score(120, 200, 4) == 0.0


class TestHarmonicBPM:
    def test_harmonic_ratios(self):
        assert is_harmonic_bpm(120, 60) is True  # 2:1
        assert is_harmonic_bpm(120, 80) is True  # 3:2
        assert is_harmonic_bpm(100, 250) is True  # 2.5
        assert is_harmonic_bpm(120, 120) is True

    def test_non_harmonic_ratios(self):
        assert is_harmonic_bpm(120, 130) is False
        assert is_harmonic_bpm(120, 150) is False


class TestTempoHelpers:
    def test_optimal_bpm(self):
        assert optimal_bpm(120, 130) == 125

    def test_compatible_bpms(self):
        assert compatible_bpms(120, 2) == [118, 119, 121, 122, 60, 240]

    def test_compatible_bpms_without_half_double(self):
        assert compatible_bpms(120, 1, allow_half_double=False) == [119, 121]

    def test_compatible_bpms_fractional_tolerance(self):
        """A fractional tolerance steps by whole BPM from its negative bound."""
        assert compatible_bpms(120, 4.5, allow_half_double=False) == [
            115.5, 116.5, 117.5, 118.5, 119.5, 120.5, 121.5, 122.5, 123.5, 124.5,
        ]

    def test_compatible_bpms_drops_non_positive(self):
        """Offsets below zero BPM are not returned."""
        assert all(bpm > 0 for bpm in compatible_bpms(2, 4))

    def test_bpm_drift(self):
        assert bpm_drift(120, 130, 20) == pytest.approx(0.5)

    def test_bpm_drift_rejects_zero_duration(self):
        with pytest.raises(ValueError):
            bpm_drift(120, 130, 0)

    def test_linear_curve(self):
        curve = bpm_transition_curve(120, 130, 10)
        assert curve(0) == 120
        assert curve(5) == pytest.approx(125)
        assert curve(20) == pytest.approx(130)

    def test_exponential_curve(self):
        """Exponential ramps start slow."""
        curve = bpm_transition_curve(120, 130, 10, "exponential")
        assert curve(5) == pytest.approx(122.5)

    def test_logarithmic_curve(self):
        curve = bpm_transition_curve(120, 130, 16, "logarithmic")
        assert curve(4) == pytest.approx(125)

    def test_unknown_curve(self):
        with pytest.raises(ValueError):
            bpm_transition_curve(120, 130, 10, "cubic")

    def test_crossfade_seconds(self):
        # 8 bars of 4 beats at 120 BPM
        assert crossfade_seconds(120) == pytest.approx(16.0)
        assert crossfade_seconds(120, bars=4, time_signature=3) == pytest.approx(6.0)

    def test_descriptions(self):
        assert describe_tempo_compatibility(tempo_compatibility(120, 120)) == "Perfect BPM match"
        assert "Half-time" in describe_tempo_compatibility(tempo_compatibility(120, 60))
        assert describe_tempo_compatibility(tempo_compatibility(120, 150)) == "BPM incompatible"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
