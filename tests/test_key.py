"""
Unit tests for the Camelot key model.

Tests key conversion, label parsing and harmonic compatibility rules.
"""

import pytest
from mixfinder.analyze.key import (
    UNKNOWN_KEY,
    CamelotKey,
    CamelotParseError,
    compatible_keys,
    harmonic_score,
    is_harmonic_match,
    is_relative,
    key_name,
    next_key,
    parse_camelot,
    previous_key,
    to_camelot,
    try_parse_camelot,
)


class TestToCamelot:
    """Test pitch class + mode conversion."""

    def test_c_major(self):
        assert to_camelot(0, 1) == "8B"

    def test_c_minor(self):
        assert to_camelot(0, 0) == "5A"

    def test_g_major(self):
        assert to_camelot(7, 1) == "9B"

    def test_g_minor(self):
        assert to_camelot(7, 0) == "6A"

    def test_undetected_key(self):
        assert to_camelot(-1, 1) == UNKNOWN_KEY

    def test_out_of_range_pitch_class(self):
        assert to_camelot(12, 1) == UNKNOWN_KEY
        assert to_camelot(-5, 0) == UNKNOWN_KEY

    def test_every_position_once_per_polarity(self):
        """Twelve distinct positions on each ring."""
        minor = {to_camelot(p, 0) for p in range(12)}
        major = {to_camelot(p, 1) for p in range(12)}
        assert minor == {f"{n}A" for n in range(1, 13)}
        assert major == {f"{n}B" for n in range(1, 13)}

    def test_relative_keys_share_position(self):
        """A major key and the minor three semitones below share a position."""
        for pitch_class in range(12):
            major = parse_camelot(to_camelot(pitch_class, 1))
            minor = parse_camelot(to_camelot((pitch_class - 3) % 12, 0))
            assert major.position == minor.position


class TestKeyName:
    def test_key_names(self):
        assert key_name(0, 1) == "C Major"
        assert key_name(9, 0) == "A Minor"
        assert key_name(6, 1) == "F#/Gb Major"

    def test_unknown(self):
        assert key_name(-1, 0) == UNKNOWN_KEY


class TestParseCamelot:
    """Test label parsing."""

    def test_parse_valid(self):
        key = parse_camelot("12B")
        assert key.position == 12
        assert key.polarity == "B"
        assert key.label == "12B"

    def test_parse_unknown_fails(self):
        with pytest.raises(CamelotParseError):
            parse_camelot(UNKNOWN_KEY)

    @pytest.mark.parametrize("label", ["", "8", "B", "8C", "8b", "13A", "0B", "x8B", "8B "])
    def test_parse_malformed_fails(self, label):
        with pytest.raises(CamelotParseError):
            parse_camelot(label)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_camelot("nope")

    def test_try_parse_returns_none(self):
        assert try_parse_camelot("nope") is None
        assert try_parse_camelot("5A") == CamelotKey(5, "A")


class TestHarmonicMatch:
    """Test harmonic compatibility predicate."""

    def test_same_key(self):
        assert is_harmonic_match("8B", "8B") is True

    def test_relative(self):
        assert is_harmonic_match("8B", "8A") is True
        assert is_harmonic_match("5A", "5B") is True

    def test_adjacent(self):
        assert is_harmonic_match("8B", "9B") is True
        assert is_harmonic_match("8B", "7B") is True

    def test_wheel_wraparound(self):
        assert is_harmonic_match("12A", "1A") is True
        assert is_harmonic_match("1B", "12B") is True

    def test_incompatible(self):
        assert is_harmonic_match("8B", "1B") is False
        assert is_harmonic_match("5A", "10A") is False
        assert is_harmonic_match("8B", "10B") is False

    def test_unknown_never_matches(self):
        assert is_harmonic_match(UNKNOWN_KEY, "8B") is False
        assert is_harmonic_match("8B", UNKNOWN_KEY) is False
        assert is_harmonic_match(UNKNOWN_KEY, UNKNOWN_KEY) is False

    def test_malformed_never_matches(self):
        assert is_harmonic_match("garbage", "8B") is False

    def test_every_key_matches_its_relative(self):
        for pitch_class in range(12):
            relative_minor = to_camelot((pitch_class - 3) % 12, 0)
            assert is_harmonic_match(relative_minor, to_camelot(pitch_class, 1)) is True

    def test_parallel_keys_do_not_match(self):
        """C minor (5A) and C major (8B) are three positions apart."""
        assert is_harmonic_match(to_camelot(0, 0), to_camelot(0, 1)) is False


class TestHarmonicScore:
    """Test the four score tiers."""

    def test_exact(self):
        assert harmonic_score("8B", "8B") == 1.0

    def test_relative(self):
        assert harmonic_score("8B", "8A") == 0.8

    def test_adjacent(self):
        assert harmonic_score("8B", "9B") == 0.6
        assert harmonic_score("8B", "7B") == 0.6

    def test_incompatible(self):
        assert harmonic_score("8B", "1B") == 0.0

    def test_unknown(self):
        assert harmonic_score(UNKNOWN_KEY, "8B") == 0.0
        assert harmonic_score("8B", UNKNOWN_KEY) == 0.0

    def test_symmetric(self):
        for a, b in [("8B", "9B"), ("1A", "12A"), ("3A", "3B"), ("4B", "9A")]:
            assert harmonic_score(a, b) == harmonic_score(b, a)


class TestCompatibleKeys:
    """Test the compatible key set."""

    def test_middle_of_wheel(self):
        assert compatible_keys("8B") == {"8B", "8A", "9B", "7B"}

    def test_wraparound_top(self):
        assert compatible_keys("12B") == {"12B", "12A", "1B", "11B"}

    def test_wraparound_bottom(self):
        assert compatible_keys("1A") == {"1A", "1B", "2A", "12A"}

    def test_unknown_is_empty(self):
        assert compatible_keys(UNKNOWN_KEY) == frozenset()

    def test_all_compatible_keys_match(self):
        for key in compatible_keys("6A"):
            assert is_harmonic_match("6A", key) is True


class TestWheelNavigation:
    def test_next_key(self):
        assert next_key("8B") == "9B"
        assert next_key("12A") == "1A"

    def test_previous_key(self):
        assert previous_key("8B") == "7B"
        assert previous_key("1B") == "12B"

    def test_unknown_stays_unknown(self):
        assert next_key(UNKNOWN_KEY) == UNKNOWN_KEY
        assert previous_key(UNKNOWN_KEY) == UNKNOWN_KEY


class TestIsRelative:
    def test_c_major_a_minor(self):
        assert is_relative(0, 1, 9, 0) is True
        assert is_relative(9, 0, 0, 1) is True

    def test_same_mode_is_not_relative(self):
        assert is_relative(0, 1, 9, 1) is False

    def test_unrelated(self):
        assert is_relative(0, 1, 2, 0) is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
