"""
Genre families and genre compatibility.

Free-text artist genre tags are classified into a fixed, ordered registry of
families by case-insensitive substring matching. Registry order matters: the
first family whose substrings match a tag wins.

Two scorers are provided and are deliberately not merged:
- simple_genre_score: tiered 1.0 / 0.7 / 0.3, used by the pair scorer
- genre_compatibility: continuous, based on family characteristic distance
"""

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

NEUTRAL_GENRE_SCORE = 0.5
UNRELATED_GENRE_SCORE = 0.3
FAMILY_MATCH_SCORE = 0.7


@dataclass(frozen=True)
class GenreFamily:
    """A family of genres with characteristic energy, danceability and valence."""

    key: str
    name: str
    genres: Tuple[str, ...]
    energy: float
    danceability: float
    valence: float

    def matches(self, normalized_tag: str) -> bool:
        """True if the tag contains, or is contained by, one of our substrings."""
        return any(g in normalized_tag or normalized_tag in g for g in self.genres)


def _family(key, name, genres, energy, danceability, valence) -> GenreFamily:
    return GenreFamily(key, name, tuple(g.lower() for g in genres), energy, danceability, valence)


GENRE_FAMILIES = MappingProxyType({
    family.key: family
    for family in (
        _family(
            "electronic", "Electronic",
            ["house", "techno", "trance", "dubstep", "drum and bass", "drum & bass",
             "ambient", "synthwave", "electro", "progressive house", "deep house",
             "tech house", "minimal", "garage", "breakbeat", "downtempo",
             "electronic", "edm", "electronic dance music"],
            0.8, 0.9, 0.7,
        ),
        _family(
            "rock", "Rock",
            ["rock", "alternative", "indie", "punk", "metal", "grunge",
             "progressive rock", "hard rock", "soft rock", "classic rock",
             "indie rock", "alternative rock", "post-rock", "math rock",
             "garage rock", "psychedelic rock", "folk rock"],
            0.7, 0.6, 0.6,
        ),
        _family(
            "pop", "Pop",
            ["pop", "dance pop", "indie pop", "synthpop", "electropop",
             "bubblegum pop", "teen pop", "power pop", "art pop",
             "dream pop", "shoegaze", "new wave", "post-punk"],
            0.7, 0.8, 0.8,
        ),
        _family(
            "hip_hop", "Hip Hop",
            ["hip hop", "rap", "trap", "drill", "conscious hip hop",
             "gangsta rap", "alternative hip hop", "underground hip hop",
             "old school hip hop", "new school hip hop", "southern hip hop",
             "west coast hip hop", "east coast hip hop"],
            0.6, 0.7, 0.5,
        ),
        _family(
            "jazz", "Jazz",
            ["jazz", "bebop", "fusion", "smooth jazz", "acid jazz",
             "free jazz", "modal jazz", "cool jazz", "hard bop",
             "post-bop", "jazz fusion", "latin jazz", "afro-cuban jazz"],
            0.5, 0.6, 0.7,
        ),
        _family(
            "classical", "Classical",
            ["classical", "orchestral", "chamber", "baroque", "romantic",
             "modern classical", "contemporary classical", "opera",
             "symphony", "concerto", "sonata", "chamber music"],
            0.4, 0.3, 0.6,
        ),
        _family(
            "country", "Country",
            ["country", "folk", "bluegrass", "country pop", "alt-country",
             "country rock", "honky tonk", "outlaw country", "country blues",
             "western", "cowboy", "americana"],
            0.5, 0.5, 0.7,
        ),
        _family(
            "r_b", "R&B",
            ["r&b", "soul", "funk", "neo soul", "contemporary r&b",
             "rhythm and blues", "urban contemporary", "quiet storm",
             "new jack swing", "hip hop soul", "alternative r&b"],
            0.6, 0.8, 0.7,
        ),
        _family(
            "reggae", "Reggae",
            ["reggae", "dancehall", "ska", "rocksteady", "dub",
             "roots reggae", "lovers rock", "ragga", "reggaeton"],
            0.6, 0.8, 0.8,
        ),
        _family(
            "blues", "Blues",
            ["blues", "delta blues", "chicago blues", "electric blues",
             "rhythm and blues", "soul blues", "country blues",
             "acoustic blues", "blues rock"],
            0.5, 0.5, 0.4,
        ),
        _family(
            "latin", "Latin",
            ["latin", "salsa", "merengue", "bachata", "cumbia",
             "reggaeton", "latin pop", "latin rock", "latin jazz",
             "flamenco", "tango", "bolero", "ranchera"],
            0.7, 0.9, 0.8,
        ),
        _family(
            "world", "World",
            ["world", "world music", "ethnic", "traditional",
             "african", "asian", "middle eastern", "celtic",
             "indian classical", "gamelan", "klezmer"],
            0.5, 0.6, 0.6,
        ),
    )
})

# Short sub-genre table used by the tiered scorer
LEGACY_SUBGENRES = MappingProxyType({
    "electronic": ("house", "techno", "trance", "dubstep", "drum and bass", "ambient", "synthwave"),
    "rock": ("alternative", "indie", "punk", "metal", "grunge", "progressive"),
    "pop": ("dance pop", "indie pop", "synthpop", "electropop"),
    "hip_hop": ("rap", "trap", "drill", "conscious hip hop"),
    "jazz": ("bebop", "fusion", "smooth jazz", "acid jazz"),
    "classical": ("orchestral", "chamber", "baroque", "romantic"),
    "country": ("folk", "bluegrass", "country pop"),
    "r_b": ("soul", "funk", "neo soul", "contemporary r&b"),
})


def normalize_genre(genre: str) -> str:
    """Lower-case, strip punctuation and collapse whitespace."""
    normalized = re.sub(r"[^\w\s]", "", genre.lower().strip())
    return re.sub(r"\s+", " ", normalized)


def find_family(genre: str) -> Optional[GenreFamily]:
    """
    Find the family of a genre tag.

    Args:
        genre: Free-text tag, e.g. "Deep House"

    Returns:
        First matching GenreFamily in registry order, or None
    """
    normalized = genre.lower().strip()
    if not normalized:
        return None

    for family in GENRE_FAMILIES.values():
        if family.matches(normalized):
            return family
    return None


def genre_families(genres: Sequence[str]) -> List[GenreFamily]:
    """Matched families for a tag list, de-duplicated in first-seen order."""
    families = []
    for genre in genres:
        family = find_family(genre)
        if family is not None and family not in families:
            families.append(family)
    return families


def _family_similarity(family1: GenreFamily, family2: GenreFamily) -> float:
    energy_diff = abs(family1.energy - family2.energy)
    danceability_diff = abs(family1.danceability - family2.danceability)
    valence_diff = abs(family1.valence - family2.valence)
    return 1 - (energy_diff + danceability_diff + valence_diff) / 3


def genre_compatibility(genres1: Sequence[str], genres2: Sequence[str]) -> float:
    """
    Continuous genre compatibility (0.0-1.0).

    - Either list empty: 0.5 (unknown)
    - Shared exact tag: 1.0
    - Shared family: 1.0
    - Otherwise the best cross-family similarity
      1 - (|d_energy| + |d_danceability| + |d_valence|) / 3
    - No family identified on one side: 0.3
    """
    if not genres1 or not genres2:
        return NEUTRAL_GENRE_SCORE

    if set(genres1) & set(genres2):
        return 1.0

    families1 = genre_families(genres1)
    families2 = genre_families(genres2)

    if not families1 or not families2:
        logger.debug(f"No genre family for {list(genres1)} or {list(genres2)}")
        return UNRELATED_GENRE_SCORE

    keys2 = {f.key for f in families2}
    if any(f.key in keys2 for f in families1):
        return 1.0

    return max(_family_similarity(f1, f2) for f1 in families1 for f2 in families2)


def _has_legacy_family(genres: Sequence[str], subgenres: Sequence[str]) -> bool:
    return any(sub in genre.lower() for genre in genres for sub in subgenres)


def simple_genre_score(genres1: Sequence[str], genres2: Sequence[str]) -> float:
    """
    Tiered genre score used by the pair scorer.

    0.5 if either list is empty, 1.0 for a shared exact tag, 0.7 when both
    lists hit the same family of the short sub-genre table, else 0.3.
    """
    if not genres1 or not genres2:
        return NEUTRAL_GENRE_SCORE

    if set(genres1) & set(genres2):
        return 1.0

    for subgenres in LEGACY_SUBGENRES.values():
        if _has_legacy_family(genres1, subgenres) and _has_legacy_family(genres2, subgenres):
            return FAMILY_MATCH_SCORE

    return UNRELATED_GENRE_SCORE


def genre_display_name(genre: str) -> str:
    """Family name if the tag has one, else the title-cased normalized tag."""
    normalized = normalize_genre(genre)
    family = find_family(normalized)
    if family is not None:
        return family.name
    return " ".join(word.capitalize() for word in normalized.split(" "))


def genre_recommendations(genres: Sequence[str]) -> List[str]:
    """
    Suggest genres to explore from the current ones.

    All genres of each matched family, plus the first three genres of every
    other family within 0.3 energy and 0.3 danceability of it.
    """
    recommendations: List[str] = []

    def add(genre: str) -> None:
        if genre not in recommendations:
            recommendations.append(genre)

    for family in genre_families(genres):
        for genre in family.genres:
            add(genre)

        for other in GENRE_FAMILIES.values():
            if other.key == family.key:
                continue
            if abs(family.energy - other.energy) < 0.3 and abs(family.danceability - other.danceability) < 0.3:
                for genre in other.genres[:3]:
                    add(genre)

    return recommendations
