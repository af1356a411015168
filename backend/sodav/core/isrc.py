"""ISRC Codec — validation, normalization and display formatting of recording codes.

An ISRC is CC-XXX-YY-NNNNN: country (2 letters), registrant (3 alphanumerics),
year of reference (2 digits), designation (5 digits).

Invariants:
    - All functions are PURE: no IO, no side effects
    - Malformed input never raises: invalidity is signalled by False / None /
      the unchanged original, never by an exception
    - Canonical form is exactly 12 chars matching ^[A-Z]{2}[A-Z0-9]{3}[0-9]{7}$
    - normalize_isrc is idempotent

Design Decisions:
    - Hyphens and whitespace are stripped and case is folded before matching, so
      "fr-gfv-94-00246" validates
    - format_isrc returns the original input when invalid, leaving a clue for the
      caller instead of a half-cleaned string
    - year_of maps yy > 50 to 19yy, else 20yy. The year code does not carry a
      century, so codes from 1950 and 2050 collide; this is a known limitation
"""

import re
from dataclasses import dataclass
from typing import Any

from sodav.core.recognition_payloads import (
    AcoustidResponse, AuddResponse, parse_acoustid, parse_audd,
)

ISRC_PATTERN = re.compile(r"^[A-Z]{2}[A-Z0-9]{3}[0-9]{7}$")
ISRC_LENGTH = 12
CENTURY_PIVOT = 50

_SEPARATORS = re.compile(r"[-\s]")


def normalize_isrc(value: str | None) -> str:
    """Strip hyphens and whitespace, uppercase. Does not validate."""
    if not value or not isinstance(value, str):
        return ""
    return _SEPARATORS.sub("", value).upper()


def validate_isrc(value: str | None) -> bool:
    """True if value is an ISRC once separators are removed and case folded."""
    normalized = normalize_isrc(value)
    if len(normalized) != ISRC_LENGTH:
        return False
    return ISRC_PATTERN.fullmatch(normalized) is not None


def format_isrc(value: str | None) -> str:
    """Display form CC-XXX-YY-NNNNN, or the original input if it is not an ISRC."""
    if not value:
        return ""
    normalized = normalize_isrc(value)
    if not validate_isrc(normalized):
        return value
    return f"{normalized[:2]}-{normalized[2:5]}-{normalized[5:7]}-{normalized[7:]}"


def country_of(value: str | None) -> str | None:
    if not validate_isrc(value):
        return None
    return normalize_isrc(value)[:2]


def year_of(value: str | None) -> int | None:
    """Four-digit year of reference, or None if value is not an ISRC."""
    if not validate_isrc(value):
        return None
    two_digit_year = int(normalize_isrc(value)[5:7])
    if two_digit_year > CENTURY_PIVOT:
        return 1900 + two_digit_year
    return 2000 + two_digit_year


@dataclass(frozen=True)
class Isrc:
    """Validated ISRC split into its four parts."""
    country_code: str
    registrant_code: str
    year_code: str
    designation_code: str

    @classmethod
    def parse(cls, value: str | None) -> "Isrc | None":
        if not validate_isrc(value):
            return None
        normalized = normalize_isrc(value)
        return cls(
            country_code=normalized[:2],
            registrant_code=normalized[2:5],
            year_code=normalized[5:7],
            designation_code=normalized[7:],
        )

    @property
    def canonical(self) -> str:
        return (
            f"{self.country_code}{self.registrant_code}"
            f"{self.year_code}{self.designation_code}"
        )

    @property
    def display(self) -> str:
        return format_isrc(self.canonical)

    @property
    def year(self) -> int:
        return year_of(self.canonical)

    def __str__(self) -> str:
        return self.canonical


# ─── Provider extraction ─────────────────────────────────────────

def extract_isrc_from_acoustid(response: AcoustidResponse | Any) -> str | None:
    """First ISRC found walking results → recordings → isrcs[], or None."""
    payload = parse_acoustid(response)
    if payload is None or not payload.results:
        return None
    for result in payload.results:
        for recording in result.recordings or []:
            for isrc in recording.isrcs or []:
                if isinstance(isrc, str) and isrc:
                    return isrc
    return None


def extract_isrc_from_audd(response: AuddResponse | Any) -> str | None:
    """First ISRC found in result, then Spotify, then Apple Music, or None."""
    payload = parse_audd(response)
    if payload is None or payload.result is None:
        return None
    result = payload.result
    spotify = result.spotify
    candidates = (
        result.isrc,
        spotify.isrc if spotify else None,
        spotify.external_ids.isrc if spotify and spotify.external_ids else None,
        result.apple_music.isrc if result.apple_music else None,
    )
    return next((c for c in candidates if c), None)
