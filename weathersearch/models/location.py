"""Geocoding suggestion and coordinate models."""

import math
from dataclasses import dataclass

from weathersearch.errors import InvalidCoordinates

INVALID_COORDINATES_MESSAGE = "Invalid location coordinates"


@dataclass(frozen=True)
class Suggestion:
    id: int | str
    name: str
    country_code: str
    latitude: float | str  # raw value as received from the geocoder
    longitude: float | str
    admin1: str | None = None

    @property
    def label(self) -> str:
        """List entry, e.g. 'Springfield, Illinois (US)'."""
        return f"{self.name}, {self.admin1 or ''} ({self.country_code})"

    @property
    def selection_label(self) -> str:
        """Text placed in the search box once the suggestion is selected."""
        return f"{self.name}, {self.admin1 or ''} {self.country_code}"


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise InvalidCoordinates(INVALID_COORDINATES_MESSAGE)
        if abs(self.latitude) > 90 or abs(self.longitude) > 180:
            raise InvalidCoordinates(INVALID_COORDINATES_MESSAGE)

    @classmethod
    def parse(cls, latitude: object, longitude: object) -> "Coordinates":
        """Parse raw latitude/longitude values into validated coordinates."""
        try:
            lat = float(latitude)  # type: ignore[arg-type]
            lon = float(longitude)  # type: ignore[arg-type]
        except (TypeError, ValueError) as e:
            raise InvalidCoordinates(INVALID_COORDINATES_MESSAGE) from e
        return cls(latitude=lat, longitude=lon)

    @classmethod
    def from_suggestion(cls, suggestion: Suggestion) -> "Coordinates":
        return cls.parse(suggestion.latitude, suggestion.longitude)
