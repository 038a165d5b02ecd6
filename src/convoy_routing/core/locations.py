"""Named locations that can be used as convoy stops."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .routes import WayPoint


class UnknownLocationError(LookupError):
    """Raised if a location name is not among the known locations."""

    pass


@dataclass(frozen=True)
class Location:
    """A named stop with coordinates in degrees."""

    name: str
    lat: float
    lon: float

    @property
    def way_point(self) -> WayPoint:
        return WayPoint(lon=self.lon, lat=self.lat)

    @property
    def coordinates(self) -> tuple[float, float]:
        """(lat, lon) pair."""
        return (self.lat, self.lon)

    def to_dict(self) -> dict:
        return {"name": self.name, "lat": self.lat, "lon": self.lon}


SAMPLE_LOCATIONS = (
    Location(name="New York", lat=40.7128, lon=-74.0060),
    Location(name="Los Angeles", lat=34.0522, lon=-118.2437),
    Location(name="Chicago", lat=41.8781, lon=-87.6298),
    Location(name="Houston", lat=29.7604, lon=-95.3698),
    Location(name="Phoenix", lat=33.4484, lon=-112.0740),
    Location(name="San Antonio", lat=29.4241, lon=-98.4936),
    Location(name="San Diego", lat=32.7157, lon=-117.1611),
    Location(name="Dallas", lat=32.7767, lon=-96.7970),
    Location(name="San Jose", lat=37.3382, lon=-121.8863),
    Location(name="Austin", lat=30.2672, lon=-97.7431),
)


def get_sample_locations() -> list[Location]:
    """Return the sample locations in their canonical order."""
    return list(SAMPLE_LOCATIONS)


def find_location(
    name: str, locations: Sequence[Location] = SAMPLE_LOCATIONS
) -> Location:
    """Look up a location by name.

    Raises
    ------
    UnknownLocationError
        If no location carries the given name.
    """
    for location in locations:
        if location.name == name:
            return location
    raise UnknownLocationError(f"Unknown location: {name!r}")
