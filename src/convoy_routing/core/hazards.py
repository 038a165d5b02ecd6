from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from shapely.geometry import Polygon, mapping

from .geodesics import circle_polygon
from .routes import WayPoint

RiskLevel = Literal["low", "medium", "high"]

RISK_LEVELS = ("low", "medium", "high")


@dataclass(frozen=True)
class RiskArea:
    """Circular hazard zone around a center point.

    Attributes
    ----------
    lon : float
        Center longitude in degrees.
    lat : float
        Center latitude in degrees.
    radius_km : float
        Radius in kilometers.
    risk_level : {"low", "medium", "high"}
        Severity of the hazard.
    description : str
        Human-readable description of the hazard.
    """

    lon: float
    lat: float
    radius_km: float
    risk_level: RiskLevel = "medium"
    description: str = ""

    def __post_init__(self):
        if self.risk_level not in RISK_LEVELS:
            raise ValueError(f"Unknown risk level: {self.risk_level!r}")
        if self.radius_km < 0:
            raise ValueError("Radius must not be negative.")

    @property
    def center(self) -> WayPoint:
        return WayPoint(lon=self.lon, lat=self.lat)

    def distance_km_to(self, way_point: WayPoint) -> float:
        """Great-circle distance from the center to way_point in kilometers."""
        return self.center.distance_km_to(way_point)

    def contains(self, way_point: WayPoint, radius_scale: float = 1.0) -> bool:
        """Whether way_point lies strictly within the (scaled) radius."""
        return self.distance_km_to(way_point) < self.radius_km * radius_scale

    @property
    def polygon(self) -> Polygon:
        """Polygon approximating the hazard zone with x=lon and y=lat."""
        return circle_polygon(
            lon=self.lon, lat=self.lat, radius_meters=self.radius_km * 1000.0
        )

    def to_geojson_feature(self) -> dict[str, Any]:
        return {
            "type": "Feature",
            "geometry": mapping(self.polygon),
            "properties": {
                "kind": "risk_area",
                "risk_level": self.risk_level,
                "radius_km": self.radius_km,
                "description": self.description,
            },
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "lon": self.lon,
            "lat": self.lat,
            "radius_km": self.radius_km,
            "risk_level": self.risk_level,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RiskArea:
        return cls(
            lon=float(data["lon"]),
            lat=float(data["lat"]),
            radius_km=float(data["radius_km"]),
            risk_level=data.get("risk_level", "medium"),
            description=data.get("description", ""),
        )


def sample_risk_areas() -> tuple[RiskArea, ...]:
    """Sample hazard zones across the continental US."""
    return (
        RiskArea(
            lon=-98.5795,
            lat=39.8283,
            radius_km=300.0,
            risk_level="medium",
            description="Weather alert: Thunderstorms expected in this region",
        ),
        RiskArea(
            lon=-122.4194,
            lat=37.7749,
            radius_km=150.0,
            risk_level="high",
            description="Traffic congestion due to construction work",
        ),
        RiskArea(
            lon=-74.0060,
            lat=40.7128,
            radius_km=200.0,
            risk_level="low",
            description="Minor delay due to local event",
        ),
    )
