from dataclasses import dataclass

import pandas as pd
from shapely.geometry import LineString, Point, mapping

from typing import Iterable, Tuple, Any

from .geodesics import (
    get_distance_meters,
    move_fwd,
    get_leg_azimuth,
)
from .units import estimate_travel_time_hours


@dataclass(frozen=True)
class WayPoint:
    """Way point."""

    lon: float
    lat: float

    @property
    def data_frame(self):
        """Single-row data frame with cols lon, lat."""
        return pd.DataFrame(
            {"lon": self.lon, "lat": self.lat},
            index=[
                0,
            ],
        )

    @classmethod
    def from_data_frame(cls, data_frame: pd.DataFrame = None):
        """Construct way point from data frame.

        This will use the first row only.
        """
        return cls(
            lon=float(data_frame.iloc[0]["lon"]),
            lat=float(data_frame.iloc[0]["lat"]),
        )

    @property
    def point(self):
        """Point geometry with x=lon and y=lat."""
        return Point(self.lon, self.lat)

    @classmethod
    def from_point(cls, point: Point = None):
        """Construct from Point with x=lon and y=lat."""
        return cls(lon=point.x, lat=point.y)

    @property
    def lat_lon(self) -> Tuple[float, float]:
        """(lat, lon) pair as used by map widgets."""
        return (self.lat, self.lon)

    @classmethod
    def from_lat_lon(cls, lat_lon: Iterable = None):
        """Construct from a (lat, lon) pair."""
        lat, lon = lat_lon
        return cls(lon=float(lon), lat=float(lat))

    def shift_degrees(self, dlon: float = 0.0, dlat: float = 0.0):
        """Shift by increments given in degrees."""
        return WayPoint(lon=self.lon + dlon, lat=self.lat + dlat)

    def move_space(self, azimuth_degrees: float = None, distance_meters: float = None):
        """Move in space.

        Parameters
        ----------
        azimuth_degrees: float
            Azimuth in degrees.
        distance_meters: float
            Distance in meters.

        Returns
        -------
        WayPoint

        """
        lon_new, lat_new = move_fwd(
            lon=self.lon,
            lat=self.lat,
            azimuth_degrees=azimuth_degrees,
            distance_meters=distance_meters,
        )
        return WayPoint(lon=lon_new, lat=lat_new)

    def distance_km_to(self, other) -> float:
        """Great-circle distance to other way point in kilometers."""
        return (
            get_distance_meters(
                lon_start=self.lon,
                lat_start=self.lat,
                lon_end=other.lon,
                lat_end=other.lat,
            )
            / 1000.0
        )


@dataclass(frozen=True)
class Leg:
    """A leg connecting two waypoints."""

    way_point_start: WayPoint
    way_point_end: WayPoint

    @property
    def data_frame(self):
        """Two-row data frame with cols lon, lat."""
        return pd.concat(
            (self.way_point_start.data_frame, self.way_point_end.data_frame),
            ignore_index=True,
        )

    @property
    def line_string(self):
        """LineString geometry with x=lon and y=lat."""
        return LineString((self.way_point_start.point, self.way_point_end.point))

    @property
    def length_meters(self):
        """Great-circle length of the leg in meters."""
        return get_distance_meters(
            lon_start=self.way_point_start.lon,
            lat_start=self.way_point_start.lat,
            lon_end=self.way_point_end.lon,
            lat_end=self.way_point_end.lat,
        )

    @property
    def length_km(self):
        """Length of the leg in kilometers."""
        return self.length_meters / 1000.0

    @property
    def midpoint(self):
        """Midpoint, averaging coordinates in degree space."""
        return WayPoint(
            lon=(self.way_point_start.lon + self.way_point_end.lon) / 2.0,
            lat=(self.way_point_start.lat + self.way_point_end.lat) / 2.0,
        )

    @property
    def fw_azimuth_degrees(self):
        """Forward azimuth from the start waypoint in degrees."""
        _, fw_az_deg, _ = get_leg_azimuth(
            lon_start=self.way_point_start.lon,
            lat_start=self.way_point_start.lat,
            lon_end=self.way_point_end.lon,
            lat_end=self.way_point_end.lat,
        )
        return fw_az_deg

    @property
    def bw_azimuth_degrees(self):
        """Backward azimuth from the start waypoint in degrees."""
        _, _, bw_az_deg = get_leg_azimuth(
            lon_start=self.way_point_start.lon,
            lat_start=self.way_point_start.lat,
            lon_end=self.way_point_end.lon,
            lat_end=self.way_point_end.lat,
        )
        return bw_az_deg

    @property
    def azimuth_degrees(self):
        """Azimuth of the leg in degrees.

        This averages the forward azimuth of the first and backward azimuth of the last point.
        """
        az_deg, _, _ = get_leg_azimuth(
            lon_start=self.way_point_start.lon,
            lat_start=self.way_point_start.lat,
            lon_end=self.way_point_end.lon,
            lat_end=self.way_point_end.lat,
        )
        return az_deg


@dataclass(frozen=True)
class Route:
    """A route containing of multiple waypoints."""

    way_points: Tuple

    def __post_init__(self):
        if not isinstance(self.way_points, tuple):
            raise ValueError("Way_points need to be a tuple.")
        if len(self.way_points) < 2:
            raise ValueError(
                "A Route needs at least two way points which may be identical."
            )

    def __len__(self):
        """Length is determined by numer of way points."""
        return len(self.way_points)

    def __getitem__(self, key):
        try:
            return Route(way_points=self.way_points[key])
        except ValueError as valerr:
            raise ValueError("Slicing needs at least two way points.") from valerr

    def __add__(self, other):
        """Concatenate route with other route.

        If last own / first other way points are identical, drop first wp of other.
        """
        if other.way_points[0] == self.way_points[-1]:
            other_wps = other.way_points[1:]
        else:
            other_wps = other.way_points
        return Route(way_points=self.way_points + other_wps)

    @property
    def legs(self):
        """Tuple of legs pairing all consecutive way points."""
        return tuple(
            (
                Leg(way_point_start=w0, way_point_end=w1)
                for w0, w1 in zip(self.way_points[:-1], self.way_points[1:])
            )
        )

    @property
    def data_frame(self):
        """Data frame with columns lon, lat."""
        return pd.concat((wp.data_frame for wp in self.way_points), ignore_index=True)

    def to_dict(self) -> dict[str, Any]:
        """Simple dict representation of the route."""
        return {"way_points": self.data_frame.to_dict(orient="records")}

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        """Construct route from dict."""
        frame = pd.DataFrame(data["way_points"])
        return cls.from_data_frame(frame)

    @classmethod
    def from_data_frame(cls, data_frame: pd.DataFrame = None):
        """Construct route from data frame."""
        return cls(
            way_points=tuple(
                (
                    WayPoint.from_data_frame(data_frame=data_frame.iloc[n : n + 1])
                    for n in range(len(data_frame))
                )
            )
        )

    @property
    def lat_lon(self):
        """List of (lat, lon) pairs."""
        return [wp.lat_lon for wp in self.way_points]

    @classmethod
    def from_lat_lon(cls, lat_lon: Iterable = None):
        """Construct route from a sequence of (lat, lon) pairs."""
        return cls(way_points=tuple(WayPoint.from_lat_lon(ll) for ll in lat_lon))

    @property
    def line_string(self):
        """LineString geometry with x=lon and y=lat."""
        return LineString((w.point for w in self.way_points))

    def to_geojson_feature(self, **properties: Any) -> dict[str, Any]:
        """GeoJSON feature of the route line with given properties."""
        return {
            "type": "Feature",
            "geometry": mapping(self.line_string),
            "properties": dict(properties),
        }

    @property
    def length_meters(self):
        """Length of the route in meters (sum of great-circle legs)."""
        return float(sum(l.length_meters for l in self.legs))

    @property
    def length_km(self):
        """Length of the route in kilometers."""
        return self.length_meters / 1000.0

    def travel_time_hours(self, speed_kmh: float = 60.0) -> float:
        """Travel time in hours along the route at constant speed."""
        return estimate_travel_time_hours(
            distance_km=self.length_km, avg_speed_kmh=speed_kmh
        )

    def replace_waypoint(
        self,
        n: int = None,
        new_way_point: WayPoint = None,
    ):
        """Replace nth way point with."""
        if n < 0:
            n += len(self)
        return Route(
            way_points=(
                self.way_points[:n] + (new_way_point,) + self.way_points[n + 1 :]
            )
        )
