import numpy as np
import pyproj
from shapely.geometry import LineString, Polygon

from .config import EARTH_RADIUS_METERS

# Spherical earth: geodesics are great circles and distances match haversine.
_GEOD = pyproj.Geod(a=EARTH_RADIUS_METERS, f=0.0)


def move_fwd(
    lon: float = None,
    lat: float = None,
    azimuth_degrees: float = None,
    distance_meters: float = None,
) -> tuple:
    """Move forward from a point along a great circle.

    Parameters
    ----------
    lon : float
        Starting longitude in degrees
    lat : float
        Starting latitude in degrees
    azimuth_degrees : float
        Forward azimuth in degrees
    distance_meters : float
        Distance to move in meters

    Returns
    -------
    tuple of float
        New (longitude, latitude) in degrees
    """
    lon_new, lat_new, _ = _GEOD.fwd(
        lons=lon, lats=lat, az=azimuth_degrees, dist=distance_meters, radians=False
    )
    return lon_new, lat_new


def get_distance_meters(
    lon_start: float = None,
    lon_end: float = None,
    lat_start: float = None,
    lat_end: float = None,
):
    """Calculate great-circle distance between two points.

    Parameters
    ----------
    lon_start : float
        Starting longitude in degrees
    lon_end : float
        Ending longitude in degrees
    lat_start : float
        Starting latitude in degrees
    lat_end : float
        Ending latitude in degrees

    Returns
    -------
    float
        Distance in meters along the great circle
    """
    _, _, distance_meters = _GEOD.inv(
        lons1=lon_start,
        lons2=lon_end,
        lats1=lat_start,
        lats2=lat_end,
    )
    return distance_meters


def get_distance_km(
    lon_start: float = None,
    lon_end: float = None,
    lat_start: float = None,
    lat_end: float = None,
) -> float:
    """Great-circle distance in kilometers."""
    return (
        get_distance_meters(
            lon_start=lon_start, lon_end=lon_end, lat_start=lat_start, lat_end=lat_end
        )
        / 1000.0
    )


def get_length_meters(line_string: LineString = None) -> float:
    """Calculate great-circle length of a LineString geometry."""
    return _GEOD.geometry_length(line_string)


def get_leg_azimuth(
    lon_start: float = None,
    lat_start: float = None,
    lon_end: float = None,
    lat_end: float = None,
):
    """Calculate azimuths for a great-circle leg.

    Parameters
    ----------
    lon_start : float
        Starting longitude in degrees
    lat_start : float
        Starting latitude in degrees
    lon_end : float
        Ending longitude in degrees
    lat_end : float
        Ending latitude in degrees

    Returns
    -------
    tuple of float
        (average_azimuth, forward_azimuth, backward_azimuth) in degrees
    """
    fwd_az, bwd_az, _ = _GEOD.inv(
        lons1=lon_start,
        lons2=lon_end,
        lats1=lat_start,
        lats2=lat_end,
        return_back_azimuth=False,
    )
    return (fwd_az + bwd_az) / 2.0, fwd_az, bwd_az


def circle_polygon(
    lon: float = None,
    lat: float = None,
    radius_meters: float = None,
    num_vertices: int = 64,
) -> Polygon:
    """Polygon approximating a great-circle disc around a center point.

    Parameters
    ----------
    lon : float
        Center longitude in degrees
    lat : float
        Center latitude in degrees
    radius_meters : float
        Radius in meters
    num_vertices : int, default=64
        Number of vertices on the boundary

    Returns
    -------
    Polygon
        Polygon with x=lon and y=lat
    """
    azimuths = np.linspace(0.0, 360.0, num_vertices, endpoint=False)
    lons, lats, _ = _GEOD.fwd(
        lons=np.full_like(azimuths, lon),
        lats=np.full_like(azimuths, lat),
        az=azimuths,
        dist=np.full_like(azimuths, radius_meters),
    )
    return Polygon(zip(lons, lats))
