"""Pytest configuration and shared fixtures."""
from pathlib import Path

import matplotlib
import numpy as np
import pytest

from convoy_routing.core import Route, WayPoint

matplotlib.use("Agg")

# Project root is two levels up from this file
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# One degree of arc on the 6371 km sphere
KM_PER_DEGREE_ARC = 2 * np.pi * 6371.0 / 360.0


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def equator_route():
    """Three way points along the equator, one degree apart."""
    return Route(
        way_points=(
            WayPoint(lon=0.0, lat=0.0),
            WayPoint(lon=1.0, lat=0.0),
            WayPoint(lon=2.0, lat=0.0),
        )
    )
