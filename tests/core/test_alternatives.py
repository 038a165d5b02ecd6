import numpy as np
import pytest

from convoy_routing.core import AlternativeSet, Route, RouteAlternative, WayPoint
from convoy_routing.core.risk import RiskFactor


@pytest.fixture
def alternatives():
    route = Route(way_points=(WayPoint(lon=0, lat=0), WayPoint(lon=1, lat=0)))
    factor = RiskFactor(
        id="risk-0-traffic",
        name="Heavy Congestion",
        category="traffic",
        icon="car",
        description="High traffic volumes expected during transit hours",
        impact=30,
        probability=80,
        mitigation="Consider schedule adjustments to avoid peak traffic periods.",
    )
    return [
        RouteAlternative(
            route=route,
            distance_km=100.0,
            time_hours=1.5,
            risk_score=24.0,
            route_index=i,
            risk_factors=(factor,),
        )
        for i in range(3)
    ]


def test_fuel_usage(alternatives):
    assert np.isclose(alternatives[0].fuel_usage(0.3), 30.0)


def test_metrics_valid():
    route = Route(way_points=(WayPoint(lon=0, lat=0), WayPoint(lon=1, lat=0)))
    assert not RouteAlternative(route=route).metrics_valid
    assert RouteAlternative(
        route=route, distance_km=1.0, time_hours=1.0, risk_score=0.0
    ).metrics_valid


def test_alternative_dict_round_trip(alternatives):
    alt = alternatives[1]
    assert RouteAlternative.from_dict(alt.to_dict()) == alt


def test_alternative_set_by_index(alternatives):
    alt_set = AlternativeSet.from_alternatives(alternatives[::-1])
    assert alt_set.size == 3
    assert len(alt_set) == 3
    assert alt_set.route_indices == [2, 1, 0]
    assert alt_set.by_index(1) is alternatives[1]
    with pytest.raises(KeyError):
        alt_set.by_index(5)


def test_alternative_set_add_returns_new_set(alternatives):
    alt_set = AlternativeSet.from_alternatives(alternatives[:2])
    extended = alt_set.add_alternative(alternatives[2])
    assert len(alt_set) == 2
    assert len(extended) == 3


def test_alternative_set_remove_invalid(alternatives):
    route = alternatives[0].route
    alt_set = AlternativeSet.from_alternatives(
        alternatives + [RouteAlternative(route=route, route_index=9)]
    )
    alt_set.remove_invalid()
    assert alt_set.route_indices == [0, 1, 2]


def test_alternative_set_dict_round_trip(alternatives):
    alt_set = AlternativeSet.from_alternatives(alternatives)
    restored = AlternativeSet.from_dict(alt_set.to_dict())
    assert restored.alternatives == alt_set.alternatives
