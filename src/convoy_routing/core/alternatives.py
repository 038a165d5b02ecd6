"""Data structures bundling candidate routes with their metrics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .risk import RiskFactor
from .routes import Route


@dataclass(frozen=True)
class RouteAlternative:
    """Bundle of a candidate route and its metrics.

    Attributes
    ----------
    route : Route
        The route.
    distance_km : float
        Route length in kilometers.
    time_hours : float
        Estimated travel time in hours.
    risk_score : float
        Risk score on a 0-100 scale.
    route_index : int
        Position of the route in generation order. Stays fixed under ranking.
    risk_factors : tuple of RiskFactor
        Risks the score was computed from.
    """

    route: Route
    distance_km: float = np.nan
    time_hours: float = np.nan
    risk_score: float = np.nan
    route_index: int = 0
    risk_factors: tuple[RiskFactor, ...] = ()

    def fuel_usage(self, consumption_l_per_km: float) -> float:
        """Fuel usage in liters at given consumption."""
        return self.distance_km * consumption_l_per_km

    @property
    def metrics_valid(self) -> bool:
        return all(
            np.isfinite(v) for v in (self.distance_km, self.time_hours, self.risk_score)
        )

    @classmethod
    def from_dict(cls, data: dict) -> RouteAlternative:
        """Construct RouteAlternative from dict.

        Parameters
        ----------
        data : dict
            Dictionary as returned by ``to_dict``.

        Returns
        -------
        RouteAlternative
            A new RouteAlternative instance.
        """
        return cls(
            route=Route.from_dict(data["route"]),
            distance_km=float(data["distance_km"]),
            time_hours=float(data["time_hours"]),
            risk_score=float(data["risk_score"]),
            route_index=int(data["route_index"]),
            risk_factors=tuple(
                RiskFactor.from_dict(f) for f in data.get("risk_factors", [])
            ),
        )

    def to_dict(self) -> dict:
        """Return a JSON-friendly representation."""
        return {
            "route": self.route.to_dict(),
            "distance_km": float(self.distance_km),
            "time_hours": float(self.time_hours),
            "risk_score": float(self.risk_score),
            "route_index": int(self.route_index),
            "risk_factors": [f.to_dict() for f in self.risk_factors],
        }


@dataclass
class AlternativeSet:
    """Collection of route alternatives.

    Attributes
    ----------
    alternatives : list[RouteAlternative]
        The alternatives, in ranking order once ranked.
    """

    alternatives: list[RouteAlternative]

    @property
    def size(self) -> int:
        """Return the number of alternatives."""
        return len(self.alternatives)

    def __iter__(self):
        return iter(self.alternatives)

    def __len__(self):
        return len(self.alternatives)

    @classmethod
    def from_alternatives(cls, alternatives: Sequence[RouteAlternative]) -> AlternativeSet:
        return cls(alternatives=list(alternatives))

    def add_alternative(self, alternative: RouteAlternative) -> AlternativeSet:
        """Return new set with additional alternative appended."""
        return AlternativeSet(alternatives=self.alternatives + [alternative])

    def by_index(self, route_index: int) -> RouteAlternative:
        """Return the alternative with given route_index.

        Raises
        ------
        KeyError
            If no alternative carries the route_index.
        """
        for alternative in self.alternatives:
            if alternative.route_index == route_index:
                return alternative
        raise KeyError(f"No alternative with route_index={route_index}")

    @property
    def route_indices(self) -> list[int]:
        return [a.route_index for a in self.alternatives]

    def remove_invalid(self):
        self.alternatives = [a for a in self.alternatives if a.metrics_valid]

    @classmethod
    def from_dict(cls, data: dict) -> AlternativeSet:
        return cls(
            alternatives=[
                RouteAlternative.from_dict(a) for a in data["alternatives"]
            ]
        )

    def to_dict(self) -> dict:
        return {"alternatives": [a.to_dict() for a in self.alternatives]}
