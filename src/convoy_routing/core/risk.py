"""Synthetic risk factors and their aggregation into a risk score."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Literal, Sequence

import numpy as np

from .routes import Route

RiskCategory = Literal["weather", "security", "infrastructure", "traffic", "political"]
OverallRiskLevel = Literal["low", "medium", "high", "critical"]


@dataclass(frozen=True)
class RiskTemplate:
    """Catalog entry a risk factor is drawn from."""

    name: str
    description: str
    impact: float
    probability: float
    mitigation: str


@dataclass(frozen=True)
class RiskCatalogCategory:
    category: RiskCategory
    icon: str
    risks: tuple[RiskTemplate, ...]


@dataclass(frozen=True)
class RiskFactor:
    """A risk identified along a route.

    Attributes
    ----------
    id : str
        Identifier unique within one draw.
    name : str
        Short name.
    category : str
        One of weather, security, infrastructure, traffic, political.
    icon : str
        Icon name of the category.
    description : str
        Human-readable description.
    impact : float
        Impact on a 0-100 scale.
    probability : float
        Probability on a 0-100 scale.
    mitigation : str
        Suggested mitigation.
    """

    id: str
    name: str
    category: RiskCategory
    icon: str
    description: str
    impact: float
    probability: float
    mitigation: str

    @property
    def expected_impact(self) -> float:
        """Impact weighted by probability, on a 0-100 scale."""
        return self.impact * self.probability / 100.0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> RiskFactor:
        return cls(**data)


RISK_CATALOG = (
    RiskCatalogCategory(
        category="weather",
        icon="cloud-rain",
        risks=(
            RiskTemplate("Heavy Rain", "Precipitation exceeding 10mm/h expected along route", 40, 65, "Equip vehicles with all-weather tires and reduce speed in affected areas."),
            RiskTemplate("Strong Winds", "Wind gusts exceeding 50km/h predicted", 35, 45, "Avoid high-sided vehicles or secure cargo with additional straps."),
            RiskTemplate("Extreme Heat", "Temperatures exceeding 38°C forecasted", 30, 70, "Ensure cooling systems are operational and provide extra water supplies."),
            RiskTemplate("Fog Patches", "Visibility reduced to less than 100m in some areas", 55, 30, "Reduce speed and maintain greater following distance between vehicles."),
            RiskTemplate("Snow/Ice", "Road surface may be slippery due to freezing conditions", 60, 20, "Use winter tires and carry snow chains if available."),
        ),
    ),
    RiskCatalogCategory(
        category="security",
        icon="shield",
        risks=(
            RiskTemplate("High Crime Area", "Route passes through areas with elevated theft risk", 50, 40, "Implement additional security protocols and avoid overnight stops in these areas."),
            RiskTemplate("Cargo Theft Risk", "Recent reports of cargo theft along this corridor", 70, 25, "Use tamper-evident seals and GPS tracking for high-value cargo."),
            RiskTemplate("Unauthorized Access", "Potential unauthorized access to vehicles during stops", 45, 35, "Ensure all vehicles are secured when unattended and drivers remain vigilant."),
            RiskTemplate("Civil Unrest", "Protests or demonstrations reported near route", 65, 20, "Monitor local news and prepare alternative routes if necessary."),
        ),
    ),
    RiskCatalogCategory(
        category="infrastructure",
        icon="road",
        risks=(
            RiskTemplate("Poor Road Conditions", "Road surface deterioration reported on segments of the route", 40, 60, "Reduce speed in affected areas and monitor vehicle suspension systems."),
            RiskTemplate("Bridge Weight Restrictions", "Weight-limited bridges must be navigated", 55, 30, "Verify vehicle weights and consider alternative routes for heavier vehicles."),
            RiskTemplate("Construction Zones", "Active construction may cause delays and lane closures", 35, 75, "Plan for extended transit times and follow all temporary traffic controls."),
            RiskTemplate("Limited Fuel Stations", "Sparse availability of refueling points along route", 45, 40, "Ensure vehicles begin with full tanks and carry reserve fuel where appropriate."),
        ),
    ),
    RiskCatalogCategory(
        category="traffic",
        icon="car",
        risks=(
            RiskTemplate("Heavy Congestion", "High traffic volumes expected during transit hours", 30, 80, "Consider schedule adjustments to avoid peak traffic periods."),
            RiskTemplate("Accident Hotspot", "Route includes segments with higher-than-average collision rates", 60, 35, "Maintain heightened awareness and reduced speed in these areas."),
            RiskTemplate("Limited Overtaking", "Sections with restricted passing opportunities for larger vehicles", 25, 65, "Plan for slower average speeds and potential convoy separation."),
        ),
    ),
    RiskCatalogCategory(
        category="political",
        icon="landmark",
        risks=(
            RiskTemplate("Border Crossing Delays", "Extended processing times at border checkpoints", 40, 50, "Prepare all documentation in advance and monitor border waiting times."),
            RiskTemplate("Changing Regulations", "Recent or pending changes to transportation regulations", 35, 45, "Ensure compliance with latest requirements and maintain documentation."),
            RiskTemplate("Local Restrictions", "Municipal restrictions on commercial vehicle movement", 30, 55, "Verify route compliance with all local ordinances and time-of-day restrictions."),
        ),
    ),
)  # fmt: skip


def calculate_risk_score(factors: Sequence[RiskFactor]) -> float:
    """Mean expected impact of all factors, capped at 100.

    Returns 0 if there are no factors.
    """
    if len(factors) == 0:
        return 0.0
    total = sum(f.expected_impact for f in factors)
    return min(100.0, total / len(factors))


def get_risk_level(score: float) -> OverallRiskLevel:
    """Classify a 0-100 risk score."""
    if score < 30:
        return "low"
    if score < 60:
        return "medium"
    if score < 80:
        return "high"
    return "critical"


def num_risk_draws(
    length_km: float,
    min_factors: int = 3,
    max_factors: int = 8,
    km_per_factor: float = 100.0,
) -> int:
    """Number of risk draws for a route of given length.

    Longer routes get more draws, clipped to [min_factors, max_factors].
    """
    return int(min(max_factors, max(min_factors, np.floor(length_km / km_per_factor))))


def generate_risk_factors(
    route: Route = None,
    rng=None,
    min_factors: int = 3,
    max_factors: int = 8,
    km_per_factor: float = 100.0,
    catalog: Sequence[RiskCatalogCategory] = RISK_CATALOG,
) -> list[RiskFactor]:
    """Draw synthetic risk factors for a route.

    Each draw picks a category uniformly, then a template within the category
    uniformly. Draws repeating an already selected risk are discarded, so the
    result may hold fewer factors than draws.

    Parameters
    ----------
    route : Route
        Route to draw risks for. Only its length is used.
    rng : random generator, optional
        Random number generator (defaults to a fresh ``np.random.default_rng()``)
    min_factors : int, default=3
        Minimum number of draws
    max_factors : int, default=8
        Maximum number of draws
    km_per_factor : float, default=100.0
        Route length per draw in kilometers
    catalog : sequence of RiskCatalogCategory
        Categories and templates to draw from

    Returns
    -------
    list of RiskFactor
    """
    rng = rng or np.random.default_rng()

    num_draws = num_risk_draws(
        route.length_km,
        min_factors=min_factors,
        max_factors=max_factors,
        km_per_factor=km_per_factor,
    )

    selected: list[RiskFactor] = []
    for i in range(num_draws):
        category = catalog[int(rng.integers(0, len(catalog)))]
        template = category.risks[int(rng.integers(0, len(category.risks)))]
        if any(f.name == template.name for f in selected):
            continue
        selected.append(
            RiskFactor(
                id=f"risk-{i}-{category.category}",
                name=template.name,
                category=category.category,
                icon=category.icon,
                description=template.description,
                impact=template.impact,
                probability=template.probability,
                mitigation=template.mitigation,
            )
        )
    return selected
