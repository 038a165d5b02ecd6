"""Textual risk assessment of a planned route."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from ..core.risk import (
    OverallRiskLevel,
    RiskFactor,
    calculate_risk_score,
    get_risk_level,
)

BASE_RECOMMENDATIONS = (
    "Ensure all drivers have been briefed on identified risk factors",
    "Maintain regular communication checkpoints throughout the journey",
)

CATEGORY_RECOMMENDATIONS = {
    "weather": (
        "Check weather forecasts immediately before departure and at regular intervals",
        "Equip vehicles with appropriate weather contingency supplies",
    ),
    "security": (
        "Implement enhanced security protocols for vehicle and cargo",
        "Brief drivers on security awareness and incident reporting procedures",
    ),
    "infrastructure": (
        "Verify route accessibility for all vehicle types in the convoy",
        "Prepare for potential detours around infrastructure limitations",
    ),
    "traffic": (
        "Consider adjusting departure times to avoid peak congestion periods",
        "Maintain flexible scheduling to accommodate unexpected delays",
    ),
    "political": (
        "Ensure all cross-border documentation is current and accessible",
        "Verify compliance with all regional regulations along the route",
    ),
}

# Factors with impact above this threshold contribute their mitigation.
HIGH_IMPACT_THRESHOLD = 50

_SUMMARY_TEMPLATES = {
    "low": (
        "The route from {start} to {end} presents minimal risk concerns. "
        "The primary consideration is {risk}, but overall transit conditions "
        "are favorable."
    ),
    "medium": (
        "Your journey from {start} to {end} shows moderate risk levels, with "
        "{category} factors being the most prevalent. Pay particular attention "
        "to {risk}, which presents the highest potential impact."
    ),
    "high": (
        "Caution is strongly advised for the {start} to {end} route. "
        "Significant {category} risks have been identified, especially {risk}. "
        "Consider implementing all recommended mitigation strategies before "
        "proceeding."
    ),
    "critical": (
        "WARNING: The route from {start} to {end} presents critical risk levels. "
        "Multiple high-impact factors have been identified, predominantly in the "
        "{category} category. The {risk} risk is particularly severe. Route "
        "reconsideration is advised."
    ),
}


def top_category(factors: Sequence[RiskFactor]) -> str:
    """Most frequent category; the first one to reach the maximum count wins."""
    counts: dict[str, int] = {}
    for f in factors:
        counts[f.category] = counts.get(f.category, 0) + 1
    best, best_count = "none", 0
    for category, count in counts.items():
        if count > best_count:
            best, best_count = category, count
    return best


def highest_impact_factor(factors: Sequence[RiskFactor]) -> RiskFactor | None:
    """First factor with maximal impact, or None if there are no factors."""
    best = None
    for f in factors:
        if best is None or f.impact > best.impact:
            best = f
    return best


def summarize_risk(
    start_name: str,
    end_name: str,
    factors: Sequence[RiskFactor],
    risk_score: float | None = None,
) -> str:
    """Natural-language summary of the risks along a route.

    The tone follows the level of risk_score, which defaults to the score of
    the factors.
    """
    if risk_score is None:
        risk_score = calculate_risk_score(factors)
    level = get_risk_level(risk_score)
    worst = highest_impact_factor(factors)
    return _SUMMARY_TEMPLATES[level].format(
        start=start_name,
        end=end_name,
        category=top_category(factors),
        risk=worst.name.lower() if worst is not None else "none",
    )


def generate_recommendations(factors: Sequence[RiskFactor]) -> list[str]:
    """Recommendations for the given risks, de-duplicated in order."""
    recommendations = list(BASE_RECOMMENDATIONS)
    present = {f.category for f in factors}
    for category, items in CATEGORY_RECOMMENDATIONS.items():
        if category in present:
            recommendations.extend(items)
    recommendations.extend(
        f.mitigation for f in factors if f.impact > HIGH_IMPACT_THRESHOLD
    )
    return list(dict.fromkeys(recommendations))


@dataclass
class RiskReport:
    """Risk assessment of one route alternative."""

    start_name: str
    end_name: str
    route_index: int
    risk_score: float
    risk_level: OverallRiskLevel
    summary: str
    recommendations: list[str] = field(default_factory=list)
    factors: list[RiskFactor] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_name": self.start_name,
            "end_name": self.end_name,
            "route_index": self.route_index,
            "risk_score": float(self.risk_score),
            "risk_level": self.risk_level,
            "summary": self.summary,
            "recommendations": list(self.recommendations),
            "factors": [f.to_dict() for f in self.factors],
        }


def analyze_route_risk(
    start_name: str,
    end_name: str,
    factors: Sequence[RiskFactor],
    route_index: int = 0,
    risk_score: float | None = None,
) -> RiskReport:
    """Build a RiskReport from risk factors.

    If risk_score is given (e.g. already adjusted for bridge avoidance) it is
    reported and used for both the level and the summary.
    """
    if risk_score is None:
        risk_score = calculate_risk_score(factors)
    return RiskReport(
        start_name=start_name,
        end_name=end_name,
        route_index=route_index,
        risk_score=risk_score,
        risk_level=get_risk_level(risk_score),
        summary=summarize_risk(start_name, end_name, factors, risk_score=risk_score),
        recommendations=generate_recommendations(factors),
        factors=list(factors),
    )
