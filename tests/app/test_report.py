import pytest

from convoy_routing.app.report import (
    BASE_RECOMMENDATIONS,
    CATEGORY_RECOMMENDATIONS,
    analyze_route_risk,
    generate_recommendations,
    highest_impact_factor,
    summarize_risk,
    top_category,
)
from convoy_routing.core.risk import RiskFactor


def _factor(name, category, impact, probability=50.0, mitigation=None):
    return RiskFactor(
        id=f"risk-{name}",
        name=name,
        category=category,
        icon="icon",
        description="",
        impact=impact,
        probability=probability,
        mitigation=mitigation or f"Mitigate {name}.",
    )


@pytest.fixture
def factors():
    return [
        _factor("Heavy Rain", "weather", 40),
        _factor("Cargo Theft Risk", "security", 70),
        _factor("Fog Patches", "weather", 55),
    ]


def test_top_category(factors):
    assert top_category(factors) == "weather"
    assert top_category([]) == "none"


def test_top_category_tie_prefers_first():
    tied = [_factor("A", "traffic", 10), _factor("B", "political", 10)]
    assert top_category(tied) == "traffic"


def test_highest_impact_factor(factors):
    assert highest_impact_factor(factors).name == "Cargo Theft Risk"
    assert highest_impact_factor([]) is None


def test_highest_impact_factor_tie_prefers_first():
    tied = [_factor("A", "traffic", 60), _factor("B", "political", 60)]
    assert highest_impact_factor(tied).name == "A"


def test_summarize_low_risk(factors):
    # mean expected impact is (20 + 35 + 27.5) / 3 = 27.5
    summary = summarize_risk("New York", "Chicago", factors)
    assert summary.startswith("The route from New York to Chicago presents minimal")
    assert "cargo theft risk" in summary


def test_summarize_medium_risk():
    factors = [_factor("Civil Unrest", "security", 80, probability=50)]
    summary = summarize_risk("A", "B", factors)
    assert summary.startswith("Your journey from A to B shows moderate risk levels")
    assert "security factors" in summary
    assert "civil unrest" in summary


def test_summarize_high_and_critical_risk():
    high = summarize_risk("A", "B", [_factor("X", "traffic", 70, probability=100)])
    critical = summarize_risk("A", "B", [_factor("Y", "political", 90, probability=100)])
    assert high.startswith("Caution is strongly advised for the A to B route.")
    assert "Significant traffic risks" in high
    assert critical.startswith("WARNING: The route from A to B presents critical")
    assert "The y risk is particularly severe." in critical


def test_summarize_without_factors():
    summary = summarize_risk("A", "B", [])
    assert "minimal risk" in summary
    assert "primary consideration is none" in summary


def test_generate_recommendations(factors):
    recommendations = generate_recommendations(factors)
    assert recommendations[:2] == list(BASE_RECOMMENDATIONS)
    for item in CATEGORY_RECOMMENDATIONS["weather"]:
        assert item in recommendations
    for item in CATEGORY_RECOMMENDATIONS["security"]:
        assert item in recommendations
    assert CATEGORY_RECOMMENDATIONS["traffic"][0] not in recommendations
    # only factors with impact above 50 add their mitigation
    assert "Mitigate Cargo Theft Risk." in recommendations
    assert "Mitigate Fog Patches." in recommendations
    assert "Mitigate Heavy Rain." not in recommendations
    assert len(recommendations) == 2 + 4 + 2


def test_generate_recommendations_deduplicates():
    duplicated = [
        _factor("A", "traffic", 60, mitigation=BASE_RECOMMENDATIONS[0]),
        _factor("B", "traffic", 60, mitigation="Same."),
        _factor("C", "traffic", 60, mitigation="Same."),
    ]
    recommendations = generate_recommendations(duplicated)
    assert len(recommendations) == len(set(recommendations))
    assert recommendations[-1] == "Same."


def test_generate_recommendations_without_factors():
    assert generate_recommendations([]) == list(BASE_RECOMMENDATIONS)


def test_analyze_route_risk(factors):
    report = analyze_route_risk("New York", "Chicago", factors, route_index=2)
    assert report.route_index == 2
    assert report.risk_score == pytest.approx(27.5)
    assert report.risk_level == "low"
    assert report.factors == factors

    data = report.to_dict()
    assert data["risk_level"] == "low"
    assert len(data["factors"]) == 3


def test_analyze_route_risk_with_given_score(factors):
    report = analyze_route_risk("A", "B", factors, risk_score=65.0)
    assert report.risk_score == 65.0
    assert report.risk_level == "high"
    assert report.summary.startswith("Caution is strongly advised")


def test_analyze_route_risk_summary_follows_bridge_adjusted_score():
    # raw score 32 (medium) is reduced to 25.6 (low) by bridge avoidance
    factors = [_factor("Civil Unrest", "security", 40, probability=80)]
    report = analyze_route_risk("A", "B", factors, risk_score=32.0 * 0.8)
    assert report.risk_level == "low"
    assert report.summary.startswith("The route from A to B presents minimal")
    assert "moderate" not in report.summary
