# backend/recommendation.py
from typing import List, Sequence

NO_RECOMMENDATION = "No specific recommendations based on the current report"
CHECKUP_RECOMMENDATION = "Recommend comprehensive health check-up and personalized health plan"


def specialist_recommendation(conditions: Sequence[str]) -> str:
    return f"Consult a specialist for detailed evaluation of: {', '.join(conditions)}"


def lifestyle_recommendation(risk_factors: Sequence[str]) -> str:
    return f"Consider lifestyle modifications to address risk factors: {', '.join(risk_factors)}"


def build_recommendations(conditions: Sequence[str], risk_factors: Sequence[str]) -> List[str]:
    """
    Rule-based recommendations for the matched terms.

    Args:
        conditions: Matched condition terms, in vocabulary order
        risk_factors: Matched risk-factor terms, in vocabulary order

    Returns:
        One specialist line when any condition matched, a lifestyle line and
        a check-up line when any risk factor matched, otherwise the single
        default line.
    """
    recommendations: List[str] = []

    if conditions:
        recommendations.append(specialist_recommendation(conditions))

    if risk_factors:
        recommendations.append(lifestyle_recommendation(risk_factors))
        recommendations.append(CHECKUP_RECOMMENDATION)

    if not recommendations:
        recommendations.append(NO_RECOMMENDATION)

    return recommendations
