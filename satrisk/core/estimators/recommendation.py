"""
Recommendation bands for downtime probabilities.
"""

# Lower bounds (exclusive) of the high, moderate and low bands
BAND_THRESHOLDS = (0.7, 0.4, 0.2)

BASIC_RECOMMENDATIONS = (
    "High downtime risk - consider backup satellite or delay mission",
    "Moderate downtime risk - monitor space weather conditions",
    "Low downtime risk - normal operations expected",
    "Very low downtime risk - optimal conditions",
)

ENHANCED_RECOMMENDATIONS = (
    "High downtime risk - consider backup satellite or delay mission",
    "Moderate downtime risk - monitor space weather and environmental conditions",
    "Low downtime risk - normal operations expected",
    "Very low downtime risk - optimal conditions for satellite operations",
)


def risk_band(probability: float) -> int:
    """Index of the band for ``probability``: 0 = high .. 3 = very low."""
    for index, threshold in enumerate(BAND_THRESHOLDS):
        if probability > threshold:
            return index
    return len(BAND_THRESHOLDS)


def recommend(probability: float, texts: tuple[str, ...] = BASIC_RECOMMENDATIONS) -> str:
    return texts[risk_band(probability)]
