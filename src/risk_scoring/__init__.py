"""
Risk Scoring Module

Score disaster risk from current weather observations.
"""

from .risk_engine import (
    RiskEngine,
    WeatherObservation,
    DisasterPrediction,
    RiskAssessment,
    risk_level,
)
from .disaster_catalog import list_disaster_types, get_disaster_type

__all__ = [
    "RiskEngine",
    "WeatherObservation",
    "DisasterPrediction",
    "RiskAssessment",
    "risk_level",
    "list_disaster_types",
    "get_disaster_type",
]
