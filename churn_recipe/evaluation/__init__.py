"""
Evaluation Module

Classification metrics and outcome correlation ranking.
"""

from churn_recipe.evaluation.metrics import (
    ClassificationMetrics,
    ConfusionTallies,
    MetricsEngine,
    MetricsReport,
    evaluate,
)
from churn_recipe.evaluation.correlation import CorrelationRanker

__all__ = [
    "ClassificationMetrics",
    "ConfusionTallies",
    "MetricsEngine",
    "MetricsReport",
    "evaluate",
    "CorrelationRanker",
]
