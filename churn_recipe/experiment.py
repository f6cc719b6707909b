"""
Experiment Runner

Wires split -> recipe fit -> apply -> classifier -> metrics, plus the
correlation ranking of the transformed training matrix. The classifier is
any scikit-learn style estimator with fit() and predict_proba().
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple
import logging
import time

import numpy as np

from churn_recipe.config.schema import ChurnConfig
from churn_recipe.data.dataset import Dataset
from churn_recipe.data.splitter import DataSplitter, Split
from churn_recipe.evaluation.correlation import CorrelationRanker
from churn_recipe.evaluation.metrics import MetricsEngine, MetricsReport
from churn_recipe.pipeline.builder import build_pipeline
from churn_recipe.pipeline.recipe import NumericMatrix, Pipeline

logger = logging.getLogger(__name__)


@dataclass
class ExperimentResult:
    """Everything produced by one run.

    Attributes:
        split: The train/test partition.
        pipeline: The fitted recipe.
        train_matrix: Transformed training features.
        test_matrix: Transformed test features.
        probabilities: Positive-class probabilities on the test set.
        metrics: Test-set MetricsReport.
        correlations: Ranking of train features against the outcome.
        total_duration: Wall-clock seconds.
    """

    split: Split
    pipeline: Pipeline
    train_matrix: NumericMatrix
    test_matrix: NumericMatrix
    probabilities: np.ndarray
    metrics: MetricsReport
    correlations: List[Tuple[str, float]] = field(default_factory=list)
    total_duration: float = 0.0

    def summary(self) -> str:
        """Human-readable multi-line summary of the run."""
        lines = [
            f"Experiment finished in {self.total_duration:.1f}s",
            f"  Train rows: {self.train_matrix.n_rows:,}, "
            f"test rows: {self.test_matrix.n_rows:,}, "
            f"features: {len(self.train_matrix.columns)}",
            f"  {self.metrics.summary()}",
        ]
        for name, coef in self.correlations[-5:][::-1]:
            lines.append(f"  {name}: {coef:+.3f}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "split": self.split.metadata,
            "features": list(self.train_matrix.columns),
            "metrics": self.metrics.to_dict(),
            "correlations": [{"feature": n, "coefficient": c} for n, c in self.correlations],
            "total_duration": self.total_duration,
        }


def run_experiment(dataset: Dataset, config: ChurnConfig, classifier: Any) -> ExperimentResult:
    """Run one split/fit/score/evaluate cycle.

    Args:
        dataset: Loaded, missing-value-free dataset.
        config: Full configuration.
        classifier: Unfitted estimator with fit(X, y) and predict_proba(X).

    Returns:
        ExperimentResult
    """
    t0 = time.time()

    split = DataSplitter(config.splitting).split(dataset)

    pipeline = build_pipeline(config.recipe, split.train.feature_kinds)
    pipeline.fit(split.train)
    train_matrix = pipeline.apply(split.train)
    test_matrix = pipeline.apply(split.test)

    y_train = split.train.labels
    y_test = split.test.labels

    logger.info(f"classifier | Training {type(classifier).__name__} on {train_matrix.shape}")
    classifier.fit(train_matrix.values, y_train)
    probabilities = np.asarray(classifier.predict_proba(test_matrix.values))[:, 1]

    metrics = MetricsEngine(config.evaluation).evaluate(y_test, probabilities)

    ranker = CorrelationRanker(outcome_name=dataset.outcome_column)
    correlations = ranker.rank(train_matrix, y_train)

    result = ExperimentResult(
        split=split,
        pipeline=pipeline,
        train_matrix=train_matrix,
        test_matrix=test_matrix,
        probabilities=probabilities,
        metrics=metrics,
        correlations=correlations,
        total_duration=round(time.time() - t0, 2),
    )
    logger.info(result.summary())
    return result
