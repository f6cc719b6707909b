"""
Classification Metrics

Confusion tallies and the statistics derived from them, plus ROC AUC.
The positive class is 1 (churn).
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Sequence, Tuple
import logging

import numpy as np
from sklearn.metrics import auc, confusion_matrix, roc_curve

from churn_recipe.config.schema import EvaluationConfig
from churn_recipe.core.exceptions import DegenerateColumn, EmptyInput, InvalidParameter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfusionTallies:
    """Counts of a binary confusion matrix."""

    tp: int
    fp: int
    tn: int
    fn: int

    @property
    def total(self) -> int:
        return self.tp + self.fp + self.tn + self.fn


@dataclass(frozen=True)
class MetricsReport:
    """Fixed-shape evaluation report."""

    confusion: ConfusionTallies
    accuracy: float
    precision: float
    recall: float
    f1: float
    auc: float
    beta: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        c = self.confusion
        return (
            f"TP={c.tp} FP={c.fp} TN={c.tn} FN={c.fn} | "
            f"accuracy={self.accuracy:.4f} precision={self.precision:.4f} "
            f"recall={self.recall:.4f} f{self.beta:g}={self.f1:.4f} auc={self.auc:.4f}"
        )


def _binary_array(values: Sequence[int], name: str) -> np.ndarray:
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise InvalidParameter(f"{name} must be one-dimensional")
    if not set(np.unique(arr)).issubset({0, 1}):
        raise InvalidParameter(
            f"{name} must contain only 0/1 labels",
            details={"found": [str(v) for v in np.unique(arr)[:10]]},
        )
    return arr.astype(int)


def _probability_array(values: Sequence[float]) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise InvalidParameter("predicted_probability must be one-dimensional")
    if not np.all((arr >= 0.0) & (arr <= 1.0)):
        raise InvalidParameter("predicted_probability must lie in [0, 1]")
    return arr


def _check_lengths(**arrays: np.ndarray) -> int:
    lengths = {name: len(arr) for name, arr in arrays.items()}
    if len(set(lengths.values())) != 1:
        raise InvalidParameter("Input sequences differ in length", details=lengths)
    n = next(iter(lengths.values()))
    if n == 0:
        raise EmptyInput("Metrics need at least one row")
    return n


class ClassificationMetrics:
    """
    Binary classification metrics.

    Includes:
    - Confusion tallies
    - Accuracy, precision, recall, F-beta
    - ROC AUC
    """

    @staticmethod
    def confusion_tallies(
        truth: Sequence[int], predicted_label: Sequence[int]
    ) -> ConfusionTallies:
        """
        Tally TP, FP, TN and FN.

        Raises:
            EmptyInput: If the sequences are empty
            InvalidParameter: If lengths differ or labels are not 0/1
        """
        y_true = _binary_array(truth, "truth")
        y_pred = _binary_array(predicted_label, "predicted_label")
        _check_lengths(truth=y_true, predicted_label=y_pred)

        tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()
        return ConfusionTallies(tp=int(tp), fp=int(fp), tn=int(tn), fn=int(fn))

    @staticmethod
    def accuracy(tallies: ConfusionTallies) -> float:
        return (tallies.tp + tallies.tn) / tallies.total

    @staticmethod
    def precision(tallies: ConfusionTallies) -> float:
        """TP / (TP + FP), 0 when no positive predictions were made."""
        denom = tallies.tp + tallies.fp
        return tallies.tp / denom if denom > 0 else 0.0

    @staticmethod
    def recall(tallies: ConfusionTallies) -> float:
        """TP / (TP + FN), 0 when there are no positives."""
        denom = tallies.tp + tallies.fn
        return tallies.tp / denom if denom > 0 else 0.0

    @staticmethod
    def f_beta(precision: float, recall: float, beta: float = 1.0) -> float:
        """
        F-beta score.

        F = (1 + beta^2) * P * R / (beta^2 * P + R), 0 when P + R = 0.
        """
        if beta <= 0:
            raise InvalidParameter(f"beta must be positive, got {beta}")
        if precision + recall == 0:
            return 0.0
        b2 = beta * beta
        return (1 + b2) * precision * recall / (b2 * precision + recall)

    @staticmethod
    def roc_points(
        truth: Sequence[int], predicted_probability: Sequence[float]
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        ROC curve swept over every distinct probability, highest first.

        Rows with equal probability enter the curve together as one step.

        Returns:
            Tuple of (false positive rates, true positive rates, thresholds)

        Raises:
            DegenerateColumn: If truth holds a single class
        """
        y_true = _binary_array(truth, "truth")
        y_score = _probability_array(predicted_probability)
        _check_lengths(truth=y_true, predicted_probability=y_score)

        if len(np.unique(y_true)) < 2:
            raise DegenerateColumn(
                "ROC curve is undefined when truth holds a single class",
                column_name="truth",
            )
        return roc_curve(y_true, y_score, pos_label=1, drop_intermediate=False)

    @staticmethod
    def roc_auc(truth: Sequence[int], predicted_probability: Sequence[float]) -> float:
        """Trapezoidal area under the ROC curve."""
        fpr, tpr, _ = ClassificationMetrics.roc_points(truth, predicted_probability)
        return float(auc(fpr, tpr))


class MetricsEngine:
    """Computes the full MetricsReport for one set of predictions.

    Args:
        config: EvaluationConfig with beta and the decision threshold used
            when only probabilities are given.
    """

    def __init__(self, config: Optional[EvaluationConfig] = None):
        config = config or EvaluationConfig()
        self.beta = config.beta
        self.threshold = config.threshold

    def evaluate(
        self,
        truth: Sequence[int],
        predicted_probability: Sequence[float],
        predicted_label: Optional[Sequence[int]] = None,
    ) -> MetricsReport:
        """
        Evaluate predictions against truth.

        Args:
            truth: True 0/1 labels
            predicted_probability: Positive-class probabilities in [0, 1]
            predicted_label: Predicted 0/1 labels (derived from the
                probability and threshold when omitted)

        Returns:
            MetricsReport
        """
        y_score = _probability_array(predicted_probability)
        if predicted_label is None:
            predicted_label = (y_score >= self.threshold).astype(int)

        tallies = ClassificationMetrics.confusion_tallies(truth, predicted_label)
        _check_lengths(truth=np.asarray(truth), predicted_probability=y_score)

        precision = ClassificationMetrics.precision(tallies)
        recall = ClassificationMetrics.recall(tallies)
        report = MetricsReport(
            confusion=tallies,
            accuracy=ClassificationMetrics.accuracy(tallies),
            precision=precision,
            recall=recall,
            f1=ClassificationMetrics.f_beta(precision, recall, self.beta),
            auc=ClassificationMetrics.roc_auc(truth, y_score),
            beta=self.beta,
        )
        logger.info(f"evaluate | {report.summary()}")
        return report


def evaluate(
    truth: Sequence[int],
    predicted_label: Sequence[int],
    predicted_probability: Sequence[float],
    beta: float = 1.0,
) -> MetricsReport:
    """Functional form of MetricsEngine.evaluate with explicit labels."""
    engine = MetricsEngine(EvaluationConfig(beta=beta))
    return engine.evaluate(truth, predicted_probability, predicted_label=predicted_label)
