"""
Correlation Ranker

Pearson correlation of every numeric feature with the outcome, ranked by
ascending magnitude so the strongest drivers come last.
"""

from typing import List, Sequence, Tuple, Union
import logging

import numpy as np
import pandas as pd

from churn_recipe.core.exceptions import DegenerateColumn, EmptyInput, InvalidParameter
from churn_recipe.pipeline.recipe import NumericMatrix

logger = logging.getLogger(__name__)

STEP_NAME = "correlation"


class CorrelationRanker:
    """Rank features by absolute Pearson correlation with the outcome.

    Args:
        outcome_name: Label used for the outcome in errors and frames.
    """

    def __init__(self, outcome_name: str = "outcome"):
        self.outcome_name = outcome_name

    def rank(
        self,
        matrix: Union[NumericMatrix, pd.DataFrame],
        outcome: Sequence[float],
    ) -> List[Tuple[str, float]]:
        """Correlate each column of ``matrix`` with ``outcome``.

        Args:
            matrix: Transformed feature matrix.
            outcome: Numeric outcome vector, one value per row.

        Returns:
            (feature, coefficient) pairs, smallest |coefficient| first.
            Equal magnitudes keep the matrix column order.

        Raises:
            InvalidParameter: If the row counts differ.
            EmptyInput: If the matrix has no rows.
            DegenerateColumn: If a feature or the outcome has zero variance.
        """
        frame = matrix.to_frame() if isinstance(matrix, NumericMatrix) else matrix
        y = np.asarray(outcome, dtype=float)

        if len(frame) != len(y):
            raise InvalidParameter(
                f"Matrix has {len(frame)} rows but outcome has {len(y)}"
            )
        if len(y) == 0:
            raise EmptyInput("Cannot correlate zero rows")
        if y.max() == y.min():
            raise DegenerateColumn("outcome has zero variance", column_name=self.outcome_name)

        frame = frame.astype(float)
        for name in frame.columns:
            if frame[name].max() == frame[name].min():
                raise DegenerateColumn("feature has zero variance", column_name=name)

        pearson = frame.corrwith(pd.Series(y, index=frame.index), method="pearson")
        coefficients: List[Tuple[str, float]] = [
            (name, float(np.clip(pearson[name], -1.0, 1.0))) for name in frame.columns
        ]

        ranking = sorted(coefficients, key=lambda pair: abs(pair[1]))
        if ranking:
            strongest = ranking[-1]
            logger.info(
                f"{STEP_NAME} | {len(ranking)} features, strongest: "
                f"{strongest[0]} ({strongest[1]:+.3f})"
            )
        return ranking

    def to_frame(self, ranking: List[Tuple[str, float]]) -> pd.DataFrame:
        """Ranking as a DataFrame with feature / coefficient / abs columns."""
        df = pd.DataFrame(ranking, columns=["feature", self.outcome_name])
        df["abs_" + self.outcome_name] = df[self.outcome_name].abs()
        return df
