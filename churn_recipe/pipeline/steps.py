"""
Recipe Steps

Discretize, LogTransform, CategoricalEncode and CenterScale. Each step reads
exactly one column; fit() never mutates the step, it returns a frozen
parameter record.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Type
import logging
import math

import numpy as np
import pandas as pd

from churn_recipe.core.exceptions import (
    DegenerateColumn,
    InvalidParameter,
    NonPositiveValue,
)
from churn_recipe.data.dataset import ColumnKind
from churn_recipe.pipeline.base import StepParameters, TransformStep

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BinThresholds(StepParameters):
    """Ascending interior cut points and the label of each bin."""

    thresholds: Tuple[float, ...]
    labels: Tuple[str, ...]


@dataclass(frozen=True)
class LogParameters(StepParameters):
    base: float


@dataclass(frozen=True)
class CategoryVocabulary(StepParameters):
    """Reference category plus the retained categories, one indicator each."""

    reference: str
    categories: Tuple[str, ...]
    output_columns: Tuple[str, ...]


@dataclass(frozen=True)
class ScaleParameters(StepParameters):
    mean: float
    std: float


def _as_float(column: pd.Series) -> np.ndarray:
    return column.to_numpy(dtype=float)


class Discretize(TransformStep):
    """Equal-frequency binning into ``bin_count`` ordered bins.

    Fit stores the ``bin_count - 1`` interior empirical quantiles. Apply maps
    a value to the first threshold it does not exceed, so a value sitting on a
    cut point lands in the lower bin. The result is nominal: bin labels are
    'bin1'..'binK', zero-padded so lexical order equals bin order.
    """

    step_type = "discretize"
    input_kind = ColumnKind.NUMERIC
    output_kind = ColumnKind.NOMINAL

    def __init__(self, column: str, bin_count: int, name: Optional[str] = None):
        if bin_count < 2:
            raise InvalidParameter(
                f"bin_count must be at least 2, got {bin_count}",
                details={"column": column, "bin_count": bin_count},
            )
        super().__init__(column, name)
        self.bin_count = bin_count

    def fit(self, column: pd.Series) -> BinThresholds:
        values = _as_float(column)
        n_distinct = len(np.unique(values))
        if n_distinct < self.bin_count:
            raise DegenerateColumn(
                f"{n_distinct} distinct value(s) cannot fill {self.bin_count} bins",
                column_name=self.column,
            )

        probs = np.arange(1, self.bin_count) / self.bin_count
        thresholds = tuple(float(q) for q in np.quantile(values, probs))
        width = len(str(self.bin_count))
        labels = tuple(f"bin{i + 1:0{width}d}" for i in range(self.bin_count))

        logger.debug(f"{self.name} | thresholds: {thresholds}")
        return BinThresholds(thresholds=thresholds, labels=labels)

    def apply(self, parameters: BinThresholds, column: pd.Series) -> pd.DataFrame:
        positions = np.searchsorted(
            np.asarray(parameters.thresholds), _as_float(column), side="left"
        )
        labels = np.asarray(parameters.labels, dtype=object)[positions]
        return pd.DataFrame({self.column: labels}, index=column.index)


class LogTransform(TransformStep):
    """Replace each value with its logarithm (natural log by default).

    Values <= 0 raise NonPositiveValue at fit and at apply time.
    """

    step_type = "log"

    def __init__(self, column: str, base: float = math.e, name: Optional[str] = None):
        if base <= 0 or base == 1:
            raise InvalidParameter(
                f"log base must be positive and not 1, got {base}",
                details={"column": column},
            )
        super().__init__(column, name)
        self.base = base

    def _check_positive(self, values: np.ndarray) -> None:
        n_bad = int(np.sum(~(values > 0)))
        if n_bad:
            raise NonPositiveValue(
                f"log undefined for {n_bad} value(s) <= 0",
                column_name=self.column,
                n_offending=n_bad,
            )

    def fit(self, column: pd.Series) -> LogParameters:
        self._check_positive(_as_float(column))
        return LogParameters(base=self.base)

    def apply(self, parameters: LogParameters, column: pd.Series) -> pd.DataFrame:
        values = _as_float(column)
        self._check_positive(values)
        logged = np.log(values)
        if parameters.base != math.e:
            logged = logged / math.log(parameters.base)
        return pd.DataFrame({self.column: logged}, index=column.index)


class CategoricalEncode(TransformStep):
    """Indicator (dummy) encoding with the lexically first category as reference.

    A value equal to the reference category, or never seen at fit time,
    yields an all-zero indicator row.
    """

    step_type = "encode"
    input_kind = ColumnKind.NOMINAL

    def fit(self, column: pd.Series) -> CategoryVocabulary:
        observed = sorted(set(column.astype(str)))
        if not observed:
            raise DegenerateColumn("no categories observed", column_name=self.column)

        reference, retained = observed[0], tuple(observed[1:])
        output_columns = tuple(f"{self.column}_{c}" for c in retained)
        logger.debug(
            f"{self.name} | reference '{reference}', {len(retained)} indicator(s)"
        )
        return CategoryVocabulary(
            reference=reference, categories=retained, output_columns=output_columns
        )

    def apply(self, parameters: CategoryVocabulary, column: pd.Series) -> pd.DataFrame:
        values = column.astype(str).to_numpy()
        indicators = {
            name: (values == category).astype(float)
            for name, category in zip(parameters.output_columns, parameters.categories)
        }
        return pd.DataFrame(indicators, index=column.index, columns=list(parameters.output_columns))


class CenterScale(TransformStep):
    """Standardize with the training mean and sample standard deviation."""

    step_type = "center_scale"

    def fit(self, column: pd.Series) -> ScaleParameters:
        values = _as_float(column)
        if len(values) < 2 or values.max() == values.min():
            raise DegenerateColumn(
                "standard deviation is zero", column_name=self.column
            )
        mean = float(values.mean())
        std = float(values.std(ddof=1))
        logger.debug(f"{self.name} | mean={mean:.4f}, std={std:.4f}")
        return ScaleParameters(mean=mean, std=std)

    def apply(self, parameters: ScaleParameters, column: pd.Series) -> pd.DataFrame:
        scaled = (_as_float(column) - parameters.mean) / parameters.std
        return pd.DataFrame({self.column: scaled}, index=column.index)


STEP_TYPES: Dict[str, Type[TransformStep]] = {
    Discretize.step_type: Discretize,
    LogTransform.step_type: LogTransform,
    CategoricalEncode.step_type: CategoricalEncode,
    CenterScale.step_type: CenterScale,
}
