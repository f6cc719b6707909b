"""
Recipe Step Base Classes

Defines the contract (TransformStep, StepParameters and StepReport) that all
recipe steps follow. A step learns an immutable parameter record from one
training column and applies that record, unchanged, to any later column.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from churn_recipe.data.dataset import ColumnKind


@dataclass(frozen=True)
class StepParameters:
    """Base class for the frozen parameters a step learns at fit time."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class StepReport:
    """Record of fitting one step.

    Attributes:
        step_name: Unique name of the step within its pipeline.
        step_type: Step kind (e.g. 'discretize').
        input_column: Column the step consumed.
        output_columns: Columns the step produced, in order.
        parameters: The learned parameters.
        duration_seconds: Wall-clock time spent fitting.
    """

    step_name: str
    step_type: str
    input_column: str
    output_columns: List[str]
    parameters: StepParameters
    duration_seconds: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_output(self) -> int:
        return len(self.output_columns)

    def summary(self) -> str:
        """Human-readable one-line summary."""
        return (
            f"{self.step_name}: {self.input_column} -> {self.n_output} column(s) "
            f"in {self.duration_seconds:.3f}s"
        )


class TransformStep(ABC):
    """Base class for all recipe steps.

    Subclasses implement fit() and apply(). ``input_kind`` is the column kind
    the step accepts and ``output_kind`` the kind of every column it emits;
    the pipeline uses both to check the declared step order.

    Args:
        column: Name of the single column this step transforms.
        name: Unique step name (defaults to '<step_type>_<column>').
    """

    step_type: str = ""
    input_kind: ColumnKind = ColumnKind.NUMERIC
    output_kind: ColumnKind = ColumnKind.NUMERIC

    def __init__(self, column: str, name: Optional[str] = None):
        self.column = column
        self.name = name or f"{self.step_type}_{column}"

    @abstractmethod
    def fit(self, column: pd.Series) -> StepParameters:
        """Learn parameters from the training column.

        Args:
            column: Training values of ``self.column``.

        Returns:
            Frozen parameter record.
        """
        pass

    @abstractmethod
    def apply(self, parameters: StepParameters, column: pd.Series) -> pd.DataFrame:
        """Transform a column with previously learned parameters.

        Must use nothing from ``column`` beyond its per-row values.

        Args:
            parameters: Record returned by fit().
            column: Values of ``self.column`` to transform.

        Returns:
            DataFrame of output columns, indexed like ``column``. Its columns
            replace ``self.column`` in the working frame.
        """
        pass

    def fit_apply(self, column: pd.Series) -> Tuple[StepParameters, pd.DataFrame]:
        """Convenience: fit + apply on the same column."""
        parameters = self.fit(column)
        return parameters, self.apply(parameters, column)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(column={self.column!r}, name={self.name!r})"
