"""
Recipe Pipeline

An explicit, ordered list of TransformSteps with a two-phase lifecycle:
fit() learns every step's parameters from a training dataset, apply() reuses
those frozen parameters on any dataset with the same schema.

The fitted state is one immutable record. fit() builds a new record and
swaps it in with a single assignment; apply() reads the record once on entry,
so an apply running during a re-fit finishes with the parameters it started
with.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union
import logging
import time

import numpy as np
import pandas as pd

from churn_recipe.core.exceptions import (
    EmptyInput,
    InvalidParameter,
    PipelineNotFit,
    SchemaMismatch,
)
from churn_recipe.data.dataset import ColumnKind, Dataset
from churn_recipe.pipeline.base import StepParameters, StepReport, TransformStep

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class NumericMatrix:
    """Model-ready float matrix with named columns."""

    columns: Tuple[str, ...]
    values: np.ndarray

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=float, copy=True)
        if values.ndim != 2 or values.shape[1] != len(self.columns):
            raise InvalidParameter(
                f"values of shape {values.shape} do not match "
                f"{len(self.columns)} column names"
            )
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def n_rows(self) -> int:
        return self.values.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    def column(self, name: str) -> np.ndarray:
        """Values of one named column."""
        try:
            position = self.columns.index(name)
        except ValueError:
            raise SchemaMismatch("Column not in matrix", column_name=name)
        return self.values[:, position]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.values, columns=list(self.columns))


@dataclass(frozen=True)
class FittedStep:
    step: TransformStep
    parameters: StepParameters


@dataclass(frozen=True)
class _FitState:
    fitted_steps: Tuple[FittedStep, ...]
    input_kinds: Tuple[Tuple[str, ColumnKind], ...]
    output_columns: Tuple[str, ...]
    reports: Tuple[StepReport, ...]


def _splice(
    frame: pd.DataFrame,
    kinds: Dict[str, ColumnKind],
    column: str,
    output: pd.DataFrame,
    output_kind: ColumnKind,
) -> Tuple[pd.DataFrame, Dict[str, ColumnKind]]:
    """Replace ``column`` with the step output.

    A single same-named output replaces the column in place; anything else is
    appended at the end after dropping the input column.
    """
    kinds = dict(kinds)
    if list(output.columns) == [column]:
        frame = frame.copy()
        frame[column] = output[column]
        kinds[column] = output_kind
        return frame, kinds

    clashes = [c for c in output.columns if c in frame.columns and c != column]
    if clashes:
        raise SchemaMismatch(
            f"Step output would overwrite existing column(s): {clashes}",
            column_name=column,
        )
    frame = pd.concat([frame.drop(columns=[column]), output], axis=1)
    del kinds[column]
    for name in output.columns:
        kinds[name] = output_kind
    return frame, kinds


class Pipeline:
    """Ordered feature recipe with a fit/apply lifecycle.

    Args:
        steps: Steps to run, in order. Step names must be unique.
    """

    def __init__(self, steps: Sequence[TransformStep] = ()):
        names = [s.name for s in steps]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise InvalidParameter(
                f"Step names must be unique, duplicated: {duplicates}"
            )
        self._steps: Tuple[TransformStep, ...] = tuple(steps)
        self._state: Optional[_FitState] = None

    # ------------------------------------------------------------------
    # Step list
    # ------------------------------------------------------------------

    @property
    def steps(self) -> Tuple[TransformStep, ...]:
        return self._steps

    @property
    def step_names(self) -> List[str]:
        return [s.name for s in self._steps]

    def append(self, step: TransformStep) -> "Pipeline":
        """New unfit pipeline with ``step`` added at the end."""
        return Pipeline(self._steps + (step,))

    def insert(self, index: int, step: TransformStep) -> "Pipeline":
        """New unfit pipeline with ``step`` inserted before position ``index``."""
        steps = list(self._steps)
        steps.insert(index, step)
        return Pipeline(steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        status = "fit" if self.is_fit else "unfit"
        return f"Pipeline(steps={self.step_names}, {status})"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_fit(self) -> bool:
        return self._state is not None

    def fit(self, dataset: Dataset) -> "Pipeline":
        """Learn every step's parameters from ``dataset``.

        Steps see the columns as transformed by the steps before them. On
        success the previous parameters, if any, are replaced as a whole; on
        failure they are left untouched.

        Returns:
            self

        Raises:
            EmptyInput: If the dataset has no rows.
            SchemaMismatch: If a step's column is missing or of the wrong
                kind, or a nominal column is left unencoded.
        """
        if len(dataset) == 0:
            raise EmptyInput("Cannot fit a pipeline on an empty dataset")

        t0 = time.time()
        frame = dataset.features
        kinds = dataset.feature_kinds
        input_kinds = tuple(kinds.items())
        fitted: List[FittedStep] = []
        reports: List[StepReport] = []

        logger.info(f"fit | {len(self._steps)} step(s) on {len(dataset):,} rows")

        for step in self._steps:
            s0 = time.time()
            column = self._column_for(step, frame, kinds)
            parameters, output = step.fit_apply(column)
            frame, kinds = _splice(frame, kinds, step.column, output, step.output_kind)

            fitted.append(FittedStep(step=step, parameters=parameters))
            report = StepReport(
                step_name=step.name,
                step_type=step.step_type,
                input_column=step.column,
                output_columns=list(output.columns),
                parameters=parameters,
                duration_seconds=round(time.time() - s0, 4),
            )
            reports.append(report)
            logger.debug(f"fit | {report.summary()}")

        unencoded = [c for c, k in kinds.items() if k != ColumnKind.NUMERIC]
        if unencoded:
            raise SchemaMismatch(
                f"Recipe leaves non-numeric column(s) unencoded: {unencoded}",
                column_name=unencoded[0],
            )

        self._state = _FitState(
            fitted_steps=tuple(fitted),
            input_kinds=input_kinds,
            output_columns=tuple(frame.columns),
            reports=tuple(reports),
        )
        logger.info(
            f"fit | {len(frame.columns)} output column(s) in {time.time() - t0:.2f}s"
        )
        return self

    def apply(self, dataset: Union[Dataset, pd.DataFrame]) -> NumericMatrix:
        """Transform ``dataset`` with the fitted parameters.

        Accepts a Dataset or a bare feature DataFrame (e.g. live records with
        no outcome). Only per-row values of the fit-time columns are read.

        Raises:
            PipelineNotFit: If fit() has not been called.
            SchemaMismatch: If a fit-time column is absent or of another kind.
        """
        state = self._state
        if state is None:
            raise PipelineNotFit("apply() called before fit()")

        input_kinds = dict(state.input_kinds)
        if isinstance(dataset, Dataset):
            source = dataset.frame
            self._check_kinds(input_kinds, dataset.schema)
        else:
            source = dataset

        missing = [c for c in input_kinds if c not in source.columns]
        if missing:
            raise SchemaMismatch(
                f"Dataset lacks fit-time column(s): {missing}",
                column_name=missing[0],
            )

        frame = source[list(input_kinds)].reset_index(drop=True)
        kinds = input_kinds
        for fitted in state.fitted_steps:
            step = fitted.step
            output = step.apply(fitted.parameters, frame[step.column])
            frame, kinds = _splice(frame, kinds, step.column, output, step.output_kind)

        values = frame[list(state.output_columns)].to_numpy(dtype=float)
        return NumericMatrix(columns=state.output_columns, values=values)

    def fit_apply(self, dataset: Dataset) -> NumericMatrix:
        """Convenience: fit on ``dataset`` then apply to it."""
        return self.fit(dataset).apply(dataset)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def _require_state(self) -> _FitState:
        state = self._state
        if state is None:
            raise PipelineNotFit("Pipeline has not been fit")
        return state

    @property
    def output_columns(self) -> Tuple[str, ...]:
        return self._require_state().output_columns

    @property
    def parameters(self) -> List[Tuple[TransformStep, StepParameters]]:
        """Ordered (step, parameters) pairs learned by the last fit."""
        return [(f.step, f.parameters) for f in self._require_state().fitted_steps]

    @property
    def step_reports(self) -> List[StepReport]:
        return list(self._require_state().reports)

    def describe(self) -> pd.DataFrame:
        """One row per step: name, type, column, outputs and parameters."""
        return pd.DataFrame([
            {
                "step": r.step_name,
                "type": r.step_type,
                "column": r.input_column,
                "n_outputs": r.n_output,
                "outputs": ", ".join(r.output_columns),
                "parameters": r.parameters.to_dict(),
            }
            for r in self.step_reports
        ])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _column_for(
        step: TransformStep, frame: pd.DataFrame, kinds: Mapping[str, ColumnKind]
    ) -> pd.Series:
        if step.column not in frame.columns:
            raise SchemaMismatch(
                f"Step '{step.name}' needs a column that is not present",
                column_name=step.column,
            )
        if kinds[step.column] != step.input_kind:
            raise SchemaMismatch(
                f"Step '{step.name}' expects a {step.input_kind.value} column, "
                f"got {kinds[step.column].value}",
                column_name=step.column,
            )
        return frame[step.column]

    @staticmethod
    def _check_kinds(
        expected: Mapping[str, ColumnKind], schema: Mapping[str, ColumnKind]
    ) -> None:
        changed = [c for c, k in expected.items() if c in schema and schema[c] != k]
        if changed:
            raise SchemaMismatch(
                f"Column kind(s) differ from fit time: {changed}",
                column_name=changed[0],
            )
