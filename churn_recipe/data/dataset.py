"""
Dataset Model

Typed tabular container shared by the splitter, the recipe and the evaluation
code. Column kinds are resolved once, when the dataset is built.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from churn_recipe.core.exceptions import InvalidParameter, SchemaMismatch


class ColumnKind(str, Enum):
    """Semantic type of a column."""

    NUMERIC = "numeric"
    NOMINAL = "nominal"
    BINARY_OUTCOME = "binary_outcome"


@dataclass(frozen=True, eq=False)
class Dataset:
    """Rows over a fixed schema with one 0/1 outcome column.

    Attributes:
        frame: The data. The outcome column holds 0/1 integers.
        schema: Column name -> ColumnKind for every column of ``frame``.
        outcome_column: Name of the BINARY_OUTCOME column.
    """

    frame: pd.DataFrame
    schema: Mapping[str, ColumnKind]
    outcome_column: str

    def __post_init__(self) -> None:
        missing = [c for c in self.frame.columns if c not in self.schema]
        extra = [c for c in self.schema if c not in self.frame.columns]
        if missing or extra:
            raise SchemaMismatch(
                "Schema does not match frame columns",
                details={"untyped_columns": missing, "absent_columns": extra},
            )
        if self.schema.get(self.outcome_column) != ColumnKind.BINARY_OUTCOME:
            raise SchemaMismatch(
                "Outcome column must be typed as binary outcome",
                column_name=self.outcome_column,
            )
        outcomes = [c for c, k in self.schema.items() if k == ColumnKind.BINARY_OUTCOME]
        if len(outcomes) != 1:
            raise SchemaMismatch(
                f"Expected exactly one outcome column, found {len(outcomes)}",
                details={"outcome_columns": outcomes},
            )

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        outcome_column: str,
        schema: Optional[Mapping[str, ColumnKind]] = None,
    ) -> "Dataset":
        """Build a Dataset, inferring kinds from dtypes when no schema is given.

        The outcome column must already hold 0/1 values.
        """
        if outcome_column not in frame.columns:
            raise SchemaMismatch("Outcome column not found", column_name=outcome_column)
        values = set(pd.unique(frame[outcome_column]))
        if not values.issubset({0, 1}):
            raise InvalidParameter(
                f"Outcome column '{outcome_column}' must be binary (0/1). "
                f"Found values: {sorted(map(str, values))}"
            )
        if schema is None:
            schema = infer_schema(frame, outcome_column)
        frame = frame.reset_index(drop=True)
        frame[outcome_column] = frame[outcome_column].astype(int)
        return cls(frame=frame, schema=dict(schema), outcome_column=outcome_column)

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def feature_kinds(self) -> Dict[str, ColumnKind]:
        """Kinds of every non-outcome column, in frame order."""
        return {
            c: self.schema[c] for c in self.frame.columns if c != self.outcome_column
        }

    @property
    def features(self) -> pd.DataFrame:
        """Copy of the frame without the outcome column."""
        return self.frame.drop(columns=[self.outcome_column])

    @property
    def labels(self) -> np.ndarray:
        """Outcome vector as 0/1 integers."""
        return self.frame[self.outcome_column].to_numpy(dtype=int)

    def columns_of_kind(self, kind: ColumnKind) -> List[str]:
        return [c for c, k in self.feature_kinds.items() if k == kind]

    def take(self, indices: Sequence[int]) -> "Dataset":
        """New Dataset holding the given row positions, in the given order."""
        subset = self.frame.iloc[list(indices)].reset_index(drop=True)
        return Dataset(frame=subset, schema=self.schema, outcome_column=self.outcome_column)


def infer_schema(frame: pd.DataFrame, outcome_column: str) -> Dict[str, ColumnKind]:
    """Map numeric dtypes to NUMERIC, everything else to NOMINAL."""
    schema: Dict[str, ColumnKind] = {}
    for col in frame.columns:
        if col == outcome_column:
            schema[col] = ColumnKind.BINARY_OUTCOME
        elif pd.api.types.is_numeric_dtype(frame[col]) and not pd.api.types.is_bool_dtype(frame[col]):
            schema[col] = ColumnKind.NUMERIC
        else:
            schema[col] = ColumnKind.NOMINAL
    return schema
