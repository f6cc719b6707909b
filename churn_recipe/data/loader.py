"""
Data Loader

Reads the raw customer table, drops incomplete rows, maps the textual outcome
to 0/1 and resolves column kinds.
"""

from pathlib import Path
from typing import Union
import logging

import numpy as np
import pandas as pd

from churn_recipe.config.schema import DataConfig
from churn_recipe.core.exceptions import EmptyInput, InvalidParameter, SchemaMismatch
from churn_recipe.data.dataset import Dataset, infer_schema

logger = logging.getLogger(__name__)

STEP_NAME = "load"


def load_dataset(
    source: Union[str, Path, pd.DataFrame],
    data_config: DataConfig,
) -> Dataset:
    """Load a CSV file (or an in-memory frame) into a typed Dataset.

    Args:
        source: Path to a CSV file with a header row, or a DataFrame.
        data_config: Column names and outcome labels.

    Returns:
        Dataset with a 0/1 outcome column and resolved schema.

    Raises:
        SchemaMismatch: If the outcome column is absent.
        InvalidParameter: If the outcome holds values other than the two labels.
        EmptyInput: If no complete rows remain.
    """
    if isinstance(source, pd.DataFrame):
        df = source.copy()
    else:
        logger.info(f"{STEP_NAME} | Reading {source}")
        df = pd.read_csv(source)

    outcome = data_config.outcome_column
    if outcome not in df.columns:
        raise SchemaMismatch("Outcome column not found", column_name=outcome)

    id_cols = [c for c in data_config.id_columns if c in df.columns]
    if id_cols:
        df = df.drop(columns=id_cols)

    # Blank cells in numeric text columns (e.g. TotalCharges) count as missing
    df = df.replace(r"^\s*$", np.nan, regex=True)
    for col in df.columns:
        if col == outcome or pd.api.types.is_numeric_dtype(df[col]):
            continue
        # Text columns (object or str dtype) whose every value parses as a number
        converted = pd.to_numeric(df[col].astype(object), errors="coerce")
        if converted.notna().sum() == df[col].notna().sum():
            df[col] = converted.to_numpy(dtype=float, na_value=np.nan)

    if data_config.drop_missing:
        n_before = len(df)
        df = df.dropna().reset_index(drop=True)
        n_dropped = n_before - len(df)
        if n_dropped:
            logger.info(f"{STEP_NAME} | Dropped {n_dropped:,} rows with missing values")

    if len(df) == 0:
        raise EmptyInput("No complete rows left after loading")

    labels = df[outcome].astype(str)
    allowed = {data_config.positive_label, data_config.negative_label}
    unexpected = sorted(set(labels) - allowed)
    if unexpected:
        raise InvalidParameter(
            f"Outcome column '{outcome}' has unexpected values: {unexpected}",
            details={"allowed": sorted(allowed)},
        )
    df[outcome] = (labels == data_config.positive_label).astype(int)

    schema = infer_schema(df, outcome)
    dataset = Dataset.from_frame(df, outcome, schema=schema)

    logger.info(
        f"{STEP_NAME} | {len(dataset):,} rows, {len(dataset.feature_kinds)} features "
        f"(positive rate: {dataset.labels.mean():.2%})"
    )
    return dataset
