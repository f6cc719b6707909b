"""
Data Module

Typed datasets, loading and train/test splitting.
"""

from churn_recipe.data.dataset import ColumnKind, Dataset, infer_schema
from churn_recipe.data.loader import load_dataset
from churn_recipe.data.splitter import DataSplitter, Split, split

__all__ = [
    "ColumnKind",
    "Dataset",
    "infer_schema",
    "load_dataset",
    "DataSplitter",
    "Split",
    "split",
]
