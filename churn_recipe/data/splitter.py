"""
Data Splitter

Splits a Dataset into train and test partitions with a seeded, per-record
random draw. No stratification: the realized outcome rates of the two
partitions may differ from the full dataset.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple
import logging
import time

import numpy as np

from churn_recipe.config.schema import SplittingConfig
from churn_recipe.core.exceptions import InvalidParameter
from churn_recipe.data.dataset import Dataset

logger = logging.getLogger(__name__)

STEP_NAME = "split"


@dataclass(frozen=True, eq=False)
class Split:
    """Disjoint train/test partition of one Dataset."""

    train: Dataset
    test: Dataset
    metadata: Dict[str, Any] = field(default_factory=dict)


def split(
    dataset: Dataset, train_fraction: float, seed: int
) -> Tuple[Dataset, Dataset]:
    """Assign each record to train with probability ``train_fraction``.

    Identical (dataset, train_fraction, seed) always gives the identical
    partition. Record order is preserved within each partition.

    Raises:
        InvalidParameter: If train_fraction is not strictly between 0 and 1.
    """
    if not 0.0 < train_fraction < 1.0:
        raise InvalidParameter(
            f"train_fraction must be in (0, 1), got {train_fraction}",
            details={"train_fraction": train_fraction},
        )

    rng = np.random.default_rng(seed)
    in_train = rng.random(len(dataset)) < train_fraction
    positions = np.arange(len(dataset))

    return dataset.take(positions[in_train]), dataset.take(positions[~in_train])


class DataSplitter:
    """Splits a Dataset into train/test with logging and split metadata.

    Args:
        splitting_config: SplittingConfig with train_fraction and seed.
    """

    def __init__(self, splitting_config: SplittingConfig):
        self.train_fraction = splitting_config.train_fraction
        self.seed = splitting_config.seed

    def split(self, dataset: Dataset) -> Split:
        t0 = time.time()
        train, test = split(dataset, self.train_fraction, self.seed)

        logger.info(
            f"{STEP_NAME} | Train: {len(train):,} rows "
            f"(positive rate: {_positive_rate(train):.2%})"
        )
        logger.info(
            f"{STEP_NAME} | Test: {len(test):,} rows "
            f"(positive rate: {_positive_rate(test):.2%})"
        )

        metadata = {
            "train_fraction": self.train_fraction,
            "seed": self.seed,
            "train_count": len(train),
            "test_count": len(test),
            "train_positive_rate": round(_positive_rate(train), 4),
            "test_positive_rate": round(_positive_rate(test), 4),
            "duration_seconds": round(time.time() - t0, 3),
        }
        return Split(train=train, test=test, metadata=metadata)


def _positive_rate(dataset: Dataset) -> float:
    if len(dataset) == 0:
        return 0.0
    return float(dataset.labels.mean())
