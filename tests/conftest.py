"""
Pytest Configuration and Shared Fixtures

Provides common fixtures for all test modules including:
- Synthetic raw customer tables shaped like the telco churn data
- Loaded datasets and a pre-computed split
- Temporary config files
"""

import sys
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd
import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


# ===================================================================
# CONFIGURATION FIXTURES
# ===================================================================

@pytest.fixture
def sample_config_dict() -> Dict[str, Any]:
    """Minimal valid config dict that can be loaded into ChurnConfig."""
    return {
        "data": {
            "input_path": "data/customers.csv",
            "outcome_column": "Churn",
            "positive_label": "Yes",
            "negative_label": "No",
            "id_columns": ["customerID"],
            "drop_missing": True,
        },
        "splitting": {"train_fraction": 0.8, "seed": 100},
        "recipe": {
            "steps": [
                {"type": "discretize", "columns": ["tenure"], "bin_count": 6},
                {"type": "log", "columns": ["TotalCharges"]},
                {"type": "encode", "columns": ["all_nominal"]},
                {"type": "center_scale", "columns": ["all_numeric"]},
            ]
        },
        "evaluation": {"beta": 1.0, "threshold": 0.5},
        "reproducibility": {"log_level": "DEBUG"},
    }


@pytest.fixture
def sample_config(sample_config_dict):
    """Create a ChurnConfig from the sample dict."""
    from churn_recipe.config.schema import ChurnConfig

    return ChurnConfig(**sample_config_dict)


@pytest.fixture
def tmp_config_yaml(tmp_path, sample_config_dict):
    """Write sample config to a temp YAML file and return its path."""
    import yaml

    config_path = tmp_path / "test_config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config_dict, f, default_flow_style=False)
    return config_path


# ===================================================================
# DATA FIXTURES
# ===================================================================

@pytest.fixture
def raw_customers() -> pd.DataFrame:
    """Raw customer table (400 rows) as it comes from the CSV export.

    Properties:
    - customerID identifier column
    - gender, Contract, InternetService, PaperlessBilling nominal text columns
    - SeniorCitizen 0/1 integers, tenure 1..72, MonthlyCharges > 0
    - TotalCharges stored as text with 3 blank cells (as in the real export)
    - Churn "Yes"/"No", more likely on month-to-month contracts
    """
    rng = np.random.default_rng(42)
    n = 400

    contract = rng.choice(["Month-to-month", "One year", "Two year"], n, p=[0.55, 0.25, 0.2])
    tenure = rng.integers(1, 73, n)
    monthly = np.round(rng.uniform(18.0, 118.0, n), 2)
    total = np.round(tenure * monthly * rng.uniform(0.9, 1.1, n), 2)

    churn_prob = np.where(contract == "Month-to-month", 0.45, 0.08)
    churn_prob = np.where(tenure < 12, churn_prob + 0.2, churn_prob)
    churn = np.where(rng.random(n) < churn_prob, "Yes", "No")

    total_text = total.astype(str).astype(object)
    total_text[[5, 77, 210]] = " "

    return pd.DataFrame({
        "customerID": [f"{i:04d}-CUST" for i in range(n)],
        "gender": rng.choice(["Female", "Male"], n),
        "SeniorCitizen": rng.choice([0, 1], n, p=[0.84, 0.16]),
        "Contract": contract,
        "InternetService": rng.choice(["DSL", "Fiber optic", "No"], n),
        "PaperlessBilling": rng.choice(["Yes", "No"], n),
        "tenure": tenure,
        "MonthlyCharges": monthly,
        "TotalCharges": total_text,
        "Churn": churn,
    })


@pytest.fixture
def churn_dataset(raw_customers):
    """raw_customers loaded through the data loader (397 complete rows)."""
    from churn_recipe.config.schema import DataConfig
    from churn_recipe.data.loader import load_dataset

    return load_dataset(raw_customers, DataConfig())


@pytest.fixture
def churn_split(churn_dataset):
    """80/20 split of churn_dataset with seed 100."""
    from churn_recipe.data.splitter import split

    return split(churn_dataset, 0.8, 100)


@pytest.fixture
def small_dataset():
    """Eight-row dataset with one numeric and one nominal feature."""
    from churn_recipe.data.dataset import ColumnKind, Dataset

    frame = pd.DataFrame({
        "charges": [10.0, 20.0, 30.0, 40.0, 50.0, 60.0, 70.0, 80.0],
        "plan": ["basic", "pro", "basic", "max", "pro", "basic", "max", "pro"],
        "churned": [0, 1, 0, 1, 0, 0, 1, 1],
    })
    schema = {
        "charges": ColumnKind.NUMERIC,
        "plan": ColumnKind.NOMINAL,
        "churned": ColumnKind.BINARY_OUTCOME,
    }
    return Dataset.from_frame(frame, "churned", schema=schema)
