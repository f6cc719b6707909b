"""
Pydantic Configuration Schema

Defines all configuration models for the churn recipe.
All fields have sensible defaults matching the telco churn analysis.
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field, model_validator


ALL_NUMERIC = "all_numeric"
ALL_NOMINAL = "all_nominal"


class DataConfig(BaseModel):
    """Data source configuration."""

    model_config = {"frozen": True}

    input_path: str = "data/WA_Fn-UseC_-Telco-Customer-Churn.csv"
    outcome_column: str = "Churn"
    positive_label: str = "Yes"
    negative_label: str = "No"
    id_columns: List[str] = Field(default_factory=lambda: ["customerID"])
    drop_missing: bool = True


class SplittingConfig(BaseModel):
    """Train/test splitting configuration."""

    model_config = {"frozen": True}

    train_fraction: float = Field(default=0.80, gt=0.0, lt=1.0)
    seed: int = 100


class RecipeStepConfig(BaseModel):
    """One declared recipe step.

    ``columns`` holds column names or one of the selectors
    ``all_numeric`` / ``all_nominal``, expanded against the schema when the
    pipeline is built.
    """

    model_config = {"frozen": True}

    type: Literal["discretize", "log", "encode", "center_scale"]
    columns: List[str] = Field(min_length=1)
    bin_count: Optional[int] = Field(default=None, ge=2)
    base: Optional[float] = Field(default=None, gt=0.0)

    @model_validator(mode="after")
    def bin_count_matches_type(self) -> "RecipeStepConfig":
        if self.type == "discretize" and self.bin_count is None:
            raise ValueError("discretize steps require bin_count")
        if self.type != "discretize" and self.bin_count is not None:
            raise ValueError(f"bin_count is only valid for discretize, not {self.type}")
        if self.type != "log" and self.base is not None:
            raise ValueError(f"base is only valid for log, not {self.type}")
        return self


def _default_recipe_steps() -> List[RecipeStepConfig]:
    return [
        RecipeStepConfig(type="discretize", columns=["tenure"], bin_count=6),
        RecipeStepConfig(type="log", columns=["TotalCharges"]),
        RecipeStepConfig(type="encode", columns=[ALL_NOMINAL]),
        RecipeStepConfig(type="center_scale", columns=[ALL_NUMERIC]),
    ]


class RecipeConfig(BaseModel):
    """Ordered feature recipe."""

    model_config = {"frozen": True}

    steps: List[RecipeStepConfig] = Field(default_factory=_default_recipe_steps)


class EvaluationConfig(BaseModel):
    """Model evaluation configuration."""

    model_config = {"frozen": True}

    beta: float = Field(default=1.0, gt=0.0)
    threshold: float = Field(default=0.5, ge=0.0, le=1.0)


class ClassifierConfig(BaseModel):
    """Keyword arguments for the scikit-learn classifier used by the driver script."""

    model_config = {"frozen": True}

    params: Dict[str, Any] = Field(
        default_factory=lambda: {
            "hidden_layer_sizes": [16, 16],
            "activation": "relu",
            "solver": "adam",
            "batch_size": 50,
            "max_iter": 35,
            "early_stopping": True,
            "validation_fraction": 0.30,
            "random_state": 100,
        }
    )


class ReproducibilityConfig(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True}

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[str] = None


class ChurnConfig(BaseModel):
    """Top-level configuration combining all sections."""

    model_config = {"frozen": True}

    data: DataConfig = Field(default_factory=DataConfig)
    splitting: SplittingConfig = Field(default_factory=SplittingConfig)
    recipe: RecipeConfig = Field(default_factory=RecipeConfig)
    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    reproducibility: ReproducibilityConfig = Field(default_factory=ReproducibilityConfig)
