"""
Config Module

Pydantic-based configuration for the churn recipe.
"""

from churn_recipe.config.schema import (
    ALL_NOMINAL,
    ALL_NUMERIC,
    ChurnConfig,
    DataConfig,
    SplittingConfig,
    RecipeStepConfig,
    RecipeConfig,
    EvaluationConfig,
    ClassifierConfig,
    ReproducibilityConfig,
)
from churn_recipe.config.loader import load_config, save_config

__all__ = [
    "ALL_NOMINAL",
    "ALL_NUMERIC",
    "ChurnConfig",
    "DataConfig",
    "SplittingConfig",
    "RecipeStepConfig",
    "RecipeConfig",
    "EvaluationConfig",
    "ClassifierConfig",
    "ReproducibilityConfig",
    "load_config",
    "save_config",
]
