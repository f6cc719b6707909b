"""
Pipeline Module

Recipe steps, the fit/apply Pipeline and its config-driven builder.
"""

from churn_recipe.pipeline.base import StepParameters, StepReport, TransformStep
from churn_recipe.pipeline.steps import (
    STEP_TYPES,
    BinThresholds,
    CategoricalEncode,
    CategoryVocabulary,
    CenterScale,
    Discretize,
    LogParameters,
    LogTransform,
    ScaleParameters,
)
from churn_recipe.pipeline.recipe import FittedStep, NumericMatrix, Pipeline
from churn_recipe.pipeline.builder import build_pipeline

__all__ = [
    "StepParameters",
    "StepReport",
    "TransformStep",
    "STEP_TYPES",
    "BinThresholds",
    "CategoricalEncode",
    "CategoryVocabulary",
    "CenterScale",
    "Discretize",
    "LogParameters",
    "LogTransform",
    "ScaleParameters",
    "FittedStep",
    "NumericMatrix",
    "Pipeline",
    "build_pipeline",
]
