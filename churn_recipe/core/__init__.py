"""
Churn Recipe - Core Package

Shared infrastructure:
- Custom exceptions
- Logging utilities
"""

from churn_recipe.core.logger import get_logger, setup_logging
from churn_recipe.core.exceptions import (
    ChurnRecipeError,
    ConfigurationError,
    InvalidParameter,
    ColumnError,
    DegenerateColumn,
    NonPositiveValue,
    SchemaMismatch,
    PipelineNotFit,
    EmptyInput,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Exceptions
    "ChurnRecipeError",
    "ConfigurationError",
    "InvalidParameter",
    "ColumnError",
    "DegenerateColumn",
    "NonPositiveValue",
    "SchemaMismatch",
    "PipelineNotFit",
    "EmptyInput",
]
