"""
Custom Exceptions for the Churn Recipe

Every error is raised where it is detected and propagated to the caller
unrecovered. No step substitutes a fallback value for an undefined statistic.
"""

from typing import Any, Dict, Optional


class ChurnRecipeError(Exception):
    """
    Base exception for all churn recipe errors.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize the exception.

        Args:
            message: Error message
            details: Additional error details
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        result = self.message
        if self.details:
            result += f" | Details: {self.details}"
        if self.cause:
            result += f" | Caused by: {self.cause}"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None
        }


class ConfigurationError(ChurnRecipeError):
    """
    Raised when the configuration cannot be loaded or validated.

    Examples:
    - Invalid YAML
    - Unknown step type
    - Field outside its allowed range
    """
    pass


class InvalidParameter(ChurnRecipeError, ValueError):
    """
    Raised for bad call parameters.

    Examples:
    - Train fraction outside (0, 1)
    - Bin count below 2
    - Sequences of different length passed to the metrics engine
    """
    pass


class ColumnError(ChurnRecipeError):
    """Base class for errors tied to a single column."""

    def __init__(
        self,
        message: str,
        column_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.column_name = column_name

    def __str__(self) -> str:
        result = super().__str__()
        if self.column_name:
            result += f" | Column: {self.column_name}"
        return result


class DegenerateColumn(ColumnError):
    """
    Raised when a statistic is undefined for a column.

    Examples:
    - Zero standard deviation
    - Fewer distinct values than requested bins
    - A single outcome class when computing AUC
    """
    pass


class NonPositiveValue(ColumnError):
    """Raised when a log transform meets a value <= 0."""

    def __init__(
        self,
        message: str,
        column_name: Optional[str] = None,
        n_offending: int = 0,
        **kwargs
    ):
        super().__init__(message, column_name=column_name, **kwargs)
        self.n_offending = n_offending


class SchemaMismatch(ColumnError):
    """
    Raised when a dataset does not match what a step expects.

    Examples:
    - Column missing at apply time
    - Numeric step declared on a nominal column
    - Nominal column left unencoded at the end of the recipe
    """
    pass


class PipelineNotFit(ChurnRecipeError, RuntimeError):
    """Raised when apply is called on a pipeline that was never fit."""
    pass


class EmptyInput(ChurnRecipeError):
    """Raised when an operation receives zero rows."""
    pass
