"""
Tests for Custom Exceptions

Tests exception attributes, inheritance, and serialization.
"""

import pytest

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


class TestChurnRecipeError:
    """Test suite for the base exception."""

    def test_message_stored(self):
        error = ChurnRecipeError("Something broke")

        assert error.message == "Something broke"
        assert "Something broke" in str(error)

    def test_details_and_cause_in_str(self):
        original = ValueError("root cause")
        error = ChurnRecipeError("Wrapper", details={"rows": 3}, cause=original)

        text = str(error)
        assert "rows" in text
        assert "root cause" in text
        assert error.cause is original

    def test_to_dict(self):
        error = ChurnRecipeError("Test error", details={"key": "value"})

        result = error.to_dict()

        assert result["type"] == "ChurnRecipeError"
        assert result["message"] == "Test error"
        assert result["details"] == {"key": "value"}
        assert result["cause"] is None


class TestHierarchy:
    """Every error kind derives from the base class."""

    @pytest.mark.parametrize("error_class", [
        ConfigurationError,
        InvalidParameter,
        DegenerateColumn,
        NonPositiveValue,
        SchemaMismatch,
        PipelineNotFit,
        EmptyInput,
    ])
    def test_inherits_base(self, error_class):
        error = error_class("boom")

        assert isinstance(error, ChurnRecipeError)
        with pytest.raises(ChurnRecipeError):
            raise error

    def test_invalid_parameter_is_value_error(self):
        assert isinstance(InvalidParameter("bad"), ValueError)

    def test_pipeline_not_fit_is_runtime_error(self):
        assert isinstance(PipelineNotFit("unfit"), RuntimeError)

    def test_column_errors_share_base(self):
        for error_class in (DegenerateColumn, NonPositiveValue, SchemaMismatch):
            assert issubclass(error_class, ColumnError)


class TestColumnErrors:
    """Column-level errors carry the column name."""

    def test_degenerate_column_name_in_str(self):
        error = DegenerateColumn("zero variance", column_name="tenure")

        assert error.column_name == "tenure"
        assert "Column: tenure" in str(error)

    def test_non_positive_value_counts(self):
        error = NonPositiveValue("log undefined", column_name="TotalCharges", n_offending=2)

        assert error.n_offending == 2
        assert error.column_name == "TotalCharges"

    def test_column_name_optional(self):
        error = SchemaMismatch("mismatch")

        assert error.column_name is None
        assert "Column" not in str(error)
