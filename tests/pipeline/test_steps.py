"""
Unit Tests for Recipe Steps

Tests each step independently against the fit/apply contract.
"""

import math

import numpy as np
import pandas as pd
import pytest

from churn_recipe.core.exceptions import DegenerateColumn, InvalidParameter, NonPositiveValue
from churn_recipe.data.dataset import ColumnKind
from churn_recipe.pipeline.steps import (
    STEP_TYPES,
    BinThresholds,
    CategoricalEncode,
    CategoryVocabulary,
    CenterScale,
    Discretize,
    LogTransform,
    ScaleParameters,
)


# ===================================================================
# Discretize
# ===================================================================

class TestDiscretize:
    """Equal-frequency binning."""

    def test_thresholds_are_interior_quantiles(self):
        column = pd.Series(np.arange(1.0, 101.0))
        step = Discretize("x", bin_count=4)

        params = step.fit(column)

        assert isinstance(params, BinThresholds)
        assert len(params.thresholds) == 3
        assert list(params.thresholds) == pytest.approx(
            list(np.quantile(column, [0.25, 0.5, 0.75]))
        )
        assert list(params.thresholds) == sorted(params.thresholds)

    def test_equal_frequency(self):
        column = pd.Series(np.arange(1.0, 121.0))
        step = Discretize("x", bin_count=6)

        params, out = step.fit_apply(column)

        counts = out["x"].value_counts()
        assert len(counts) == 6
        assert counts.min() >= 19 and counts.max() <= 21

    def test_labels_and_outside_values(self):
        step = Discretize("x", bin_count=3)
        params = step.fit(pd.Series([1.0, 2.0, 3.0, 4.0, 5.0, 6.0]))

        out = step.apply(params, pd.Series([-100.0, 100.0]))

        assert list(out["x"]) == ["bin1", "bin3"]

    def test_tie_at_cut_point_goes_to_lower_bin(self):
        step = Discretize("x", bin_count=2)
        params = step.fit(pd.Series([1.0, 2.0, 3.0, 4.0, 5.0]))

        assert params.thresholds == (3.0,)
        out = step.apply(params, pd.Series([3.0, 3.0001]))
        assert list(out["x"]) == ["bin1", "bin2"]

    def test_zero_padded_labels(self):
        step = Discretize("x", bin_count=12)

        params = step.fit(pd.Series(np.arange(24.0)))

        assert params.labels[0] == "bin01"
        assert params.labels[-1] == "bin12"
        assert list(params.labels) == sorted(params.labels)

    def test_output_is_nominal(self):
        assert Discretize.output_kind == ColumnKind.NOMINAL
        assert Discretize.input_kind == ColumnKind.NUMERIC

    def test_too_few_distinct_values(self):
        step = Discretize("x", bin_count=4)

        with pytest.raises(DegenerateColumn) as exc_info:
            step.fit(pd.Series([1.0, 1.0, 2.0, 3.0, 3.0]))

        assert exc_info.value.column_name == "x"

    def test_bin_count_below_two(self):
        with pytest.raises(InvalidParameter):
            Discretize("x", bin_count=1)

    def test_apply_keeps_index(self):
        step = Discretize("x", bin_count=2)
        params = step.fit(pd.Series([1.0, 2.0, 3.0, 4.0]))
        column = pd.Series([1.0, 4.0], index=[10, 20])

        out = step.apply(params, column)

        assert list(out.index) == [10, 20]


# ===================================================================
# LogTransform
# ===================================================================

class TestLogTransform:
    """Logarithm with strict positivity."""

    def test_exp_recovers_input(self):
        values = pd.Series([0.5, 1.0, 18.8, 8684.8])
        step = LogTransform("x")

        _, out = step.fit_apply(values)

        np.testing.assert_allclose(np.exp(out["x"]), values)

    def test_custom_base(self):
        step = LogTransform("x", base=10.0)

        _, out = step.fit_apply(pd.Series([1.0, 10.0, 1000.0]))

        np.testing.assert_allclose(out["x"], [0.0, 1.0, 3.0])

    @pytest.mark.parametrize("bad", [0.0, -3.5])
    def test_fit_rejects_non_positive(self, bad):
        step = LogTransform("x")

        with pytest.raises(NonPositiveValue) as exc_info:
            step.fit(pd.Series([1.0, bad, 2.0]))

        assert exc_info.value.n_offending == 1

    def test_apply_rejects_non_positive(self):
        step = LogTransform("x")
        params = step.fit(pd.Series([1.0, 2.0]))

        with pytest.raises(NonPositiveValue):
            step.apply(params, pd.Series([3.0, 0.0]))

    def test_invalid_base(self):
        with pytest.raises(InvalidParameter):
            LogTransform("x", base=1.0)

    def test_default_base_recorded(self):
        params = LogTransform("x").fit(pd.Series([2.0]))

        assert params.base == math.e


# ===================================================================
# CategoricalEncode
# ===================================================================

class TestCategoricalEncode:
    """Indicator encoding with a lexical reference category."""

    def test_k_minus_one_columns(self):
        column = pd.Series(["Two year", "Month-to-month", "One year", "One year"])
        step = CategoricalEncode("Contract")

        params = step.fit(column)

        assert isinstance(params, CategoryVocabulary)
        assert params.reference == "Month-to-month"
        assert params.categories == ("One year", "Two year")
        assert params.output_columns == ("Contract_One year", "Contract_Two year")

    def test_indicator_values(self):
        column = pd.Series(["b", "a", "c", "b"])
        step = CategoricalEncode("g")

        _, out = step.fit_apply(column)

        assert list(out.columns) == ["g_b", "g_c"]
        assert out.to_numpy().tolist() == [[1.0, 0.0], [0.0, 0.0], [0.0, 1.0], [1.0, 0.0]]

    def test_reference_and_unseen_are_all_zero(self):
        step = CategoricalEncode("g")
        params = step.fit(pd.Series(["a", "b", "c"]))

        out = step.apply(params, pd.Series(["a", "zzz"]))

        assert out.to_numpy().tolist() == [[0.0, 0.0], [0.0, 0.0]]

    def test_columns_fixed_by_fit(self):
        step = CategoricalEncode("g")
        params = step.fit(pd.Series(["a", "b", "c"]))

        out = step.apply(params, pd.Series(["c", "c"]))

        assert list(out.columns) == ["g_b", "g_c"]

    def test_single_category_gives_no_columns(self):
        step = CategoricalEncode("g")

        _, out = step.fit_apply(pd.Series(["only", "only"]))

        assert out.shape == (2, 0)

    def test_accepts_nominal_only(self):
        assert CategoricalEncode.input_kind == ColumnKind.NOMINAL
        assert CategoricalEncode.output_kind == ColumnKind.NUMERIC


# ===================================================================
# CenterScale
# ===================================================================

class TestCenterScale:
    """Standardization with training statistics."""

    def test_fit_column_standardized(self):
        rng = np.random.default_rng(0)
        column = pd.Series(rng.normal(50.0, 12.0, 500))
        step = CenterScale("x")

        params, out = step.fit_apply(column)

        assert isinstance(params, ScaleParameters)
        assert out["x"].mean() == pytest.approx(0.0, abs=1e-9)
        assert out["x"].std(ddof=1) == pytest.approx(1.0)

    def test_uses_training_parameters(self):
        step = CenterScale("x")
        params = step.fit(pd.Series([2.0, 4.0, 6.0]))

        out = step.apply(params, pd.Series([4.0, 8.0]))

        assert params.mean == pytest.approx(4.0)
        assert params.std == pytest.approx(2.0)
        assert list(out["x"]) == pytest.approx([0.0, 2.0])

    def test_constant_column_scales_proportionally(self):
        train = pd.Series([1.0, 3.0, 5.0, 7.0])
        step = CenterScale("x")
        params = step.fit(train)
        sigma = params.std

        out = step.apply(params, pd.Series([sigma] * 3))

        expected = (sigma - params.mean) / sigma
        assert list(out["x"]) == pytest.approx([expected] * 3)

    def test_zero_variance(self):
        with pytest.raises(DegenerateColumn):
            CenterScale("x").fit(pd.Series([0.3, 0.3, 0.3]))

    def test_single_row(self):
        with pytest.raises(DegenerateColumn):
            CenterScale("x").fit(pd.Series([1.0]))


class TestStepRegistry:
    """Step type registry and naming."""

    def test_registry(self):
        assert set(STEP_TYPES) == {"discretize", "log", "encode", "center_scale"}

    def test_default_name(self):
        assert CenterScale("MonthlyCharges").name == "center_scale_MonthlyCharges"

    def test_custom_name(self):
        assert LogTransform("x", name="log_x_custom").name == "log_x_custom"

    def test_parameters_to_dict(self):
        params = ScaleParameters(mean=1.0, std=2.0)

        assert params.to_dict() == {"mean": 1.0, "std": 2.0}
