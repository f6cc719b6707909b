"""
Pipeline Builder

Turns a RecipeConfig into an explicit Pipeline, one step per column.
The selectors ``all_numeric`` and ``all_nominal`` are expanded against the
declared schema, tracking the kinds produced by earlier steps: a column
discretized by an earlier step counts as nominal, a column consumed by an
earlier encode step is gone. Indicator columns are named from fit-time
vocabularies, so no selector ever reaches them.
"""

from typing import Dict, List, Mapping
import logging

from churn_recipe.config.schema import ALL_NOMINAL, ALL_NUMERIC, RecipeConfig, RecipeStepConfig
from churn_recipe.core.exceptions import SchemaMismatch
from churn_recipe.data.dataset import ColumnKind
from churn_recipe.pipeline.base import TransformStep
from churn_recipe.pipeline.recipe import Pipeline
from churn_recipe.pipeline.steps import STEP_TYPES, CategoricalEncode, Discretize, LogTransform

logger = logging.getLogger(__name__)

_SELECTORS = {
    ALL_NUMERIC: ColumnKind.NUMERIC,
    ALL_NOMINAL: ColumnKind.NOMINAL,
}


def _expand_columns(
    step_config: RecipeStepConfig, kinds: Mapping[str, ColumnKind]
) -> List[str]:
    columns: List[str] = []
    for entry in step_config.columns:
        if entry in _SELECTORS:
            wanted = _SELECTORS[entry]
            matched = [c for c, k in kinds.items() if k == wanted]
        elif entry in kinds:
            matched = [entry]
        else:
            raise SchemaMismatch(
                f"'{step_config.type}' step refers to an unknown column",
                column_name=entry,
            )
        for column in matched:
            if column not in columns:
                columns.append(column)
    return columns


def _make_step(step_config: RecipeStepConfig, column: str) -> TransformStep:
    if step_config.type == Discretize.step_type:
        return Discretize(column, bin_count=step_config.bin_count)
    if step_config.type == LogTransform.step_type and step_config.base is not None:
        return LogTransform(column, base=step_config.base)
    return STEP_TYPES[step_config.type](column)


def build_pipeline(
    recipe_config: RecipeConfig, feature_kinds: Mapping[str, ColumnKind]
) -> Pipeline:
    """Build an unfit Pipeline from a recipe declaration.

    Args:
        recipe_config: Ordered step declarations.
        feature_kinds: Column kinds of the input features (outcome excluded).

    Returns:
        Unfit Pipeline with one step per (declaration, column).

    Raises:
        SchemaMismatch: If a declaration names an unknown column.
    """
    kinds: Dict[str, ColumnKind] = {
        c: k for c, k in feature_kinds.items() if k != ColumnKind.BINARY_OUTCOME
    }
    steps: List[TransformStep] = []

    for step_config in recipe_config.steps:
        columns = _expand_columns(step_config, kinds)
        if not columns:
            logger.warning(f"build | '{step_config.type}' step selects no columns")
        for column in columns:
            step = _make_step(step_config, column)
            steps.append(step)
            if isinstance(step, CategoricalEncode):
                del kinds[column]
            else:
                kinds[column] = step.output_kind

    logger.info(f"build | {len(steps)} step(s): {[s.name for s in steps]}")
    return Pipeline(steps)
