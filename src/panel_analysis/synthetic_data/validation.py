"""
Validation and sanity checks for generated panels.

This module checks the structural invariants of a panel (fully crossed,
one predictor per item, no missing values) and, when the latent
components are available, the additive response decomposition.
"""

import numpy as np
import pandas as pd

from panel_analysis.core.constants import (
    ITEM_COLUMN,
    PANEL_COLUMNS,
    PREDICTOR_COLUMN,
    RESPONSE_COLUMN,
    SUBJECT_COLUMN,
)
from panel_analysis.synthetic_data.data_models import (
    COMPONENT_COLUMNS,
    ITEM_OFFSET_COLUMN,
    SUBJECT_OFFSET_COLUMN,
    GeneratedPanel,
)


class ValidationError(Exception):
    """Raised when validation fails."""

    pass


def check_no_missing(data: pd.DataFrame) -> None:
    """
    Validate that all panel columns are present and complete.

    Raises:
        ValidationError: If a column is absent or has missing values.
    """
    missing_columns = [c for c in PANEL_COLUMNS if c not in data.columns]
    if missing_columns:
        raise ValidationError(f"Missing columns: {missing_columns}")

    n_missing = int(data[list(PANEL_COLUMNS)].isna().sum().sum())
    if n_missing > 0:
        raise ValidationError(f"Panel has {n_missing} missing values")


def check_crossed_design(data: pd.DataFrame) -> None:
    """
    Validate that every subject responds to every item exactly once.

    Raises:
        ValidationError: If any subject-item pair is absent or repeated,
            or if an item carries more than one predictor value.
    """
    n_subjects = data[SUBJECT_COLUMN].nunique()
    n_items = data[ITEM_COLUMN].nunique()

    if len(data) != n_subjects * n_items:
        raise ValidationError(
            f"Expected {n_subjects * n_items} records for "
            f"{n_subjects} subjects x {n_items} items, got {len(data)}"
        )

    pair_counts = data.groupby([SUBJECT_COLUMN, ITEM_COLUMN]).size()
    if len(pair_counts) != len(data) or (pair_counts != 1).any():
        raise ValidationError("Subject-item pairs are not unique")

    predictors_per_item = data.groupby(ITEM_COLUMN)[PREDICTOR_COLUMN].nunique()
    if (predictors_per_item > 1).any():
        bad = predictors_per_item[predictors_per_item > 1].index.tolist()
        raise ValidationError(
            f"Items with more than one predictor value: {bad}"
        )


def check_additive_decomposition(
    panel: GeneratedPanel,
    atol: float = 1e-8,
) -> None:
    """
    Validate that each response equals the sum of its latent components.

    Also checks that subject and item offsets are constant within their
    group.

    Args:
        panel: Generated panel with components.
        atol: Absolute tolerance.

    Raises:
        ValidationError: If the decomposition does not hold.
    """
    components = panel.components

    reconstructed = components[list(COMPONENT_COLUMNS)].sum(axis=1)
    if not np.allclose(
        reconstructed.to_numpy(),
        components[RESPONSE_COLUMN].to_numpy(),
        rtol=0.0,
        atol=atol,
    ):
        raise ValidationError("Response is not the sum of its components")

    if not np.array_equal(
        components[RESPONSE_COLUMN].to_numpy(),
        panel.data[RESPONSE_COLUMN].to_numpy(),
    ):
        raise ValidationError("Observed response differs from components")

    for group_column, offset_column in (
        (SUBJECT_COLUMN, SUBJECT_OFFSET_COLUMN),
        (ITEM_COLUMN, ITEM_OFFSET_COLUMN),
    ):
        n_unique = components.groupby(group_column)[offset_column].nunique()
        if (n_unique > 1).any():
            raise ValidationError(
                f"{offset_column} varies within {group_column}"
            )


def validate_panel(
    panel: GeneratedPanel,
    check_decomposition: bool = True,
) -> None:
    """
    Run all validation checks on a generated panel.

    Args:
        panel: Generated panel.
        check_decomposition: Whether to validate the additive decomposition.

    Raises:
        ValidationError: If any validation fails.
    """
    check_no_missing(panel.data)
    check_crossed_design(panel.data)

    expected = panel.config.n_observations
    if len(panel.data) != expected:
        raise ValidationError(
            f"Expected {expected} records, got {len(panel.data)}"
        )

    if check_decomposition:
        check_additive_decomposition(panel)
