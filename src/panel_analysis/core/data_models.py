"""
Data models for panel (repeated-measures) data.

This module defines the observable table handed to model fitting:
one row per observation, named columns for grouping identifiers,
the item-level predictor and the response.
"""

from dataclasses import dataclass

import pandas as pd

from panel_analysis.core.constants import (
    ITEM_COLUMN,
    PANEL_COLUMNS,
    PREDICTOR_COLUMN,
    SUBJECT_COLUMN,
)


def format_identifiers(prefix: str, n: int) -> list[str]:
    """
    Build zero-padded identifiers, e.g. ``S01..S06``.

    Padding is at least two digits and wide enough for ``n`` so that
    lexical order matches numeric order.

    Args:
        prefix: Identifier prefix.
        n: Number of identifiers.

    Returns:
        List of ``n`` identifiers.
    """
    width = max(2, len(str(n)))
    return [f"{prefix}{i:0{width}d}" for i in range(1, n + 1)]


@dataclass(frozen=True)
class PanelDataset:
    """
    Observable panel data.

    Attributes:
        data: DataFrame with columns subject_id, item_id, predictor, response.
    """

    data: pd.DataFrame

    def __post_init__(self) -> None:
        """Validate the panel table."""
        missing = [c for c in PANEL_COLUMNS if c not in self.data.columns]
        if missing:
            raise ValueError(f"Panel data is missing columns: {missing}")
        if self.data[list(PANEL_COLUMNS)].isna().any().any():
            raise ValueError("Panel data contains missing values")

    @property
    def n_observations(self) -> int:
        return len(self.data)

    @property
    def subject_ids(self) -> list[str]:
        return sorted(self.data[SUBJECT_COLUMN].astype(str).unique())

    @property
    def item_ids(self) -> list[str]:
        return sorted(self.data[ITEM_COLUMN].astype(str).unique())

    @property
    def n_subjects(self) -> int:
        return len(self.subject_ids)

    @property
    def n_items(self) -> int:
        return len(self.item_ids)

    def item_predictors(self) -> pd.Series:
        """
        Predictor value per item.

        Raises:
            ValueError: If an item carries more than one predictor value.
        """
        per_item = self.data.groupby(ITEM_COLUMN)[PREDICTOR_COLUMN]
        n_unique = per_item.nunique()
        if (n_unique > 1).any():
            bad = n_unique[n_unique > 1].index.tolist()
            raise ValueError(f"Items with more than one predictor: {bad}")
        return per_item.first()
