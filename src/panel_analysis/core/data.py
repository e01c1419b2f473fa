"""
CSV loading and saving utilities for panel data.
"""

from pathlib import Path

import pandas as pd

from panel_analysis.core.constants import (
    ITEM_COLUMN,
    PANEL_COLUMNS,
    SUBJECT_COLUMN,
)
from panel_analysis.core.data_models import PanelDataset


def load_panel_csv(path: Path) -> PanelDataset:
    """Load a CSV file with panel observations.

    Expected CSV columns:
        - subject_id: subject identifier
        - item_id: item identifier
        - predictor: item-level covariate
        - response: continuous outcome

    Extra columns are dropped.

    Raises:
        ValueError: If CSV format is invalid or data is inconsistent.
    """
    df = pd.read_csv(
        path, dtype={SUBJECT_COLUMN: str, ITEM_COLUMN: str}
    )

    for column in PANEL_COLUMNS:
        if column not in df.columns:
            raise ValueError(f"CSV must have '{column}' column")

    return PanelDataset(data=df[list(PANEL_COLUMNS)].copy())


def save_panel_csv(panel: PanelDataset, path: Path) -> None:
    """Write panel observations to CSV, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    panel.data.to_csv(path, index=False)
