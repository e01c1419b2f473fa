"""
Data structures for synthetic panel generation.

This module defines typed data structures for the synthetic data module.
It avoids embedding generation logic - only contracts are defined here.
"""

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from panel_analysis.core.constants import PANEL_COLUMNS
from panel_analysis.core.data_models import PanelDataset
from panel_analysis.synthetic_data.config import PanelGenerationConfig

# Latent construction columns, hidden from model fitting
MEAN_COLUMN = "mean"
SUBJECT_OFFSET_COLUMN = "subject_offset"
ITEM_OFFSET_COLUMN = "item_offset"
RESIDUAL_COLUMN = "residual"
FIXED_EFFECT_COLUMN = "fixed_effect"

COMPONENT_COLUMNS = (
    MEAN_COLUMN,
    SUBJECT_OFFSET_COLUMN,
    ITEM_OFFSET_COLUMN,
    RESIDUAL_COLUMN,
    FIXED_EFFECT_COLUMN,
)


class GeneratingParameters(BaseModel):
    """
    True parameters used to generate a panel.

    Attributes:
        mean_level: Global mean of the response.
        fixed_slope: Fixed effect of the item predictor.
        subject_sd: Subject random-intercept standard deviation.
        item_sd: Item random-intercept standard deviation.
        residual_sd: Trial-level error standard deviation.
    """

    model_config = ConfigDict(frozen=True)

    mean_level: float
    fixed_slope: float
    subject_sd: float = Field(..., ge=0.0)
    item_sd: float = Field(..., ge=0.0)
    residual_sd: float = Field(..., ge=0.0)

    @classmethod
    def from_config(
        cls, config: PanelGenerationConfig
    ) -> "GeneratingParameters":
        return cls(
            mean_level=config.mean_level,
            fixed_slope=config.fixed_slope,
            subject_sd=config.subject_sd,
            item_sd=config.item_sd,
            residual_sd=config.residual_sd,
        )


class GeneratedPanel(BaseModel):
    """
    Complete output from synthetic panel generation.

    Contains the observable table and, for validation, the latent
    components and the parameters that produced it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Primary output: subject_id, item_id, predictor, response
    data: pd.DataFrame

    # Intermediate data (for validation and recovery checks)
    components: pd.DataFrame

    # Generation metadata
    parameters: GeneratingParameters
    config: PanelGenerationConfig

    @property
    def n_observations(self) -> int:
        return len(self.data)

    def to_panel_dataset(self) -> PanelDataset:
        return PanelDataset(data=self.data[list(PANEL_COLUMNS)])
