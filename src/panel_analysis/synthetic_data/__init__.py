"""
Synthetic data generation module for crossed subject x item panels.

This module produces repeated-measures data with known random intercepts
and a known fixed effect, so that mixed-model fits can be checked
against the generating parameters.

It is NOT intended to model any particular experiment.
"""

from panel_analysis.synthetic_data.config import PanelGenerationConfig
from panel_analysis.synthetic_data.data_models import (
    GeneratedPanel,
    GeneratingParameters,
)
from panel_analysis.synthetic_data.exceptions import InvalidParameter
from panel_analysis.synthetic_data.generators import (
    generate,
    generate_panel,
    to_csv,
    to_dataframe,
)
from panel_analysis.synthetic_data.presets import (
    get_available_presets,
    get_preset,
)
from panel_analysis.synthetic_data.validation import (
    ValidationError,
    check_additive_decomposition,
    check_crossed_design,
    validate_panel,
)

__all__ = [
    "GeneratedPanel",
    "GeneratingParameters",
    "InvalidParameter",
    "PanelGenerationConfig",
    "ValidationError",
    "check_additive_decomposition",
    "check_crossed_design",
    "generate",
    "generate_panel",
    "get_available_presets",
    "get_preset",
    "to_csv",
    "to_dataframe",
    "validate_panel",
]
