from collections.abc import Callable

import pytest

from panel_analysis.modeling.data_models import MixedModelFit
from panel_analysis.modeling.enums import ConvergenceStatus, EstimationMethod


@pytest.fixture
def make_fit() -> Callable[..., MixedModelFit]:
    """Factory for MixedModelFit results with overridable fields."""

    def _make(**overrides: object) -> MixedModelFit:
        values: dict[str, object] = {
            "formula": "response ~ predictor",
            "description": (
                "response ~ predictor + (1 | subject_id) + (1 | item_id)"
            ),
            "fixed_effects": {"Intercept": 400.0, "predictor": -5.0},
            "fixed_effect_se": {"Intercept": 10.0, "predictor": 1.0},
            "random_effects": {
                "subject_id": {"S01": 12.5, "S02": -12.5},
                "item_id": {"I01": 3.0},
            },
            "variance_components": {"subject_id": 1600.0, "item_id": 400.0},
            "residual_variance": 400.0,
            "log_likelihood": -500.0,
            "n_observations": 120,
            "n_parameters": 5,
            "method": EstimationMethod.REML,
            "convergence_status": ConvergenceStatus.CONVERGED,
            "model_version": "0.1.0",
        }
        values.update(overrides)
        return MixedModelFit(**values)

    return _make
