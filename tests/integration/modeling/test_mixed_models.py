import numpy as np
import pandas as pd
import pytest

from panel_analysis.core.utils import get_rng
from panel_analysis.modeling.comparison import likelihood_ratio_test
from panel_analysis.modeling.config import FitConfig, LogisticFitConfig
from panel_analysis.modeling.enums import BayesFitMethod, EstimationMethod
from panel_analysis.modeling.exceptions import InvalidModelSpec
from panel_analysis.modeling.linear import fit_mixed_linear
from panel_analysis.modeling.specs import ModelSpec, crossed_intercepts_spec
from panel_analysis.ratings.analysis import fit_ratings_model
from panel_analysis.ratings.config import RatingsConfig
from panel_analysis.synthetic_data.generators import generate


@pytest.fixture(scope="module")
def panel_data() -> pd.DataFrame:
    return generate(30, 40, seed=17)


@pytest.fixture(scope="module")
def crossed() -> ModelSpec:
    return crossed_intercepts_spec(
        "response", ("predictor",), "subject_id", "item_id"
    )


def test_missing_column_rejected(
    panel_data: pd.DataFrame, crossed: ModelSpec
) -> None:
    with pytest.raises(InvalidModelSpec):
        fit_mixed_linear(panel_data.drop(columns=["item_id"]), crossed)


def test_item_intercept_improves_fit(
    panel_data: pd.DataFrame, crossed: ModelSpec
) -> None:
    full = fit_mixed_linear(panel_data, crossed)
    reduced = fit_mixed_linear(panel_data, crossed.without("item_id"))

    result = likelihood_ratio_test(reduced, full, boundary_correction=True)

    assert result.df == 1
    assert result.statistic > 0
    assert result.significant(alpha=0.01)


def test_ml_comparison_of_fixed_effects(
    panel_data: pd.DataFrame, crossed: ModelSpec
) -> None:
    config = FitConfig(method=EstimationMethod.ML)
    full = fit_mixed_linear(panel_data, crossed, config)
    no_slope = fit_mixed_linear(
        panel_data,
        ModelSpec(
            response="response",
            random_intercepts=("subject_id", "item_id"),
        ),
        config,
    )

    result = likelihood_ratio_test(no_slope, full)
    assert result.df == 1
    assert result.significant()
    assert full.aic < no_slope.aic


def test_reml_refuses_fixed_effect_comparison(
    panel_data: pd.DataFrame, crossed: ModelSpec
) -> None:
    full = fit_mixed_linear(panel_data, crossed)
    no_slope = fit_mixed_linear(
        panel_data,
        ModelSpec(
            response="response",
            random_intercepts=("subject_id", "item_id"),
        ),
    )
    with pytest.raises(ValueError, match="refit with ML"):
        likelihood_ratio_test(no_slope, full)


def test_random_slope_component_reported(
    panel_data: pd.DataFrame, crossed: ModelSpec
) -> None:
    spec = crossed.with_random_slope("subject_id", "predictor")
    fit = fit_mixed_linear(panel_data, spec)

    assert "subject_id:predictor" in fit.variance_components
    assert len(fit.random_effects["subject_id:predictor"]) == 30
    # No slope variability was generated
    assert fit.component_sd("subject_id:predictor") < 5.0


def _simulated_ratings(seed: int) -> pd.DataFrame:
    rng = get_rng(seed)
    n_participants, n_selfies = 40, 30
    participant_effects = rng.normal(0.0, 0.8, n_participants)
    selfie_effects = rng.normal(0.0, 0.5, n_selfies)
    rows = []
    for p in range(n_participants):
        for s in range(n_selfies):
            condition = (p + s) % 2
            eta = (
                -0.3
                + 1.5 * condition
                + participant_effects[p]
                + selfie_effects[s]
            )
            prob = 1.0 / (1.0 + np.exp(-eta))
            high = rng.random() < prob
            rows.append(
                {
                    "participant": f"P{p:02d}",
                    "selfie": f"F{s:02d}",
                    "condition": condition,
                    "rating": 6 if high else 2,
                }
            )
    return pd.DataFrame(rows)


@pytest.mark.parametrize(
    "method", [BayesFitMethod.VARIATIONAL, BayesFitMethod.MAP]
)
def test_ratings_model_recovers_condition_effect(
    method: BayesFitMethod,
) -> None:
    config = RatingsConfig()
    data = _simulated_ratings(5)
    data[config.outcome_column] = (data["rating"] > config.threshold).astype(
        int
    )

    fit = fit_ratings_model(data, config, LogisticFitConfig(method=method))

    assert fit.n_observations == 1200
    assert set(fit.variance_component_sds) == {"participant", "selfie"}
    assert 0.5 < fit.fixed_effect("condition") < 2.5
    assert fit.odds_ratio("condition") > 1.0
    assert len(fit.random_effects["participant"]) == 40
    fit.random_effect("selfie", "F00")
