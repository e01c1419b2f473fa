import pandas as pd
import pytest

from panel_analysis.evaluation.recovery import compare_to_truth
from panel_analysis.modeling.config import FitConfig
from panel_analysis.modeling.data_models import MixedModelFit
from panel_analysis.modeling.enums import EstimationMethod
from panel_analysis.modeling.linear import fit_mixed_linear
from panel_analysis.modeling.specs import ModelSpec, crossed_intercepts_spec
from panel_analysis.synthetic_data.data_models import GeneratedPanel
from panel_analysis.synthetic_data.generators import generate_panel
from panel_analysis.synthetic_data.presets import get_preset
from panel_analysis.synthetic_data.validation import validate_panel

RECOVERY_TOLERANCE = 0.5


@pytest.fixture(scope="module")
def crossed() -> ModelSpec:
    return crossed_intercepts_spec(
        "response", ("predictor",), "subject_id", "item_id"
    )


class TestFrequencyEffectExample:
    """The 6 x 20 teaching example fits end to end."""

    @pytest.fixture(scope="class")
    def panel(self) -> GeneratedPanel:
        return generate_panel(get_preset("frequency_effect"))

    @pytest.fixture(scope="class")
    def fit(self, panel: GeneratedPanel, crossed: ModelSpec) -> MixedModelFit:
        return fit_mixed_linear(panel.data, crossed)

    def test_generated_panel_valid(self, panel: GeneratedPanel) -> None:
        validate_panel(panel)

    def test_fit_structure(self, fit: MixedModelFit) -> None:
        assert set(fit.fixed_effects) == {"Intercept", "predictor"}
        assert set(fit.variance_components) == {"subject_id", "item_id"}
        assert fit.n_observations == 120
        assert fit.residual_variance > 0

    def test_random_effects_per_group(self, fit: MixedModelFit) -> None:
        assert len(fit.random_effects["subject_id"]) == 6
        assert len(fit.random_effects["item_id"]) == 20
        # Accessible by identifier
        fit.random_effect("subject_id", "S01")
        fit.random_effect("item_id", "I20")

    @pytest.mark.parametrize(
        "name", ["fixed_slope", "subject_sd", "item_sd", "residual_sd"]
    )
    def test_smoke_recovery(
        self, panel: GeneratedPanel, fit: MixedModelFit, name: str
    ) -> None:
        report = compare_to_truth(fit, panel.parameters)
        assert report.get(name).within(RECOVERY_TOLERANCE)

    def test_omitting_item_intercept_inflates_residual(
        self, panel: GeneratedPanel, fit: MixedModelFit, crossed: ModelSpec
    ) -> None:
        reduced = fit_mixed_linear(panel.data, crossed.without("item_id"))
        assert reduced.residual_variance > fit.residual_variance


class TestLargePanelRecovery:
    """
    With 40 subjects x 60 items every generating parameter is recovered
    within 50% of its true value.
    """

    @pytest.fixture(scope="class")
    def panel(self) -> GeneratedPanel:
        return generate_panel(get_preset("large_panel"))

    @pytest.fixture(scope="class")
    def fit(self, panel: GeneratedPanel, crossed: ModelSpec) -> MixedModelFit:
        return fit_mixed_linear(panel.data, crossed)

    def test_converged(self, fit: MixedModelFit) -> None:
        assert fit.converged

    @pytest.mark.parametrize(
        "name",
        ["fixed_slope", "mean_level", "subject_sd", "item_sd", "residual_sd"],
    )
    def test_parameter_recovered(
        self, panel: GeneratedPanel, fit: MixedModelFit, name: str
    ) -> None:
        report = compare_to_truth(fit, panel.parameters)
        assert report.get(name).within(RECOVERY_TOLERANCE)

    def test_predicted_subject_effects_track_truth(
        self, panel: GeneratedPanel, fit: MixedModelFit
    ) -> None:
        true_offsets = panel.components.groupby("subject_id")[
            "subject_offset"
        ].first()
        predicted = pd.Series(
            {s: fit.random_effect("subject_id", s) for s in true_offsets.index}
        )
        assert true_offsets.corr(predicted) > 0.9

    def test_omitting_item_intercept_inflates_residual(
        self, panel: GeneratedPanel, fit: MixedModelFit, crossed: ModelSpec
    ) -> None:
        reduced = fit_mixed_linear(panel.data, crossed.without("item_id"))
        assert reduced.residual_variance > fit.residual_variance

    def test_ml_and_reml_agree_on_slope(
        self, panel: GeneratedPanel, fit: MixedModelFit, crossed: ModelSpec
    ) -> None:
        ml_fit = fit_mixed_linear(
            panel.data, crossed, FitConfig(method=EstimationMethod.ML)
        )
        assert ml_fit.fixed_effect("predictor") == pytest.approx(
            fit.fixed_effect("predictor"), abs=0.5
        )
