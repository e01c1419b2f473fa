import pandas as pd
import pytest

from panel_analysis.synthetic_data.generators import generate
from panel_analysis.synthetic_data.validation import (
    ValidationError,
    check_additive_decomposition,
    check_crossed_design,
    check_no_missing,
    validate_panel,
)


@pytest.fixture
def panel():
    _, truth = generate(4, 5, seed=3, return_truth=True)
    return truth


def test_validate_generated_panel(panel) -> None:
    # Should not raise
    validate_panel(panel)


def test_missing_value_detected(panel) -> None:
    data = panel.data.copy()
    data.loc[3, "response"] = float("nan")
    with pytest.raises(ValidationError, match="missing values"):
        check_no_missing(data)


def test_missing_column_detected(panel) -> None:
    with pytest.raises(ValidationError, match="Missing columns"):
        check_no_missing(panel.data.drop(columns=["predictor"]))


def test_dropped_row_breaks_crossing(panel) -> None:
    with pytest.raises(ValidationError, match="Expected 20 records"):
        check_crossed_design(panel.data.iloc[1:])


def test_duplicate_pair_detected(panel) -> None:
    data = panel.data.copy()
    data.loc[1, "item_id"] = data.loc[0, "item_id"]
    data.loc[1, "predictor"] = data.loc[0, "predictor"]
    with pytest.raises(ValidationError):
        check_crossed_design(data)


def test_inconsistent_item_predictor(panel) -> None:
    data = panel.data.copy()
    data.loc[0, "predictor"] = data.loc[0, "predictor"] + 1.0
    with pytest.raises(ValidationError, match="more than one predictor"):
        check_crossed_design(data)


def test_tampered_response_fails_decomposition(panel) -> None:
    components = panel.components.copy()
    components.loc[0, "response"] += 1.0
    tampered = panel.model_copy(update={"components": components})
    with pytest.raises(ValidationError, match="sum of its components"):
        check_additive_decomposition(tampered)


def test_varying_offset_fails_decomposition(panel) -> None:
    components = panel.components.copy()
    components.loc[0, "subject_offset"] += 1.0
    components.loc[0, "response"] += 1.0
    data = panel.data.copy()
    data.loc[0, "response"] = components.loc[0, "response"]
    tampered = panel.model_copy(
        update={"components": components, "data": data}
    )
    with pytest.raises(ValidationError, match="varies within subject_id"):
        check_additive_decomposition(tampered)


def test_validate_without_decomposition(panel) -> None:
    components = panel.components.copy()
    components["response"] = 0.0
    tampered = panel.model_copy(update={"components": components})
    # Only structural checks
    validate_panel(tampered, check_decomposition=False)
    with pytest.raises(ValidationError):
        validate_panel(tampered)


def test_crossed_design_accepts_plain_frame() -> None:
    data = pd.DataFrame(
        {
            "subject_id": ["a", "a", "b", "b"],
            "item_id": ["x", "y", "x", "y"],
            "predictor": [1.0, 2.0, 1.0, 2.0],
            "response": [0.0, 0.0, 0.0, 0.0],
        }
    )
    check_crossed_design(data)
