from pathlib import Path

import pandas as pd
import pytest

from panel_analysis.core.data import load_panel_csv, save_panel_csv
from panel_analysis.core.data_models import PanelDataset


def test_save_and_load(tmp_path: Path) -> None:
    panel = PanelDataset(
        data=pd.DataFrame(
            {
                "subject_id": ["S01", "S02"],
                "item_id": ["I01", "I01"],
                "predictor": [2.0, 2.0],
                "response": [1.0, 2.0],
            }
        )
    )
    path = tmp_path / "nested" / "panel.csv"
    save_panel_csv(panel, path)

    loaded = load_panel_csv(path)
    assert loaded.data.to_dict("list") == panel.data.to_dict("list")


def test_load_keeps_identifiers_as_strings(tmp_path: Path) -> None:
    path = tmp_path / "panel.csv"
    path.write_text(
        "subject_id,item_id,predictor,response,extra\n"
        "01,7,1.0,10.0,x\n"
        "02,7,1.0,12.0,y\n"
    )

    loaded = load_panel_csv(path)

    assert list(loaded.data.columns) == [
        "subject_id",
        "item_id",
        "predictor",
        "response",
    ]
    assert loaded.subject_ids == ["01", "02"]
    assert loaded.item_ids == ["7"]


def test_load_missing_column(tmp_path: Path) -> None:
    path = tmp_path / "panel.csv"
    path.write_text("subject_id,item_id,response\nS01,I01,1.0\n")

    with pytest.raises(ValueError, match="'predictor'"):
        load_panel_csv(path)
