#!/usr/bin/env python
"""
Refresh synthetic panel CSV files from the bundled presets.

Each preset is generated, checked for a fully crossed design and an exact
additive response decomposition, and written to
data/synthetic/{preset_name}.csv. Presets that fail validation are
reported and not written.
"""

import logging
from pathlib import Path

import typer

from panel_analysis.synthetic_data.data_models import GeneratedPanel
from panel_analysis.synthetic_data.generators import generate_panel, to_csv
from panel_analysis.synthetic_data.presets import (
    get_available_presets,
    get_preset,
)
from panel_analysis.synthetic_data.validation import (
    ValidationError,
    validate_panel,
)

SYNTHETIC_DATA_DIR = Path(__file__).parent.parent / "data" / "synthetic"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("refresh_synthetic_data")


def describe_panel(panel: GeneratedPanel) -> str:
    data = panel.data
    return (
        f"{panel.config.n_subjects} subjects x {panel.config.n_items} items, "
        f"predictor {data['predictor'].min():.2f}-"
        f"{data['predictor'].max():.2f}, "
        f"response mean {data['response'].mean():.1f} "
        f"(sd {data['response'].std():.1f})"
    )


def main(
    preset: str | None = typer.Option(
        None, "-p", "--preset", help="Single preset to refresh"
    ),
    output_dir: Path = typer.Option(
        SYNTHETIC_DATA_DIR, "-o", "--output-dir", help="Output directory"
    ),
) -> None:
    """Generate, validate and write CSV files for the presets."""
    presets = get_available_presets() if preset is None else [preset]
    logger.info("Refreshing %d presets: %s", len(presets), presets)

    failed: list[str] = []
    for preset_name in presets:
        config = get_preset(preset_name)
        panel = generate_panel(config)

        try:
            validate_panel(panel)
        except ValidationError as e:
            logger.error("%s failed validation: %s", preset_name, e)
            failed.append(preset_name)
            continue

        output_path = output_dir / f"{preset_name}.csv"
        to_csv(panel, str(output_path))
        logger.info(
            "%s (seed %s): %s -> %s",
            preset_name,
            config.random_seed,
            describe_panel(panel),
            output_path,
        )

    logger.info(
        "Done. Wrote %d CSV files in %s",
        len(presets) - len(failed),
        output_dir,
    )
    if failed:
        logger.error("Presets failing validation: %s", failed)
        raise typer.Exit(1)


if __name__ == "__main__":
    typer.run(main)
