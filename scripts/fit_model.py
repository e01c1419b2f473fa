#!/usr/bin/env python
"""
Fit mixed linear models to a panel CSV and compare them.

Fits three models to the same data:
    - crossed random intercepts for subjects and items (the generating model)
    - subject intercepts only (item variability omitted)
    - crossed intercepts plus a random predictor slope by item, which a
      design with one predictor value per item cannot support
and reports a likelihood-ratio test of each reduced/extended model against
the crossed-intercepts model.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from panel_analysis.core.constants import (
    ITEM_COLUMN,
    PREDICTOR_COLUMN,
    RESPONSE_COLUMN,
    SUBJECT_COLUMN,
)
from panel_analysis.core.data import load_panel_csv
from panel_analysis.modeling import (
    EstimationMethod,
    FitConfig,
    MixedModelFit,
    ModelFitError,
    crossed_intercepts_spec,
    fit_mixed_linear,
    likelihood_ratio_test,
)
from panel_analysis.synthetic_data.generators import generate_panel
from panel_analysis.synthetic_data.presets import get_preset

console = Console(force_terminal=True, legacy_windows=True)
app = typer.Typer()


def _fit_table(fits: dict[str, MixedModelFit]) -> Table:
    table = Table(title="Model fits")
    table.add_column("Model", style="bold")
    table.add_column("Slope", justify="right")
    table.add_column("Subject SD", justify="right")
    table.add_column("Item SD", justify="right")
    table.add_column("Residual SD", justify="right")
    table.add_column("LL", justify="right")
    table.add_column("Converged")

    for name, fit in fits.items():
        item_sd = (
            f"{fit.component_sd(ITEM_COLUMN):.2f}"
            if ITEM_COLUMN in fit.variance_components
            else "-"
        )
        table.add_row(
            name,
            f"{fit.fixed_effect(PREDICTOR_COLUMN):.3f}",
            f"{fit.component_sd(SUBJECT_COLUMN):.2f}",
            item_sd,
            f"{fit.residual_sd:.2f}",
            f"{fit.log_likelihood:.2f}",
            "yes" if fit.converged else "[red]no[/red]",
        )
    return table


@app.command()
def main(
    input_path: Path | None = typer.Argument(
        None,
        help="Panel CSV (columns: subject_id, item_id, predictor, response)",
    ),
    preset: str = typer.Option(
        "frequency_effect",
        "-p",
        "--preset",
        help="Preset to generate data from when no CSV is given",
    ),
    ml: bool = typer.Option(
        False, "--ml", help="Fit by maximum likelihood instead of REML"
    ),
) -> None:
    """Fit, compare and print mixed linear models."""

    if input_path is not None:
        if not input_path.exists():
            console.print(f"[red]File not found: {input_path}[/red]")
            raise typer.Exit(1)
        try:
            data = load_panel_csv(input_path).data
        except ValueError as e:
            console.print(f"[red]Error loading CSV: {e}[/red]")
            raise typer.Exit(1) from e
        source = str(input_path)
    else:
        try:
            config = get_preset(preset)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1) from e
        data = generate_panel(config).data
        source = f"preset {preset}"

    method = EstimationMethod.ML if ml else EstimationMethod.REML
    fit_config = FitConfig(method=method)

    console.print(
        Panel(
            f"[bold]Fit mixed models[/bold]\n\n"
            f"Data: [cyan]{source}[/cyan]\n"
            f"Observations: [cyan]{len(data)}[/cyan]\n"
            f"Subjects: [cyan]{data[SUBJECT_COLUMN].nunique()}[/cyan]\n"
            f"Items: [cyan]{data[ITEM_COLUMN].nunique()}[/cyan]\n"
            f"Method: [cyan]{method.value.upper()}[/cyan]",
            title="Configuration",
        )
    )

    crossed = crossed_intercepts_spec(
        RESPONSE_COLUMN, (PREDICTOR_COLUMN,), SUBJECT_COLUMN, ITEM_COLUMN
    )
    specs = {
        "crossed intercepts": crossed,
        "no item intercept": crossed.without(ITEM_COLUMN),
        "item slope added": crossed.with_random_slope(
            ITEM_COLUMN, PREDICTOR_COLUMN
        ),
    }

    fits: dict[str, MixedModelFit] = {}
    for name, spec in specs.items():
        console.print(f"[dim]Fitting {spec.describe()}...[/dim]")
        try:
            fits[name] = fit_mixed_linear(data, spec, fit_config)
        except ModelFitError as e:
            console.print(f"[yellow]{name}: {e}[/yellow]")

    console.print(_fit_table(fits))

    baseline = fits.get("crossed intercepts")
    if baseline is None:
        raise typer.Exit(1)

    if "no item intercept" in fits:
        lrt = likelihood_ratio_test(
            fits["no item intercept"], baseline, boundary_correction=True
        )
        console.print(
            f"Item intercept: chi2({lrt.df}) = {lrt.statistic:.2f}, "
            f"p = {lrt.p_value_boundary:.4g}"
        )
    if "item slope added" in fits:
        lrt = likelihood_ratio_test(
            baseline, fits["item slope added"], boundary_correction=True
        )
        console.print(
            f"Item slope: chi2({lrt.df}) = {lrt.statistic:.2f}, "
            f"p = {lrt.p_value_boundary:.4g}"
        )


if __name__ == "__main__":
    app()
