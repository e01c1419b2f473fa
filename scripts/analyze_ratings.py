#!/usr/bin/env python
"""
Analyze a ratings CSV with a mixed logistic regression.

The rating is dichotomized at the configured threshold and modelled with
the configured predictors plus random intercepts for raters and items.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from panel_analysis.modeling import ModelFitError
from panel_analysis.ratings import (
    dichotomize,
    fit_ratings_model,
    load_ratings,
    load_ratings_config,
    summarize_ratings,
)

console = Console(force_terminal=True, legacy_windows=True)
app = typer.Typer()


@app.command()
def main(
    input_path: Path = typer.Argument(..., help="Ratings CSV"),
    config_path: Path | None = typer.Option(
        None, "-c", "--config", help="YAML ratings configuration"
    ),
) -> None:
    """Tabulate and fit a dichotomized rating."""
    if not input_path.exists():
        console.print(f"[red]File not found: {input_path}[/red]")
        raise typer.Exit(1)

    try:
        config = load_ratings_config(config_path)
        data = dichotomize(load_ratings(input_path, config), config)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error loading ratings: {e}[/red]")
        raise typer.Exit(1) from e

    summary = summarize_ratings(data, config)
    console.print(
        Panel(
            f"[bold]Ratings[/bold]\n\n"
            f"Input: [cyan]{input_path}[/cyan]\n"
            f"Rows: [cyan]{summary.n_observations}[/cyan]\n"
            f"Raters: [cyan]{summary.n_subjects}[/cyan]\n"
            f"Items: [cyan]{summary.n_items}[/cyan]\n"
            f"{config.rating_column} > {config.threshold}: "
            f"[cyan]{summary.outcome_rate:.1%}[/cyan]",
            title="Data",
        )
    )
    for predictor, table_df in summary.outcome_by_predictor.items():
        table = Table(title=f"{config.outcome_column} by {predictor}")
        table.add_column(predictor, style="bold")
        table.add_column("Proportion", justify="right")
        table.add_column("Count", justify="right")
        for level, row in table_df.iterrows():
            table.add_row(
                str(level), f"{row['proportion']:.3f}", str(int(row["count"]))
            )
        console.print(table)

    console.print("[dim]Fitting mixed logistic model...[/dim]")
    try:
        fit = fit_ratings_model(data, config)
    except ModelFitError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    table = Table(title=fit.description)
    table.add_column("Term", style="bold")
    table.add_column("Log-odds", justify="right")
    table.add_column("SD", justify="right")
    table.add_column("Odds ratio", justify="right")
    for term, estimate in fit.fixed_effects.items():
        table.add_row(
            term,
            f"{estimate:.3f}",
            f"{fit.fixed_effect_sd[term]:.3f}",
            f"{fit.odds_ratio(term):.3f}",
        )
    console.print(table)

    for component, sd in fit.variance_component_sds.items():
        console.print(f"  {component} SD = {sd:.3f}")


if __name__ == "__main__":
    app()
