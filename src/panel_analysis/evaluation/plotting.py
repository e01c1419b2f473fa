"""
Plotting utilities for parameter-recovery results.
"""

from collections.abc import Sequence

from matplotlib.figure import Figure

from panel_analysis.evaluation.data_models import RecoveryReport


def plot_recovery(reports: Sequence[RecoveryReport]) -> Figure:
    """
    Plot the distribution of estimates for each generating parameter.

    Each panel shows one parameter: a histogram of the estimates across
    replicates and a vertical line at the true value.

    Args:
        reports: Recovery reports sharing the same parameter names.

    Returns:
        matplotlib Figure.
    """
    import matplotlib.pyplot as plt

    if not reports:
        raise ValueError("Need at least one report to plot")

    names = [p.name for p in reports[0].parameters]
    fig, axes = plt.subplots(
        1, len(names), figsize=(3.2 * len(names), 3.0), squeeze=False
    )

    for ax, name in zip(axes[0], names, strict=True):
        estimates = [report.get(name).estimate for report in reports]
        true_value = reports[0].get(name).true_value

        ax.hist(estimates, bins=min(20, max(5, len(estimates) // 2)))
        ax.axvline(true_value, color="black", linestyle="--", label="true")
        ax.set_title(name)
        ax.set_xlabel("estimate")

    axes[0][0].set_ylabel("replicates")
    axes[0][0].legend()
    fig.suptitle(f"Parameter recovery ({len(reports)} replicates)")
    fig.tight_layout()
    return fig
