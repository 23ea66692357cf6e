#!/usr/bin/env -S uv run --script
# /// script
# requires-python = ">=3.10"
# dependencies = [
#   "matplotlib",
#   "numpy",
#   "pandas",
#   "typer",
# ]
# ///

from pathlib import Path
from typing import Optional

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import typer

from fib_timing import (
    DEFAULT_MEMO_CSV,
    DEFAULT_NO_MEMO_CSV,
    MEMO_TIME_DIVISOR,
    DataLoadError,
    RenderError,
    load_timing_table,
    rescale,
)

app = typer.Typer(help="Plot Fibonacci timings with and without memoization")

NO_MEMO_LABEL = "W/o memoization"
MEMO_LABEL = "With memoization"

SERIES_COLORS = {
    NO_MEMO_LABEL: "blue",
    MEMO_LABEL: "red",
}

MARKER = "o"
LEGEND_ANCHOR = (2.0, 140.0)

NON_INTERACTIVE_BACKENDS = {"agg", "cairo", "pdf", "pgf", "ps", "svg", "template"}


def draw_comparison(
    no_memo: pd.DataFrame,
    memo: pd.DataFrame,
    legend_anchor: tuple[float, float] = LEGEND_ANCHOR,
):
    """Scatter both timing series on shared axes and return the figure.

    ``memo`` is expected to already be in seconds. The legend's upper-left
    corner is placed at ``legend_anchor`` in data coordinates.
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    for label, table in ((NO_MEMO_LABEL, no_memo), (MEMO_LABEL, memo)):
        ax.scatter(
            table["n"],
            table["time"],
            marker=MARKER,
            color=SERIES_COLORS[label],
            label=label,
        )

    ax.set_xlabel("n")
    ax.set_ylabel("Time (seconds)")
    ax.set_frame_on(False)
    legend = ax.legend(
        loc="upper left",
        bbox_to_anchor=legend_anchor,
        bbox_transform=ax.transData,
    )
    # anchor may sit far outside the data range; keep it out of bbox_inches="tight"
    legend.set_in_layout(False)

    return fig


def emit_figure(fig, output: Optional[Path] = None):
    """Save ``fig`` to ``output``, or show it when no output path is given."""
    if output is None:
        backend = matplotlib.get_backend().lower()
        if backend in NON_INTERACTIVE_BACKENDS:
            plt.close(fig)
            raise RenderError(
                f"matplotlib backend '{backend}' cannot display figures; "
                "pass --output to save the plot instead"
            )
        plt.show()
        return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output, dpi=150, bbox_inches="tight")
    except (OSError, ValueError, MemoryError) as e:
        raise RenderError(f"could not write {output}: {e}") from e
    finally:
        plt.close(fig)


@app.command()
def main(
    no_memo_csv: Path = typer.Argument(
        DEFAULT_NO_MEMO_CSV,
        help="CSV of timings without memoization (columns n,time; seconds)",
    ),
    memo_csv: Path = typer.Argument(
        DEFAULT_MEMO_CSV,
        help="CSV of timings with memoization (columns n,time; see --memo-divisor)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Save the plot to this file instead of opening a window",
    ),
    memo_divisor: float = typer.Option(
        MEMO_TIME_DIVISOR,
        "--memo-divisor",
        help="Divide memoized times by this to convert them to seconds",
    ),
    legend_x: float = typer.Option(
        LEGEND_ANCHOR[0], "--legend-x", help="Legend x position (data coordinates)"
    ),
    legend_y: float = typer.Option(
        LEGEND_ANCHOR[1], "--legend-y", help="Legend y position (data coordinates)"
    ),
):
    """
    Scatter-plot Fibonacci run times with and without memoization on shared
    axes, converting the memoized times to seconds first.
    """
    if not np.isfinite(memo_divisor) or memo_divisor == 0:
        typer.secho(
            f"Error: --memo-divisor must be finite and non-zero, got {memo_divisor}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(1)

    try:
        no_memo = load_timing_table(no_memo_csv)
        memo = load_timing_table(memo_csv)
    except DataLoadError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    typer.secho(
        f"Loaded {len(no_memo)} rows from {no_memo_csv} and {len(memo)} rows from {memo_csv}",
        fg=typer.colors.GREEN,
    )

    memo = rescale(memo, memo_divisor)

    fig = draw_comparison(no_memo, memo, legend_anchor=(legend_x, legend_y))
    try:
        emit_figure(fig, output)
    except RenderError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if output is not None:
        typer.secho(f"Saved comparison plot to {output}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
