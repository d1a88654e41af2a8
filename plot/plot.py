import argparse
import json
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D


def _run_label(result: dict) -> str:
    rules = result.get("rules", {})
    colors = rules.get("colors", [])
    return f"{rules.get('code_length', '?')} holes x {len(colors)} colors"


def _annotate_points(ax, xs, ys, *, fmt="{:.0f}", dx=0, dy=6, fontsize=8):
    """
    Annotate points (x, y) on ax with formatted y values.

    Args:
        ax: matplotlib Axes
        xs: list of x coordinates
        ys: list of y coordinates
        fmt: format string for y values
        dx: x offset in points
        dy: y offset in points
        fontsize: font size for annotations
    """

    for x, y in zip(xs, ys):
        if y is None or y == 0:
            continue
        ax.annotate(
            fmt.format(y),
            (x, y),
            textcoords="offset points",
            xytext=(dx, dy),
            ha="center",
            va="center",
            fontsize=fontsize,
        )


def compute_guess_stats(result: dict) -> dict:
    """
    Summary statistics of the per-code guess counts of one benchmark run.

    Returns:
      dict with games, mean, min, max, std and p90 (np.nan if no games)
    """
    counts = np.asarray(result.get("guess_counts", []), dtype=np.float64)
    if counts.size == 0:
        return {
            "games": 0,
            "mean": np.nan,
            "min": np.nan,
            "max": np.nan,
            "std": np.nan,
            "p90": np.nan,
        }
    return {
        "games": int(counts.size),
        "mean": float(np.mean(counts)),
        "min": float(np.min(counts)),
        "max": float(np.max(counts)),
        "std": float(np.std(counts)),
        "p90": float(np.percentile(counts, 90)),
    }


def plot_guess_distribution(results, out_path, *, dpi=200):
    """
    Bar chart of how many codes needed each number of guesses.

    Args:
        results: list of benchmark result dicts (see solver.benchmark)
        out_path: image file to write
    Returns:
        Path of the written image.
    """
    results = list(results)
    if not results:
        raise ValueError("No benchmark results to plot.")

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    max_guesses = max(int(max(r.get("guess_counts", [0]), default=0)) for r in results)
    x = np.arange(1, max_guesses + 1)
    width = 0.8 / len(results)

    plt.rcParams["lines.solid_capstyle"] = "round"
    plt.rcParams["lines.linewidth"] = 1.0

    fig, ax = plt.subplots(figsize=(10, 6))
    legend_handles = []
    for i, result in enumerate(results):
        counts = np.asarray(result.get("guess_counts", []), dtype=np.int64)
        heights = np.bincount(counts, minlength=max_guesses + 1)[1:]
        offset = (i - (len(results) - 1) / 2) * width
        stats = compute_guess_stats(result)
        bars = ax.bar(x + offset, heights, width=width, alpha=0.8)
        color = bars.patches[0].get_facecolor() if bars.patches else None
        _annotate_points(ax, x + offset, heights, dy=6)
        # mean marker
        ax.axvline(stats["mean"], color=color, linestyle="--")
        legend_handles.append(
            Line2D(
                [0], [0], color=color, linewidth=6,
                label=f"{_run_label(result)}: mean {stats['mean']:.3f}, max {stats['max']:.0f}",
            )
        )

    ax.set_title("Guesses needed per secret code (minimax solver)")
    ax.set_xlabel("Guesses")
    ax.set_ylabel("Number of codes")
    ax.set_xticks(x)
    ax.grid(True, axis="y")
    ax.legend(handles=legend_handles)
    fig.savefig(out_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return out_path


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("files", nargs="+", help="Benchmark JSON files written with --save")
    ap.add_argument("--out", default="./results/guess_distribution.png", help="Output image")
    args = ap.parse_args(argv)

    results = []
    for name in args.files:
        with Path(name).open("r", encoding="utf-8") as f:
            results.append(json.load(f))

    for result in results:
        stats = compute_guess_stats(result)
        print(
            f"{_run_label(result)}: {stats['games']} codes, "
            f"mean {stats['mean']:.3f}, max {stats['max']:.0f}, p90 {stats['p90']:.0f}"
        )

    out = plot_guess_distribution(results, args.out)
    print(f"Plot written to {out}")


if __name__ == "__main__":
    main()
