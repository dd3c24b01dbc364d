from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from commit_hours.data import HOUR_LABELS, HOURS, Histogram

FIGSIZE = (10, 4)
BAR_COLOR = "tab:blue"
SVG_HASH_SALT = "commit-hours"

# keys that would otherwise embed the render time or library version
METADATA: dict[str, dict[str, None]] = {
    "png": {"Software": None},
    "svg": {"Date": None, "Creator": None},
    "pdf": {"CreationDate": None, "Creator": None, "Producer": None},
}
FORMATS: tuple[str, ...] = tuple(METADATA)


def resolve_format(output_file: Path, fmt: str | None = None) -> str:
    fmt = (fmt or Path(output_file).suffix.lstrip(".")).lower()
    if fmt not in FORMATS:
        raise ValueError(
            f"Unsupported image format '{fmt}' for {output_file}, "
            f"use one of: {', '.join(FORMATS)}"
        )
    return fmt


def build_hours_chart(histogram: Histogram, title: str) -> Figure:
    if len(histogram) != HOURS:
        raise ValueError(f"Expected {HOURS} buckets, got {len(histogram)}")

    fig, ax = plt.subplots(figsize=FIGSIZE)
    ax.bar(HOUR_LABELS, histogram, color=BAR_COLOR)
    ax.set_title(title)
    ax.set_xlabel("Hour of Day")
    ax.set_ylabel("Number of Commits")
    ax.yaxis.get_major_locator().set_params(integer=True)
    fig.tight_layout()
    return fig


def plot_hours(
    histogram: Histogram, output_file: Path, title: str, fmt: str | None = None
) -> None:
    fmt = resolve_format(output_file, fmt)
    fig = build_hours_chart(histogram, title)
    try:
        with plt.rc_context({"svg.hashsalt": SVG_HASH_SALT}):
            fig.savefig(output_file, format=fmt, metadata=METADATA[fmt])
    finally:
        plt.close(fig)
