"""Plot one channel with its window captions shaded underneath."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt

from ..types import TimeSeries, WindowCaption
from .styles import LABEL_COLORS, apply_style


def plot_captions(
    series: TimeSeries,
    captions: Sequence[WindowCaption],
    *,
    title: str = "Structural captions",
    ylabel: str = "Phase (rad)",
    ax=None,
):
    """Draw ``series`` and shade each captioned window by its label.

    Returns the matplotlib figure.
    """

    apply_style()
    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure

    ax.plot(series.time, series.value, color="black")
    seen = set()
    for caption in captions:
        label = caption.label
        ax.axvspan(
            caption.start_time,
            caption.end_time,
            color=LABEL_COLORS[label],
            alpha=0.15,
            label=label.value if label not in seen else None,
        )
        seen.add(label)

    ax.set_title(title)
    ax.set_xlabel("Time (s)")
    ax.set_ylabel(ylabel)
    if seen:
        ax.legend(loc="best", fontsize="small")
    return fig


def save_or_show(fig, save: str | Path | None = None, show: bool = False) -> None:
    """Save ``fig`` to ``save`` and/or display it, then close it if saved."""

    if save:
        fig.savefig(save, bbox_inches="tight")
    if show:
        plt.show()
    if save and not show:
        plt.close(fig)
