from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

import os
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt


# ================================
# Theme + Figure Finalizer
# ================================

@dataclass
class PlotTheme:
    """Global plotting theme used by FigFinalizer.
    Plotting functions only draw artists; every styling knob lives here.
    """
    figsize: Tuple[float, float] = (12.0, 6.0)
    dpi: int = 120

    # Fonts / sizing
    title_size: int = 16
    label_size: int = 13
    tick_size: int = 9
    legend_size: int = 11

    # Lines / grid
    grid: bool = True
    grid_style: str = "--"
    grid_alpha: float = 0.3

    # Reference lines
    zero_line: bool = True

    # Layout
    tight_layout: bool = True
    constrained_layout: bool = False

    # Colors: overall, male, female, then extras
    palette: Sequence[str] = field(default_factory=lambda: [
        "#2563eb",  # blue
        "#0f766e",  # teal
        "#db2777",  # pink
        "#f59e0b",  # amber
        "#6b7280",  # gray
    ])


class FigFinalizer:
    """Wraps plotting functions with figure creation, styling and saving.

    Usage:
        FIG = FigFinalizer()

        @FIG(xlabel="Quarters since 2001Q3")
        def plot_something(data, ax, palette):
            ax.plot(data["x"], data["y"])
            return {}

        fig, ax, out = plot_something(df, title="Title", save="out.png")
    """
    def __init__(self, theme: Optional[PlotTheme] = None, default_save_dir: Optional[str] = None, show_default: bool = False):
        self.theme = theme or PlotTheme()
        self.default_save_dir = default_save_dir
        self.show_default = show_default

    # ---------- low-level helpers ----------

    def new_figure(
        self,
        nrows: int = 1,
        ncols: int = 1,
        figsize: Optional[Tuple[float, float]] = None,
        sharex: bool = False,
        sharey: bool = False,
        squeeze: bool = True,
    ) -> Tuple[plt.Figure, Union[plt.Axes, np.ndarray]]:
        fig = plt.figure(figsize=figsize or self.theme.figsize, dpi=self.theme.dpi, constrained_layout=self.theme.constrained_layout)
        axes = fig.subplots(nrows=nrows, ncols=ncols, sharex=sharex, sharey=sharey, squeeze=squeeze)
        return fig, axes

    def _apply_axes_style(self, ax: plt.Axes, *, title: Optional[str], xlabel: Optional[str], ylabel: Optional[str], legend: Union[bool, str], legend_loc: str, zero_line: Optional[bool] = None):
        if title is not None:
            ax.set_title(title, fontsize=self.theme.title_size)
        if xlabel is not None:
            ax.set_xlabel(xlabel, fontsize=self.theme.label_size)
        if ylabel is not None:
            ax.set_ylabel(ylabel, fontsize=self.theme.label_size)

        if self.theme.grid:
            ax.grid(True, linestyle=self.theme.grid_style, alpha=self.theme.grid_alpha)

        if self.theme.zero_line if zero_line is None else zero_line:
            ax.axhline(0.0, color="0.25", linewidth=1, linestyle="--", alpha=0.6, zorder=0)

        for tick in ax.get_xticklabels():
            tick.set_fontsize(self.theme.tick_size)
        for tick in ax.get_yticklabels():
            tick.set_fontsize(self.theme.tick_size)

        if legend:
            handles, labels = ax.get_legend_handles_labels()
            if len(labels) > 0:
                ax.legend(handles, labels, loc=legend_loc, fontsize=self.theme.legend_size, frameon=False)

    def resolve_path(self, save: str) -> str:
        if self.default_save_dir and not os.path.isabs(save):
            os.makedirs(self.default_save_dir, exist_ok=True)
            return os.path.join(self.default_save_dir, save)
        parent = os.path.dirname(save)
        if parent:
            os.makedirs(parent, exist_ok=True)
        return save

    def finalize(
        self,
        fig: plt.Figure,
        axes: Union[plt.Axes, Iterable[plt.Axes]],
        *,
        suptitle: Optional[str] = None,
        save: Optional[str] = None,
        show: Optional[bool] = None,
        close: bool = False,
        tight_layout: Optional[bool] = None,
    ) -> Optional[str]:
        """Lay out, save and/or show ``fig``; returns the saved path, if any."""
        if tight_layout if tight_layout is not None else self.theme.tight_layout:
            fig.tight_layout()

        if suptitle:
            fig.suptitle(suptitle, fontsize=self.theme.title_size, y=1.02)

        path = None
        if save:
            path = self.resolve_path(save)
            fig.savefig(path, dpi=self.theme.dpi, bbox_inches="tight")

        if show if show is not None else self.show_default:
            plt.show()
        if close:
            plt.close(fig)
        return path

    def __call__(self, **preset_style):
        """Return a decorator that wraps a plotting function.

        The wrapped function receives ``ax`` and ``palette`` and draws
        artists only; titles, labels, legend and saving happen here.
        """
        def decorator(plot_func: Callable[..., Dict[str, Any]]):
            def wrapper(
                *args,
                title: Optional[str] = None,
                xlabel: Optional[str] = None,
                ylabel: Optional[str] = None,
                legend: Union[bool, str] = "auto",
                legend_loc: str = "best",
                save: Optional[str] = None,
                show: Optional[bool] = None,
                close: bool = False,
                ax: Optional[plt.Axes] = None,
                figsize: Optional[Tuple[float, float]] = None,
                palette: Optional[Sequence[str]] = None,
                **kwargs,
            ) -> Tuple[plt.Figure, plt.Axes, Dict[str, Any]]:
                created = False
                if ax is None:
                    fig, ax = self.new_figure(figsize=figsize)[0:2]
                    created = True
                else:
                    fig = ax.get_figure()

                # call-site values win over presets unless left as None
                style = dict(preset_style)
                for key, val in dict(title=title, xlabel=xlabel, ylabel=ylabel).items():
                    if val is not None or key not in style:
                        style[key] = val
                style.update(legend=legend, legend_loc=legend_loc)

                out = plot_func(*args, ax=ax, palette=(palette or self.theme.palette), **kwargs) or {}

                self._apply_axes_style(ax, **style)

                if created:
                    out["path"] = self.finalize(fig, ax, save=save, show=show, close=close)

                return fig, ax, out
            wrapper.__name__ = plot_func.__name__
            wrapper.__doc__ = plot_func.__doc__
            return wrapper
        return decorator


# Global instance used by plotting helpers below
FIG = FigFinalizer()


# ================================
# Data helpers
# ================================

def coefficient_points(result: Any) -> pd.DataFrame:
    """(event_time, beta, lo, hi) ordered by offset; the reference 0 never appears."""
    coefs = getattr(result, "coefs", result)
    if coefs is None or len(coefs) == 0:
        return pd.DataFrame(columns=["event_time", "beta", "lo", "hi"])
    d = coefs.loc[coefs["event_time"] != 0, ["event_time", "beta", "lo", "hi"]]
    d = d.sort_values("event_time").reset_index(drop=True)
    d["event_time"] = d["event_time"].astype(int)
    return d


def _offset_ticks(ax: plt.Axes, offsets: Sequence[int]) -> None:
    ticks = sorted(int(k) for k in offsets)
    ax.set_xticks(ticks)
    ax.set_xticklabels([str(k) for k in ticks], rotation=90)


# ================================
# Data drawing functions
# ================================

@FIG(title="Bonus depreciation exposure by industry", xlabel="z0", ylabel="Industries", zero_line=False)
def plot_exposure_histogram(
    z0: Union[pd.Series, np.ndarray],
    ax: plt.Axes,
    palette: Sequence[str],
    threshold: Optional[float] = None,
    bins: int = 30,
) -> Dict[str, Any]:
    """Histogram of z0 with the treatment threshold marked."""
    x = pd.to_numeric(pd.Series(z0), errors="coerce").dropna().values
    ax.hist(x, bins=bins, color=palette[0], alpha=0.85)
    if threshold is not None:
        ax.axvline(float(threshold), linestyle="--", linewidth=1.5, color="0.2", label=f"threshold = {threshold:g}")
    return {"n": len(x)}


@FIG(title="Total employment by gender", xlabel="Year", ylabel="Employment", zero_line=False)
def plot_employment_series(
    ts: pd.DataFrame,
    ax: plt.Axes,
    palette: Sequence[str],
    time_col: str = "yq",
    event_x: Optional[float] = None,
) -> Dict[str, Any]:
    """One line per gender column of :func:`employment_time_series` output."""
    series = [c for c in ts.columns if c != time_col]
    for i, col in enumerate(series):
        ax.plot(ts[time_col], ts[col], linewidth=2, color=palette[i % len(palette)], label=str(col))
    if event_x is not None:
        ax.axvline(float(event_x), color="0.2", linestyle="-", linewidth=1.2, alpha=0.7)
    return {"n_series": len(series)}


@FIG(title="Event study", xlabel="Quarters since 2001Q3", ylabel="Effect on ln(employment)")
def plot_event_study_line(
    points: pd.DataFrame,
    ax: plt.Axes,
    palette: Sequence[str],
    ref_x: Optional[float] = 0.0,
    color_idx: int = 0,
    label: Optional[str] = None,
) -> Dict[str, Any]:
    """Connected dots with 95% CI error bars, one per estimated offset."""
    d = coefficient_points(points)
    x = d["event_time"].astype(float).values
    beta = d["beta"].astype(float).values
    lo = d["lo"].astype(float).values
    hi = d["hi"].astype(float).values
    color = palette[color_idx % len(palette)]

    ax.errorbar(
        x, beta, yerr=[beta - lo, hi - beta],
        fmt="o", color=color, capsize=3, linewidth=1.2, markersize=4, label=label,
    )
    ax.plot(x, beta, linewidth=1.5, color=color, alpha=0.6, zorder=0)

    # policy quarter: between -1 and +1
    if ref_x is not None:
        ax.axvline(float(ref_x), color="0.2", linestyle="-", linewidth=1.2, alpha=0.7)

    _offset_ticks(ax, d["event_time"])
    return {"n": len(d)}


@FIG(title="Event study by gender", xlabel="Quarters since 2001Q3", ylabel="Effect on ln(employment)")
def plot_event_study_by_gender(
    results: Mapping[str, Any],
    ax: plt.Axes,
    palette: Sequence[str],
    dodge: float = 0.15,
    ref_x: Optional[float] = 0.0,
) -> Dict[str, Any]:
    """Overlay several event studies, shifted horizontally so CIs stay readable."""
    offsets = set()
    labels = list(results)
    for i, label in enumerate(labels):
        d = coefficient_points(results[label])
        if d.empty:
            continue
        shift = (i - (len(labels) - 1) / 2.0) * dodge
        x = d["event_time"].astype(float).values + shift
        beta = d["beta"].astype(float).values
        color = palette[(i + 1) % len(palette)]
        ax.errorbar(
            x, beta,
            yerr=[beta - d["lo"].astype(float).values, d["hi"].astype(float).values - beta],
            fmt="o", color=color, capsize=2, linewidth=1.0, markersize=3.5, label=str(label),
        )
        ax.plot(x, beta, linewidth=1.2, color=color, alpha=0.6, zorder=0)
        offsets.update(d["event_time"].tolist())

    if ref_x is not None:
        ax.axvline(float(ref_x), color="0.2", linestyle="-", linewidth=1.2, alpha=0.7)
    _offset_ticks(ax, offsets)
    return {"n_series": len(labels)}


__all__ = [
    "PlotTheme",
    "FigFinalizer",
    "FIG",
    "coefficient_points",
    "plot_exposure_histogram",
    "plot_employment_series",
    "plot_event_study_line",
    "plot_event_study_by_gender",
]
