"""Reporting utilities for the ``bonus_study`` package.

This subpackage collects the descriptive tables, the matplotlib
figures (exposure histogram, employment series, event-study
coefficient plots) and the console summary of a study run.

Users may import these functions directly from this subpackage.  For
example::

    from bonus_study.reporting import print_study_summary, plot_event_study_line

"""

from .descriptives import employment_time_series, exposure_summary, reference_quarter_stats
from .plotting import (
    FIG,
    FigFinalizer,
    PlotTheme,
    coefficient_points,
    plot_employment_series,
    plot_event_study_by_gender,
    plot_event_study_line,
    plot_exposure_histogram,
)
from .summary import print_study_summary

__all__ = [
    "employment_time_series",
    "exposure_summary",
    "reference_quarter_stats",
    "FIG",
    "FigFinalizer",
    "PlotTheme",
    "coefficient_points",
    "plot_employment_series",
    "plot_event_study_by_gender",
    "plot_event_study_line",
    "plot_exposure_histogram",
    "print_study_summary",
]
