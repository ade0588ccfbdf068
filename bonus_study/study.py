# bonus_study/study.py

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import matplotlib.pyplot as plt

from .helpers.config import StudyConfig
from .helpers.loading import load_inputs
from .helpers.preparation import PanelData
from .helpers.utils import year_quarter
from .estimator import SAMPLES, EventStudyEstimator
from .estimators.event_study import EventStudyResult
from .reporting.descriptives import employment_time_series, exposure_summary, reference_quarter_stats
from .reporting.plotting import (
    plot_employment_series,
    plot_event_study_by_gender,
    plot_event_study_line,
    plot_exposure_histogram,
)


@dataclass
class BonusStudyResult:
    """Container for all outputs of a BonusStudy run."""
    config: StudyConfig
    data: PanelData

    descriptives: Dict[str, Any] = field(default_factory=dict)
    event_studies: Dict[str, EventStudyResult] = field(default_factory=dict)

    # Artifacts
    merged_path: Optional[str] = None
    figures: Dict[str, str] = field(default_factory=dict)


class BonusStudy:
    """Orchestrates the full pipeline: load, describe, merge, estimate, plot."""

    def __init__(self, config: StudyConfig) -> None:
        self.config = config
        self._estimator: Optional[EventStudyEstimator] = None
        self._panel: Optional[PanelData] = None

    @property
    def estimator(self) -> EventStudyEstimator:
        if self._estimator is None:
            raise RuntimeError("Estimator not initialised yet. Call .run().")
        return self._estimator

    @property
    def panel(self) -> PanelData:
        if self._panel is None:
            raise RuntimeError("Panel not prepared yet. Call .run().")
        return self._panel

    def run(self, *, run_plots: bool = True) -> BonusStudyResult:
        """
        Run the full study.

        Parameters
        ----------
        run_plots : bool
            If True, draw the histogram, employment series and coefficient
            plots.  Figures are saved under ``config.artifact_dir`` when set.

        Returns
        -------
        BonusStudyResult
            Container with the prepared panel, descriptives and the three
            event-study fits.
        """
        cfg = self.config

        # 1) Load
        raw_panel, exposure = load_inputs(cfg)

        # 2) Descriptives (on the raw panel)
        descriptives = {
            "reference_stats": reference_quarter_stats(raw_panel, cfg),
            "employment_series": employment_time_series(raw_panel, cfg),
            "exposure": exposure_summary(exposure, cfg),
        }

        # 3) Merge + event-time design
        panel = PanelData(cfg, raw_panel, exposure)
        self._panel = panel
        result = BonusStudyResult(config=cfg, data=panel, descriptives=descriptives)

        # 4) Persist merged table
        if cfg.artifact_dir:
            result.merged_path = panel.save(str(Path(cfg.artifact_dir) / "merged_panel.joblib"))

        # 5) Estimate: overall, male, female
        self._estimator = EventStudyEstimator(cfg)
        result.event_studies = self.estimator.event_study_by_sample(panel, SAMPLES)

        # 6) Figures
        if run_plots:
            result.figures = self._plot(exposure, result)

        return result

    def _plot(self, exposure, result: BonusStudyResult) -> Dict[str, str]:
        cfg = self.config
        out_dir = Path(cfg.artifact_dir) if cfg.artifact_dir else None
        figures: Dict[str, str] = {}

        def _keep(name: str, out: Dict[str, Any]) -> None:
            if out.get("path"):
                figures[name] = out["path"]

        _, _, out = plot_exposure_histogram(
            exposure[cfg.exposure_col],
            threshold=cfg.treat_threshold,
            save=str(out_dir / "z0_histogram.png") if out_dir else None,
            show=cfg.show_plots,
            close=not cfg.show_plots,
        )
        _keep("z0_histogram", out)

        _, _, out = plot_employment_series(
            result.descriptives["employment_series"],
            event_x=year_quarter(cfg.base_year, cfg.base_quarter),
            save=str(out_dir / "employment_by_gender.png") if out_dir else None,
            show=cfg.show_plots,
            close=not cfg.show_plots,
        )
        _keep("employment_by_gender", out)

        for label, res in result.event_studies.items():
            _, _, out = plot_event_study_line(
                res,
                title=f"Event study: ln({cfg.outcome_col}), {label}",
                ylabel=f"Effect on ln({cfg.outcome_col})",
                color_idx=list(SAMPLES).index(label) if label in SAMPLES else 0,
                save=str(out_dir / f"event_study_{label}.png") if out_dir else None,
                show=cfg.show_plots,
                close=not cfg.show_plots,
            )
            _keep(f"event_study_{label}", out)

        by_gender = {k: v for k, v in result.event_studies.items() if k in ("male", "female")}
        if len(by_gender) == 2:
            _, _, out = plot_event_study_by_gender(
                by_gender,
                ylabel=f"Effect on ln({cfg.outcome_col})",
                save=str(out_dir / "event_study_by_gender.png") if out_dir else None,
                show=cfg.show_plots,
                close=not cfg.show_plots,
            )
            _keep("event_study_by_gender", out)

        if not cfg.show_plots:
            plt.close("all")
        return figures


__all__ = ["BonusStudy", "BonusStudyResult"]
