from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import pandas as pd

from bonus_study.helpers import defaults as D
from bonus_study.helpers.config import StudyConfig
from bonus_study.helpers.preparation import PanelData, attach_baseline_weight
from bonus_study.estimators.base import BaseEstimator
from bonus_study.estimators.event_study import EventStudyResult, event_study

SAMPLES = ("overall", "male", "female")


class EventStudyEstimator(BaseEstimator):
    """
    Thin façade over :func:`event_study`.

    Builds the three estimation samples (overall, male, female), each
    with its own baseline-quarter weight, and runs the same regression
    on each.
    """

    def __init__(self, config: StudyConfig) -> None:
        super().__init__(config)

    def _code(self, label: str) -> Optional[int]:
        for code, lab in self.config.gender_labels.items():
            if lab == label:
                return int(code)
        return None

    # ---------------------------------------------------------
    # Samples
    # ---------------------------------------------------------
    def sample(self, panel: PanelData, label: str) -> pd.DataFrame:
        """
        Rows and baseline weights for one run.

        ``overall`` uses the gender-"all" rows.  Panels that only carry male
        and female rows are pooled instead, and each unit is weighted by
        its combined baseline employment.
        """
        cfg = self.config
        df = panel.panel
        sex = df[cfg.sex_col]

        if label == "overall":
            code_all = self._code("all")
            if code_all is not None and (sex == code_all).any():
                sub = df[sex == code_all]
            else:
                codes = [c for c in (self._code("male"), self._code("female")) if c is not None]
                sub = df[sex.isin(codes)]
                self._log("no gender-'all' rows; pooling male and female rows for the overall run")
        else:
            code = self._code(label)
            if code is None:
                raise ValueError(f"Unknown gender sample {label!r}; labels are {cfg.gender_labels}.")
            sub = df[sex == code]

        if sub.empty:
            return sub.assign(**{D.WEIGHT: pd.Series(dtype=float)})
        return attach_baseline_weight(sub, cfg)

    # ---------------------------------------------------------
    # Event studies
    # ---------------------------------------------------------
    def event_study(self, panel: PanelData, label: str = "overall") -> EventStudyResult:
        sample = self.sample(panel, label)
        self._log_formula(
            f"ln({self.config.outcome_col}) ~ treat x period[-{self.config.pre}..+{self.config.post}, ref 0]"
            f" | {D.UNIT_ID} + {D.STATE_TIME_ID}",
            extra=f"{label}; weights={D.WEIGHT}; cluster={D.UNIT_ID}",
        )
        return event_study(sample, self.config, panel.interaction_cols, label=label)

    def event_study_by_sample(
        self,
        panel: PanelData,
        labels: Sequence[str] = SAMPLES,
    ) -> Dict[str, EventStudyResult]:
        """Return {label: EventStudyResult}; empty samples are skipped."""
        out: Dict[str, EventStudyResult] = {}
        for label in labels:
            res = self.event_study(panel, label)
            if res.empty:
                self._log(f"{label}: no estimates")
                continue
            out[label] = res
        return out


__all__: List[str] = ["EventStudyEstimator", "EventStudyResult", "SAMPLES"]
