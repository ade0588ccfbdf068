# config.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional

import pandas as pd

from . import defaults as D


@dataclass
class StudyConfig:
    # =========================
    # Core data
    # =========================
    # Either pass frames directly or point at the delimited files.
    panel_df: Optional[pd.DataFrame] = None
    exposure_df: Optional[pd.DataFrame] = None
    panel_path: Optional[str] = None
    exposure_path: Optional[str] = None
    sep: Optional[str] = None  # None -> let pandas sniff the delimiter

    # =========================
    # Panel schema
    # =========================
    state_col: str = D.STATE_COL
    industry_col: str = D.INDUSTRY_COL
    sex_col: str = D.SEX_COL
    year_col: str = D.YEAR_COL
    quarter_col: str = D.QUARTER_COL
    emp_col: str = D.EMP_COL
    earn_col: str = D.EARN_COL
    manuf_col: str = D.MANUF_COL
    exposure_col: str = D.EXPOSURE_COL
    gender_labels: Dict[int, str] = field(default_factory=lambda: dict(D.GENDER_LABELS))

    # =========================
    # Sample
    # =========================
    manufacturing_only: bool = False
    # Level variable whose log is the regression outcome.
    outcome_col: str = D.EMP_COL

    # =========================
    # Event-study design
    # =========================
    base_year: int = D.BASELINE[0]
    base_quarter: int = D.BASELINE[1]
    treat_threshold: float = D.TREAT_THRESHOLD  # treated iff z0 < threshold
    pre: int = D.PRE_PERIODS
    post: int = D.POST_PERIODS

    # Descriptives reference quarter (defaults to the baseline)
    ref_year: Optional[int] = None
    ref_quarter: Optional[int] = None

    # =========================
    # Estimation
    # =========================
    fixef_tol: float = 1e-8      # pyfixest demeaning tolerance
    alpha: float = 0.05

    # =========================
    # Artifacts / output
    # =========================
    artifact_dir: Optional[str] = None
    show_plots: bool = False
    verbose: bool = True

    @property
    def reference_quarter(self) -> tuple:
        return (
            self.ref_year if self.ref_year is not None else self.base_year,
            self.ref_quarter if self.ref_quarter is not None else self.base_quarter,
        )

    def copy(self) -> "StudyConfig":
        # Frames are shared; the gender map is copied
        return StudyConfig(
            panel_df=self.panel_df,
            exposure_df=self.exposure_df,
            panel_path=self.panel_path,
            exposure_path=self.exposure_path,
            sep=self.sep,
            state_col=self.state_col,
            industry_col=self.industry_col,
            sex_col=self.sex_col,
            year_col=self.year_col,
            quarter_col=self.quarter_col,
            emp_col=self.emp_col,
            earn_col=self.earn_col,
            manuf_col=self.manuf_col,
            exposure_col=self.exposure_col,
            gender_labels=dict(self.gender_labels),
            manufacturing_only=self.manufacturing_only,
            outcome_col=self.outcome_col,
            base_year=self.base_year,
            base_quarter=self.base_quarter,
            treat_threshold=self.treat_threshold,
            pre=self.pre,
            post=self.post,
            ref_year=self.ref_year,
            ref_quarter=self.ref_quarter,
            fixef_tol=self.fixef_tol,
            alpha=self.alpha,
            artifact_dir=self.artifact_dir,
            show_plots=self.show_plots,
            verbose=self.verbose,
        )
