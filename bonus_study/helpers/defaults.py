"""Default column names and fixed constants for the bonus-depreciation study.

The panel comes as one row per state x industry x gender x year x quarter
and the exposure table as one row per industry.  The column names below
are the ones the loaders expect unless a different mapping is passed via
:class:`bonus_study.helpers.config.StudyConfig`.

The design constants (baseline quarter, treatment threshold, event window)
are data-driven choices of the study and are kept here verbatim.
"""

from __future__ import annotations

from typing import Dict, Tuple

# Panel schema
STATE_COL = "state"
INDUSTRY_COL = "industry"
SEX_COL = "sex"
YEAR_COL = "year"
QUARTER_COL = "quarter"
EMP_COL = "emp"
EARN_COL = "earnings"
MANUF_COL = "manuf"

# Exposure schema
EXPOSURE_COL = "z0"

# Gender codes used in the panel file
GENDER_LABELS: Dict[int, str] = {0: "all", 1: "male", 2: "female"}

# Event-study design
BASELINE: Tuple[int, int] = (2001, 3)
TREAT_THRESHOLD: float = 0.875
PRE_PERIODS: int = 18
POST_PERIODS: int = 41

# Derived columns added by PanelData
UNIT_ID = "unit_id"
STATE_TIME_ID = "state_time_id"
EVENT_TIME = "event_time"
TREAT = "treat"
WEIGHT = "weight"

__all__ = [
    "STATE_COL",
    "INDUSTRY_COL",
    "SEX_COL",
    "YEAR_COL",
    "QUARTER_COL",
    "EMP_COL",
    "EARN_COL",
    "MANUF_COL",
    "EXPOSURE_COL",
    "GENDER_LABELS",
    "BASELINE",
    "TREAT_THRESHOLD",
    "PRE_PERIODS",
    "POST_PERIODS",
    "UNIT_ID",
    "STATE_TIME_ID",
    "EVENT_TIME",
    "TREAT",
    "WEIGHT",
]
