"""
The :mod:`bonus_study` package estimates how the 2001 bonus-depreciation
policy change affected state-by-industry employment, separately for men
and women.  It takes a quarterly state x industry x gender panel of
employment and earnings and an industry-level exposure score ``z0`` and
runs an event study around 2001Q3 with two absorbed fixed effects.

The package exposes three core classes:

``PanelData``
    Merges ``z0`` onto the panel, sets the treatment flag (``z0 < 0.875``),
    places each quarter on the event-time axis (-18..+41 quarters around
    2001Q3) and builds the period indicators and their treatment
    interactions.  See :class:`bonus_study.helpers.preparation.PanelData`.

``EventStudyEstimator``
    Regresses log employment on the treatment x period interactions,
    absorbing state x industry and state x time fixed effects with
    pyfixest, weighting by baseline-quarter employment and
    clustering by state x industry.  It runs the overall, male and female
    samples.  See :class:`bonus_study.estimator.EventStudyEstimator`.

``BonusStudy``
    A high-level orchestrator that wires together loading, descriptives,
    panel preparation, estimation and plotting.  Users instantiate this
    class with a :class:`bonus_study.helpers.config.StudyConfig` and call
    :meth:`bonus_study.study.BonusStudy.run`.

Notes
-----
The reference period is the policy quarter itself (offset 0), so every
coefficient reads as the treated-minus-control difference in log
employment relative to 2001Q3.  Leads are reported together with a joint
Wald test and a linear-trend test; following Roth (2022) these are meant
for reporting, not for choosing between models.
"""

from .helpers.config import StudyConfig
from .helpers.preparation import PanelData
from .estimator import EventStudyEstimator
from .study import BonusStudy, BonusStudyResult

__all__ = ["StudyConfig", "PanelData", "EventStudyEstimator", "BonusStudy", "BonusStudyResult"]
