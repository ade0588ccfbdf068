"""Public API for the estimators subpackage.

This module reexports the absorbed-FE regression, the event-study
estimator and their result containers for convenience.  Users may
import these names directly from :mod:`bonus_study.estimators`.
"""

from .base import BaseEstimator, EstimationError
from .event_study import AbsorbedFit, EventStudyResult, event_study, fe_formula, fit_absorbed_wls, outcome_name

__all__ = [
    "BaseEstimator",
    "EstimationError",
    "AbsorbedFit",
    "EventStudyResult",
    "event_study",
    "fe_formula",
    "fit_absorbed_wls",
    "outcome_name",
]
