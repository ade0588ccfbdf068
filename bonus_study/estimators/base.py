from __future__ import annotations

from dataclasses import dataclass

from ..helpers.config import StudyConfig


class EstimationError(RuntimeError):
    """Raised when a regression has no numerically valid solution."""


@dataclass
class BaseEstimator:
    """
    Very small common base class for the estimators in this package.

    It stores the :class:`StudyConfig` object and exposes a tiny helper
    for logging formulas, muted when ``config.verbose`` is off.
    """

    config: StudyConfig

    def _log(self, message: str) -> None:
        if getattr(self.config, "verbose", True):
            print(f"[ESTIMATOR] {message}")

    def _log_formula(self, formula: str, extra: str = "") -> None:
        msg = f"Formula: {formula}"
        if extra:
            msg += f" ({extra})"
        self._log(msg)
