"""
Statistical diagnostics for the event study.

* :mod:`bonus_study.robustness.stats.pretrend` - joint and linear
  pre-trend tests for the lead coefficients.
"""
