"""
Robustness utilities for the event-study estimates.

* :mod:`bonus_study.robustness.stats` contains the pre-trend tests run
  on the lead coefficients of every fitted event study.

The most common helpers are reexported below for convenience.

Examples
--------
Compute a joint pre-trend test on a fitted event study::

    from bonus_study.robustness import joint_pretest_zero
    leads = [c for c in res.coefs["name"] if c.startswith("treat_minus")]
    joint = joint_pretest_zero(res.model, leads)
    print(joint['p_value'])

"""

from .stats.pretrend import joint_pretest_zero, pre_slope_test

__all__ = ["joint_pretest_zero", "pre_slope_test"]
