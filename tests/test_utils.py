import pandas as pd
import pytest

from bonus_study.helpers.utils import (
    event_time,
    interaction_name,
    offset_from_name,
    period_name,
    quarter_ordinal,
    window_offsets,
    year_quarter,
)


@pytest.mark.parametrize(
    "year, quarter, expected",
    [
        (2001, 3, 0),
        (1999, 1, -10),
        (2011, 4, 41),
        (2012, 1, None),
        (1997, 1, -18),
        (1996, 4, None),
        (2001, 2, -1),
        (2001, 4, 1),
    ],
)
def test_event_time_scalar(year, quarter, expected):
    assert event_time(year, quarter) == expected


def test_event_time_vectorised_matches_scalar():
    years = pd.Series([1996, 1997, 1999, 2001, 2011, 2012])
    quarters = pd.Series([4, 1, 1, 3, 4, 1])
    out = event_time(years, quarters)
    assert str(out.dtype) == "Int64"
    assert out.isna().tolist() == [True, False, False, False, False, True]
    assert out.dropna().astype(int).tolist() == [-18, -10, 0, 41]


def test_event_time_keeps_index():
    years = pd.Series([2001, 2002], index=[10, 20])
    quarters = pd.Series([3, 3], index=[10, 20])
    out = event_time(years, quarters)
    assert list(out.index) == [10, 20]
    assert out.tolist() == [0, 4]


def test_quarter_arithmetic():
    assert quarter_ordinal(2001, 3) - quarter_ordinal(1999, 1) == 10
    assert year_quarter(2001, 3) == pytest.approx(2001.5)


def test_names_round_trip():
    for k in (-18, -1, 0, 1, 41):
        assert offset_from_name(period_name(k)) == k
        assert offset_from_name(interaction_name(k)) == k
    assert period_name(-10) == "period_minus10"
    assert period_name(41) == "period_plus41"
    assert offset_from_name("ln_emp") is None


def test_window_offsets():
    full = window_offsets(18, 41)
    assert len(full) == 60 and full[0] == -18 and full[-1] == 41
    no_ref = window_offsets(18, 41, include_reference=False)
    assert len(no_ref) == 59 and 0 not in no_ref
