import pandas as pd
import pytest

from bonus_study.helpers.config import StudyConfig
from bonus_study.helpers.loading import clean_panel, load_exposure, load_inputs, load_panel


def test_load_csv_files(synthetic, tmp_path):
    panel, exposure = synthetic
    p = tmp_path / "panel.csv"
    e = tmp_path / "exposure.csv"
    panel.to_csv(p, index=False)
    exposure.to_csv(e, index=False)

    cfg = StudyConfig(panel_path=str(p), exposure_path=str(e))
    got_panel, got_exposure = load_inputs(cfg)
    assert len(got_panel) == len(panel)
    assert set(got_panel["gender"]) == {"all", "male", "female"}
    assert got_exposure["z0"].tolist() == pytest.approx(exposure["z0"].tolist())


def test_delimiter_is_sniffed(synthetic, tmp_path):
    panel, _ = synthetic
    p = tmp_path / "panel.txt"
    panel.head(50).to_csv(p, index=False, sep=";")
    got = load_panel(str(p), StudyConfig())
    assert len(got) == 50
    assert "emp" in got.columns


def test_explicit_separator(synthetic, tmp_path):
    _, exposure = synthetic
    e = tmp_path / "exposure.tsv"
    exposure.to_csv(e, index=False, sep="\t")
    got = load_exposure(str(e), StudyConfig(sep="\t"))
    assert len(got) == len(exposure)


def test_missing_columns_raise(synthetic):
    panel, _ = synthetic
    with pytest.raises(ValueError, match="Missing columns"):
        clean_panel(panel.drop(columns=["emp"]), StudyConfig())


def test_duplicate_panel_key_raises(synthetic):
    panel, _ = synthetic
    with pytest.raises(ValueError, match="not unique"):
        clean_panel(pd.concat([panel, panel.head(1)]), StudyConfig())


def test_malformed_cells_become_missing(synthetic):
    panel, _ = synthetic
    panel = panel.head(10).copy()
    panel["emp"] = panel["emp"].astype(object)
    panel.loc[0, "emp"] = "n/a"
    panel.loc[1, "quarter"] = 7
    got = clean_panel(panel, StudyConfig())
    assert len(got) == 10
    assert pd.isna(got.loc[0, "emp"])
    assert pd.isna(got.loc[1, "year"]) and pd.isna(got.loc[1, "quarter"])
    assert str(got["year"].dtype) == "Int64"
    assert got["year"].notna().sum() == 9


def test_manufacturing_only(synthetic):
    panel, _ = synthetic
    got = clean_panel(panel, StudyConfig(manufacturing_only=True))
    assert (got["manuf"] == 1).all()
    assert set(got["industry"]) == {10, 11}


def test_inputs_required():
    with pytest.raises(ValueError):
        load_inputs(StudyConfig())
