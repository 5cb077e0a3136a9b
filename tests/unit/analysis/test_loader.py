"""Unit tests for the dataset loader."""

import logging

import numpy as np
import pytest

from bodycomp.analysis.errors import MalformedInput, ResourceUnavailable
from bodycomp.analysis.loader import REQUIRED_COLUMNS, load_dataset


def test_load_dataset_renames_source_headers(sample_csv):
    """Test source headers are mapped onto canonical names."""
    df = load_dataset(sample_csv)

    for col in REQUIRED_COLUMNS:
        assert col in df.columns
    assert "ID" not in df.columns
    assert "BMD" not in df.columns
    assert len(df) == 8


def test_load_dataset_types(sample_csv):
    """Test measurement columns are float and group keys are strings."""
    df = load_dataset(sample_csv)

    for col in ["fat", "bmd", "lean", "age", "height", "weight"]:
        assert df[col].dtype == np.float64
    assert set(df["sex"]) == {"F", "M"}
    assert set(df["incl"]) == {"incl", "excl"}


def test_load_dataset_custom_separator(tmp_path, sample_raw_df):
    """Test a semicolon-delimited file with explicit sep."""
    path = tmp_path / "bodycomp_semicolon.csv"
    sample_raw_df.to_csv(path, index=False, sep=";")

    df = load_dataset(path, sep=";")
    assert len(df) == 8
    assert df["age"].tolist() == sample_raw_df["age"].tolist()


def test_load_dataset_wrong_separator_is_malformed(tmp_path, sample_raw_df):
    """Test a file read with the wrong delimiter reports missing columns."""
    path = tmp_path / "bodycomp_semicolon.csv"
    sample_raw_df.to_csv(path, index=False, sep=";")

    with pytest.raises(MalformedInput):
        load_dataset(path, sep=",")


def test_load_dataset_missing_file(tmp_path):
    """Test a missing file raises ResourceUnavailable."""
    path = tmp_path / "does_not_exist.csv"

    with pytest.raises(ResourceUnavailable) as exc_info:
        load_dataset(path)

    assert exc_info.value.source == str(path)


def test_load_dataset_directory(tmp_path):
    """Test a directory path raises ResourceUnavailable."""
    with pytest.raises(ResourceUnavailable):
        load_dataset(tmp_path)


def test_load_dataset_empty_file(tmp_path):
    """Test an empty file raises MalformedInput."""
    path = tmp_path / "empty.csv"
    path.write_text("")

    with pytest.raises(MalformedInput):
        load_dataset(path)


def test_load_dataset_missing_column(tmp_path, sample_raw_df):
    """Test a missing measurement column is reported by name."""
    path = tmp_path / "no_lean.csv"
    sample_raw_df.drop(columns=["lean"]).to_csv(path, index=False)

    with pytest.raises(MalformedInput) as exc_info:
        load_dataset(path)

    assert exc_info.value.missing_columns == ["lean"]
    assert "lean" in str(exc_info.value)


def test_load_dataset_non_numeric_measurement(tmp_path, sample_raw_df):
    """Test text in a measurement column raises MalformedInput."""
    df = sample_raw_df.astype({"age": object})
    df.loc[0, "age"] = "twenty"
    path = tmp_path / "bad_age.csv"
    df.to_csv(path, index=False)

    with pytest.raises(MalformedInput, match="age"):
        load_dataset(path)


def test_load_dataset_empty_group_key(tmp_path, sample_raw_df):
    """Test a record without a sex value raises MalformedInput."""
    df = sample_raw_df.copy()
    df.loc[2, "sex"] = None
    path = tmp_path / "no_sex.csv"
    df.to_csv(path, index=False)

    with pytest.raises(MalformedInput, match="sex"):
        load_dataset(path)


def test_load_dataset_empty_measurement_stays_nan(tmp_path, sample_raw_df):
    """Test an empty measurement cell is loaded as NaN, not rejected."""
    df = sample_raw_df.copy()
    df.loc[0, "weight"] = np.nan
    path = tmp_path / "missing_weight.csv"
    df.to_csv(path, index=False)

    loaded = load_dataset(path)
    assert np.isnan(loaded.loc[0, "weight"])


def test_load_dataset_keeps_extra_columns(tmp_path, sample_raw_df):
    """Test unknown columns survive loading."""
    path = tmp_path / "extra.csv"
    sample_raw_df.assign(site="A").to_csv(path, index=False)

    df = load_dataset(path)
    assert (df["site"] == "A").all()


def test_load_dataset_custom_mapping(tmp_path, sample_raw_df):
    """Test an explicit column mapping overrides the config mapping."""
    path = tmp_path / "renamed.csv"
    sample_raw_df.rename(columns={"sex": "gender"}).to_csv(path, index=False)

    df = load_dataset(path, columns={"gender": "sex"})
    assert "sex" in df.columns


def test_load_dataset_logs_row_count(sample_csv, caplog):
    """Test the loader reports how many records it read."""
    with caplog.at_level(logging.INFO, logger="bodycomp.analysis.loader"):
        load_dataset(sample_csv)

    assert any("Loaded 8 records" in r.getMessage() for r in caplog.records)

def test_load_dataset_header_only(tmp_path):
    """Test a file with a header but no records raises MalformedInput."""
    path = tmp_path / "header_only.csv"
    path.write_text("ID,fat,BMD,lean,age,height,weight,sex,incl\n")

    with pytest.raises(MalformedInput, match="no records"):
        load_dataset(path)


def test_load_dataset_blank_group_key(tmp_path, sample_raw_df):
    """Test a whitespace-only sex value is rejected like an empty one."""
    df = sample_raw_df.copy()
    df.loc[0, "sex"] = "   "
    path = tmp_path / "blank_sex.csv"
    df.to_csv(path, index=False)

    with pytest.raises(MalformedInput, match="sex") as exc_info:
        load_dataset(path)

    assert "[1]" in str(exc_info.value)


def test_load_dataset_strips_group_keys(tmp_path, sample_raw_df):
    """Test surrounding whitespace is removed from group values."""
    df = sample_raw_df.copy()
    df.loc[0, "sex"] = " F "
    path = tmp_path / "padded_sex.csv"
    df.to_csv(path, index=False)

    loaded = load_dataset(path)
    assert set(loaded["sex"]) == {"F", "M"}


def test_load_dataset_custom_group_keys(tmp_path, sample_raw_df):
    """Test other grouping columns are required and validated instead."""
    path = tmp_path / "site.csv"
    sample_raw_df.assign(site=["A", "B"] * 4).drop(columns=["incl"]).to_csv(path, index=False)

    df = load_dataset(path, group_keys=["sex", "site"])
    assert set(df["site"]) == {"A", "B"}

    with pytest.raises(MalformedInput) as exc_info:
        load_dataset(path)
    assert exc_info.value.missing_columns == ["incl"]
