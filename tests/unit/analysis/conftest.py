"""Shared fixtures for analysis tests."""

import pandas as pd
import pytest


@pytest.fixture
def sample_raw_df():
    """Raw records: 2 sexes x 2 inclusion statuses, 2 subjects each.

    fat + bmd + lean is always 100, so LBM equals lean.
    """
    return pd.DataFrame(
        {
            "id": [1, 2, 3, 4, 5, 6, 7, 8],
            "fat": [25.0, 15.0, 30.0, 28.0, 18.0, 14.0, 22.0, 20.0],
            "bmd": [5.0, 5.0, 4.0, 4.0, 6.0, 6.0, 6.0, 6.0],
            "lean": [70.0, 80.0, 66.0, 68.0, 76.0, 80.0, 72.0, 74.0],
            "age": [20.0, 24.0, 30.0, 34.0, 40.0, 46.0, 50.0, 52.0],
            "height": [160.0, 170.0, 165.0, 163.0, 180.0, 184.0, 176.0, 178.0],
            "weight": [55.0, 65.0, 70.0, 68.0, 80.0, 84.0, 90.0, 88.0],
            "sex": ["F", "F", "F", "F", "M", "M", "M", "M"],
            "incl": ["incl", "incl", "excl", "excl", "incl", "incl", "excl", "excl"],
        }
    )


@pytest.fixture
def sample_derived_df(sample_raw_df):
    """Derived records built from sample_raw_df."""
    from bodycomp.analysis.dataframes import derive_lbm

    return derive_lbm(sample_raw_df)


@pytest.fixture
def sample_aggregates_df(sample_derived_df):
    """Long-form aggregates for age, height, weight and LBM."""
    from bodycomp.analysis.dataframes import aggregate

    return aggregate(sample_derived_df, ["sex", "incl"], ["age", "height", "weight", "LBM"])


@pytest.fixture
def single_member_raw_df(sample_raw_df):
    """Raw records where the M/excl partition has a single subject."""
    return sample_raw_df[sample_raw_df["id"] != 8].reset_index(drop=True)


@pytest.fixture
def zero_denominator_raw_df(sample_raw_df):
    """Raw records where subject 3 has fat = bmd = lean = 0."""
    df = sample_raw_df.copy()
    df.loc[df["id"] == 3, ["fat", "bmd", "lean"]] = 0.0
    return df


@pytest.fixture
def sample_csv(tmp_path, sample_raw_df):
    """Sample dataset written with the source file's header names."""
    path = tmp_path / "bodycomp.csv"
    sample_raw_df.rename(columns={"id": "ID", "bmd": "BMD"}).to_csv(path, index=False)
    return path


@pytest.fixture
def sample_display_df():
    """Small display table with four group columns."""
    return pd.DataFrame(
        {
            "F_excl": ["32.0 (2.8)", "75.0 (7.1)"],
            "F_incl": ["22.0 (2.8)", "67.0 (1.4)"],
            "M_excl": ["51.0 (1.4)", "73.0 (1.4)"],
            "M_incl": ["43.0 (4.2)", "78.0 (NA)"],
        },
        index=pd.Index(["age", "LBM"], name="variable"),
    )

