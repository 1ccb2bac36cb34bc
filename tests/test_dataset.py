import numpy as np
import pandas as pd
import pytest

from ivprimer import DatasetError, load_malaria_data, simulate_encouragement
from ivprimer.dataset import BINARY_COLUMNS, validate_binary_columns


class TestLoadMalariaData:
    def test_shipped_dataset_shape(self):
        df = load_malaria_data()
        assert len(df) == 1000
        for col in BINARY_COLUMNS:
            assert col in df.columns

    def test_shipped_dataset_is_binary(self):
        df = load_malaria_data()
        for col in BINARY_COLUMNS:
            assert set(df[col].unique()) <= {0, 1}

    def test_returns_fresh_copy(self):
        first = load_malaria_data()
        first["sms"] = 0
        second = load_malaria_data()
        assert second["sms"].sum() > 0

    def test_missing_file_propagates(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_malaria_data(tmp_path / "nope.csv")

    def test_missing_column_raises(self, tmp_path):
        path = tmp_path / "data.csv"
        pd.DataFrame({"sms": [0, 1], "net_use": [0, 1]}).to_csv(path, index=False)
        with pytest.raises(DatasetError, match="malaria"):
            load_malaria_data(path)

    def test_non_binary_column_raises(self, tmp_path):
        path = tmp_path / "data.csv"
        pd.DataFrame({"sms": [0, 2], "net_use": [0, 1], "malaria": [1, 0]}).to_csv(path, index=False)
        with pytest.raises(DatasetError, match="binary"):
            load_malaria_data(path)

    def test_dataset_error_is_value_error(self):
        df = pd.DataFrame({"sms": [0, 1]})
        with pytest.raises(ValueError):
            validate_binary_columns(df)

    def test_missing_values_rejected(self):
        df = pd.DataFrame({"sms": [0, np.nan], "net_use": [0, 1], "malaria": [1, 0]})
        with pytest.raises(DatasetError, match="sms"):
            validate_binary_columns(df)


class TestSimulateEncouragement:
    def test_columns_and_binary(self):
        df = simulate_encouragement(n=500, seed=1)
        assert len(df) == 500
        validate_binary_columns(df)
        assert set(df["complier_type"].unique()) <= {"always-taker", "never-taker", "complier"}

    def test_same_seed_same_data(self):
        a = simulate_encouragement(n=200, seed=7)
        b = simulate_encouragement(n=200, seed=7)
        pd.testing.assert_frame_equal(a, b)

    def test_compliance_types_determine_net_use(self):
        df = simulate_encouragement(n=2_000, seed=3)
        assert (df.loc[df["complier_type"] == "always-taker", "net_use"] == 1).all()
        assert (df.loc[df["complier_type"] == "never-taker", "net_use"] == 0).all()
        compliers = df[df["complier_type"] == "complier"]
        assert (compliers["net_use"] == compliers["sms"]).all()

    def test_invalid_shares_raise(self):
        with pytest.raises(ValueError, match="below 1"):
            simulate_encouragement(always_taker_share=0.6, never_taker_share=0.4)
        with pytest.raises(ValueError, match="non-negative"):
            simulate_encouragement(always_taker_share=-0.1)
        with pytest.raises(ValueError, match="sms_share"):
            simulate_encouragement(sms_share=1.0)
