import numpy as np
import pandas as pd
import pytest

from ivprimer import FirstStage, load_malaria_data


RNG = np.random.default_rng(42)
N = 2_000


def make_data(strength):
    z = RNG.normal(size=N)
    x = strength * z + RNG.normal(size=N)
    return pd.DataFrame({"z": z, "x": x})


class TestFirstStageValidation:
    def test_same_columns_raise(self):
        with pytest.raises(ValueError, match="different"):
            FirstStage(instrument="sms", treatment="sms")

    def test_non_positive_threshold_raises(self):
        with pytest.raises(ValueError, match="threshold"):
            FirstStage(threshold=0)

    def test_missing_instrument_column_raises(self):
        df = load_malaria_data().drop(columns=["sms"])
        with pytest.raises(ValueError, match="Instrument column"):
            FirstStage().fit(df)

    def test_missing_treatment_column_raises(self):
        df = load_malaria_data().drop(columns=["net_use"])
        with pytest.raises(ValueError, match="Treatment column"):
            FirstStage().fit(df)


class TestFirstStageOnShippedData:
    def test_coefficient_positive_and_strong(self):
        fs = FirstStage(instrument="sms", treatment="net_use").fit(load_malaria_data())
        assert fs.coefficient > 0
        assert fs.f_stat > 10
        assert fs.is_strong

    def test_coefficient_is_take_up_difference(self):
        df = load_malaria_data()
        fs = FirstStage().fit(df)
        diff = df.loc[df["sms"] == 1, "net_use"].mean() - df.loc[df["sms"] == 0, "net_use"].mean()
        assert fs.coefficient == pytest.approx(diff)

    def test_f_is_squared_t(self):
        fs = FirstStage().fit(load_malaria_data())
        t = fs.coefficient / fs.std_err
        assert fs.f_stat == pytest.approx(t ** 2)

    def test_f_matches_model_f(self):
        fs = FirstStage().fit(load_malaria_data())
        assert fs.f_stat == pytest.approx(float(fs.statsmodels_result.fvalue))
        assert 0 <= fs.f_pvalue <= 1
        assert 0 < fs.rsquared < 1


class TestFirstStageStrength:
    def test_weak_instrument_flagged(self):
        fs = FirstStage(instrument="z", treatment="x").fit(make_data(0.0))
        assert not fs.is_strong
        check = fs.check()
        assert not check.passed
        assert "Weak instrument" in check.detail

    def test_strong_instrument_passes(self):
        fs = FirstStage(instrument="z", treatment="x").fit(make_data(1.0))
        check = fs.check()
        assert check.passed
        assert check.name == "First-stage F-statistic"

    def test_custom_threshold(self):
        df = make_data(1.0)
        fs = FirstStage(instrument="z", treatment="x", threshold=1e9).fit(df)
        assert not fs.is_strong
        assert fs.threshold == 1e9

    def test_summary(self):
        summary = FirstStage().fit(load_malaria_data()).summary()
        assert "F-statistic" in summary
        assert "strong" in summary
