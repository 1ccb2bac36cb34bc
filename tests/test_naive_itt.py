import pytest

from ivprimer import ITT, NaiveOLS, load_malaria_data, simulate_encouragement


class TestNaiveOLS:
    def test_same_columns_raise(self):
        with pytest.raises(ValueError, match="different"):
            NaiveOLS(treatment="malaria", outcome="malaria")

    def test_missing_column_raises(self):
        df = load_malaria_data().drop(columns=["net_use"])
        with pytest.raises(ValueError, match="net_use"):
            NaiveOLS().fit(df)

    def test_slope_is_difference_in_means(self):
        df = load_malaria_data()
        naive = NaiveOLS().fit(df)
        diff = df.loc[df["net_use"] == 1, "malaria"].mean() - df.loc[df["net_use"] == 0, "malaria"].mean()
        assert naive.effect == pytest.approx(diff)
        assert naive.intercept == pytest.approx(df.loc[df["net_use"] == 0, "malaria"].mean())

    def test_shipped_estimate(self):
        naive = NaiveOLS().fit(load_malaria_data())
        assert naive.effect == pytest.approx(-0.256, abs=0.001)
        assert naive.nobs == 1000

    def test_biased_away_from_complier_effect(self):
        df = simulate_encouragement(n=20_000, seed=5, net_effect=-0.16)
        naive = NaiveOLS().fit(df)
        assert naive.effect < -0.16 - 0.05

    def test_result_attributes(self):
        naive = NaiveOLS().fit(load_malaria_data())
        lo, hi = naive.conf_int
        assert lo < naive.effect < hi
        assert naive.std_err > 0
        assert 0 <= naive.pvalue <= 1
        assert naive.tvalue == pytest.approx(naive.effect / naive.std_err)
        assert len(naive.assumptions) == 1

    def test_summaries(self):
        naive = NaiveOLS().fit(load_malaria_data())
        assert "Naive OLS" in naive.summary()
        assert "biased" in naive.executive_summary()


class TestITT:
    def test_same_columns_raise(self):
        with pytest.raises(ValueError, match="different"):
            ITT(instrument="sms", outcome="sms")

    def test_missing_column_raises(self):
        df = load_malaria_data().drop(columns=["sms"])
        with pytest.raises(ValueError, match="sms"):
            ITT().fit(df)

    def test_shipped_estimate(self):
        itt = ITT().fit(load_malaria_data())
        assert itt.effect == pytest.approx(-0.0604, abs=0.001)

    def test_itt_is_diluted_effect(self):
        """ITT ≈ complier share × complier effect."""
        df = simulate_encouragement(n=40_000, seed=9, net_effect=-0.16)
        itt = ITT().fit(df)
        assert abs(itt.effect - 0.5 * -0.16) < 0.02

    def test_summaries(self):
        itt = ITT().fit(load_malaria_data())
        assert "ITT" in itt.summary()
        assert "Intent-to-Treat" in itt.executive_summary()
        assert all(not a.testable for a in itt.assumptions)
