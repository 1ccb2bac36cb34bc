import numpy as np
import pytest

from ivprimer import (
    compare_instrument_strength,
    monte_carlo,
    simulate_instrument_data,
    simulate_invalid_instrument,
)
from ivprimer.simulation import summarise_monte_carlo


class TestSimulateInstrumentData:
    def test_columns(self):
        df = simulate_instrument_data(n=300, seed=1)
        assert list(df.columns) == ["x_star", "c", "z", "x", "y"]
        assert len(df) == 300

    def test_latent_correlation(self):
        df = simulate_instrument_data(n=20_000, rho=0.5, seed=2)
        assert abs(df["x_star"].corr(df["c"]) - 0.5) < 0.03
        assert abs(df["z"].corr(df["c"])) < 0.03

    def test_invalid_rho_raises(self):
        with pytest.raises(ValueError, match="rho"):
            simulate_instrument_data(rho=1.0)


class TestCompareInstrumentStrength:
    def test_attenuation_lowers_f(self):
        comparison = compare_instrument_strength(n=1_000, attenuation=0.08, seed=3)
        assert comparison.strong.is_strong
        assert comparison.weak.f_stat < comparison.strong.f_stat / 10
        assert np.isfinite(comparison.weak.f_stat)
        assert comparison.weak.f_stat > 0
        assert comparison.f_ratio > 10

    def test_attenuation_lowers_first_stage_coefficient(self):
        comparison = compare_instrument_strength(n=5_000, attenuation=0.08, seed=4)
        assert abs(comparison.strong.coefficient - 1.0) < 0.1
        assert abs(comparison.weak.coefficient - 0.08) < 0.05
        assert comparison.weak.rsquared < comparison.strong.rsquared

    def test_strong_iv_beats_ols(self):
        comparison = compare_instrument_strength(n=5_000, seed=5)
        assert abs(comparison.strong_iv - comparison.beta) < 0.1
        assert comparison.strong_ols - comparison.beta > 0.15

    def test_very_weak_instrument_fails_check(self):
        comparison = compare_instrument_strength(n=1_000, attenuation=0.01, seed=6)
        assert not comparison.weak.check().passed

    def test_invalid_attenuation_raises(self):
        with pytest.raises(ValueError, match="attenuation"):
            compare_instrument_strength(attenuation=1.5)

    def test_summary(self):
        summary = compare_instrument_strength(n=500, seed=7).summary()
        assert "First-stage F" in summary
        assert "strong" in summary and "weak" in summary


class TestMonteCarlo:
    def test_columns_and_rows(self):
        draws = monte_carlo(n_sims=20, n=300, seed=8)
        assert len(draws) == 20
        assert set(draws.columns) == {
            "strong_iv", "weak_iv", "strong_ols", "weak_ols", "strong_f", "weak_f",
        }

    def test_weak_instrument_spreads_estimates(self):
        draws = monte_carlo(n_sims=60, n=500, seed=9)
        table = summarise_monte_carlo(draws, beta=1.0)
        assert abs(table.loc["strong_iv", "median_bias"]) < 0.1
        assert table.loc["weak_iv", "iqr"] > table.loc["strong_iv", "iqr"]
        assert table.loc["strong_iv", "share_f_above_threshold"] == pytest.approx(1.0)
        assert (draws["weak_f"] < draws["strong_f"]).all()

    def test_summary_uses_given_threshold(self):
        draws = monte_carlo(n_sims=20, n=300, seed=11)
        default = summarise_monte_carlo(draws, beta=1.0)
        strict = summarise_monte_carlo(draws, beta=1.0, threshold=1e9)
        assert default.loc["strong_iv", "share_f_above_threshold"] == pytest.approx(1.0)
        assert strict.loc["strong_iv", "share_f_above_threshold"] == 0.0
        assert strict.loc["weak_iv", "share_f_above_threshold"] == 0.0
        lenient = summarise_monte_carlo(draws, beta=1.0, threshold=0.0)
        assert lenient.loc["weak_iv", "share_f_above_threshold"] == pytest.approx(1.0)

    def test_invalid_n_sims_raises(self):
        with pytest.raises(ValueError, match="n_sims"):
            monte_carlo(n_sims=0)


class TestInvalidInstrument:
    def test_bias_equals_direct_effect_over_strength(self):
        exercise = simulate_invalid_instrument(n=5_000, direct_effect=0.3, seed=10)
        assert exercise.expected_bias == pytest.approx(0.3)
        assert abs(exercise.observed_bias - 0.3) < 0.1
        assert exercise.first_stage_f > 10

    def test_no_direct_effect_no_bias(self):
        exercise = simulate_invalid_instrument(n=5_000, direct_effect=0.0, seed=11)
        assert abs(exercise.observed_bias) < 0.1

    def test_zero_strength_raises(self):
        with pytest.raises(ValueError, match="instrument_strength"):
            simulate_invalid_instrument(instrument_strength=0.0)

    def test_summary(self):
        summary = simulate_invalid_instrument(n=500, seed=12).summary()
        assert "Expected IV bias" in summary
