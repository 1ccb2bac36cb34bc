import numpy as np
import pandas as pd

from ivprimer import IV2SLS, IVRefutationReport, RefutationCheck, load_malaria_data


RNG = np.random.default_rng(42)
N = 2_000


def make_weak_instrument_data():
    """sms barely moves net use (F < 10)."""
    sms = RNG.integers(0, 2, size=N)
    net_use = (RNG.random(N) < 0.5).astype(int)
    malaria = (RNG.random(N) < 0.4 - 0.1 * net_use).astype(int)
    return pd.DataFrame({"sms": sms, "net_use": net_use, "malaria": malaria})


def make_reversed_instrument_data():
    """Encouraged units take up the treatment less often than the rest."""
    sms = np.repeat([0, 1], N // 2)
    net_use = np.where(sms == 1, RNG.random(N) < 0.2, RNG.random(N) < 0.7).astype(int)
    malaria = (RNG.random(N) < 0.4 - 0.1 * net_use).astype(int)
    return pd.DataFrame({"sms": sms, "net_use": net_use, "malaria": malaria})


class TestIVRefutationReport:
    def test_shipped_data_passes(self):
        df = load_malaria_data()
        report = IV2SLS().fit(df).refute(df)
        assert isinstance(report, IVRefutationReport)
        assert report.passed
        assert report.failed_checks == []

    def test_check_names(self):
        df = load_malaria_data()
        report = IV2SLS().fit(df).refute(df)
        names = [c.name for c in report.checks]
        assert names == [
            "First-stage F-statistic",
            "Random common cause",
            "Monotonicity (complier share)",
        ]

    def test_weak_instrument_fails_first_stage(self):
        df = make_weak_instrument_data()
        report = IV2SLS().fit(df).refute(df)
        assert not report.passed
        first = report.checks[0]
        assert not first.passed
        assert "Weak instrument" in first.detail

    def test_reversed_instrument_fails_monotonicity(self):
        df = make_reversed_instrument_data()
        report = IV2SLS().fit(df).refute(df)
        mono = next(c for c in report.checks if c.name.startswith("Monotonicity"))
        assert not mono.passed

    def test_summary_labels(self):
        df = load_malaria_data()
        summary = IV2SLS().fit(df).refute(df).summary()
        assert "PASS" in summary
        assert "All checks passed." in summary
        assert "Instrument: sms" in summary

    def test_summary_fail_labels(self):
        df = make_weak_instrument_data()
        summary = IV2SLS().fit(df).refute(df).summary()
        assert "FAIL" in summary
        assert "check(s) failed" in summary

    def test_checks_returns_copy(self):
        df = load_malaria_data()
        report = IV2SLS().fit(df).refute(df)
        report.checks.clear()
        assert len(report.checks) == 3

    def test_random_common_cause_leaves_data_untouched(self):
        df = load_malaria_data()
        before = df.copy()
        IV2SLS().fit(df).refute(df)
        pd.testing.assert_frame_equal(df, before)


class TestRefutationCheck:
    def test_repr_and_status(self):
        check = RefutationCheck(name="x", passed=False, detail="d")
        assert check.status == "FAIL"
        assert "FAIL" in repr(check)
