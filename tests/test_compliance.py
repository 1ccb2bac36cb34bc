import pandas as pd
import pytest

from ivprimer import ComplianceTable, load_malaria_data, simulate_encouragement


class TestComplianceTable:
    def test_counts_sum_to_rows(self):
        df = load_malaria_data()
        table = ComplianceTable.from_data(df)
        assert int(table.counts.to_numpy().sum()) == len(df)
        assert table.total == len(df)

    def test_shipped_counts(self):
        table = ComplianceTable.from_data(load_malaria_data())
        counts = table.counts
        assert counts.loc[0, 0] == 415
        assert counts.loc[0, 1] == 105
        assert counts.loc[1, 0] == 156
        assert counts.loc[1, 1] == 324

    def test_percentages_sum_to_100(self):
        table = ComplianceTable.from_data(load_malaria_data())
        assert table.percentages.to_numpy().sum() == pytest.approx(100.0)
        for row in table.row_percentages.sum(axis=1):
            assert row == pytest.approx(100.0)

    def test_empty_cells_are_kept(self):
        df = pd.DataFrame({"sms": [0, 0, 1, 1], "net_use": [0, 0, 1, 1]})
        table = ComplianceTable.from_data(df)
        assert table.counts.shape == (2, 2)
        assert table.counts.loc[0, 1] == 0
        assert table.complier_share == pytest.approx(1.0)

    def test_shares_sum_to_one(self):
        table = ComplianceTable.from_data(load_malaria_data())
        assert sum(table.compliance_shares.values()) == pytest.approx(1.0)
        assert table.complier_share == pytest.approx(table.take_up(1) - table.take_up(0))

    def test_recovers_simulated_shares(self):
        df = simulate_encouragement(
            n=20_000, seed=11, always_taker_share=0.2, never_taker_share=0.3
        )
        table = ComplianceTable.from_data(df)
        assert abs(table.always_taker_share - 0.2) < 0.02
        assert abs(table.never_taker_share - 0.3) < 0.02
        assert abs(table.complier_share - 0.5) < 0.03

    def test_possible_types(self):
        assert set(ComplianceTable.possible_types(1, 1)) == {"complier", "always-taker"}
        assert set(ComplianceTable.possible_types(0, 0)) == {"complier", "never-taker"}
        assert "defier" in ComplianceTable.possible_types(0, 1)

    def test_summary_mentions_shares(self):
        summary = ComplianceTable.from_data(load_malaria_data()).summary()
        assert "Compliers" in summary
        assert "Always-takers" in summary
        assert "Total units" in summary
