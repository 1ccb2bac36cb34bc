"""
Compliance tables for an encouragement design.

Cross-tabulating assignment (``sms``) against receipt (``net_use``) is the
first thing to look at: off-diagonal cells are people who did not do what
the encouragement asked of them.
"""
from __future__ import annotations

import logging

import pandas as pd

from .config import INSTRUMENT, TREATMENT
from .dataset import ALWAYS_TAKER, COMPLIER, DEFIER, NEVER_TAKER, validate_binary_columns

logger = logging.getLogger(__name__)

# Which latent compliance types can produce each observed (Z, D) cell.
POSSIBLE_TYPES: dict[tuple[int, int], tuple[str, ...]] = {
    (0, 0): (COMPLIER, NEVER_TAKER),
    (0, 1): (ALWAYS_TAKER, DEFIER),
    (1, 0): (NEVER_TAKER, DEFIER),
    (1, 1): (COMPLIER, ALWAYS_TAKER),
}


class ComplianceTable:
    """
    2×2 contingency table of instrument against treatment.

    Build it with ``ComplianceTable.from_data(df)``. Counts are indexed by
    instrument value (rows) and treatment value (columns), always including
    both 0 and 1 even when a cell is empty.

    Under monotonicity (no defiers) the table identifies the population
    shares of each compliance type::

        always-takers = P(D=1 | Z=0)
        never-takers  = P(D=0 | Z=1)
        compliers     = 1 - always-takers - never-takers
    """

    def __init__(self, counts: pd.DataFrame, instrument: str, treatment: str) -> None:
        self._counts = counts
        self._instrument = instrument
        self._treatment = treatment

    @classmethod
    def from_data(
        cls,
        data: pd.DataFrame,
        instrument: str = INSTRUMENT,
        treatment: str = TREATMENT,
    ) -> ComplianceTable:
        validate_binary_columns(data, (instrument, treatment))
        counts = pd.crosstab(data[instrument], data[treatment])
        counts = counts.reindex(index=[0, 1], columns=[0, 1], fill_value=0)
        counts.index.name = instrument
        counts.columns.name = treatment
        table = cls(counts, instrument, treatment)
        logger.debug(f"Compliance table for {instrument} × {treatment}:\n{counts}")
        return table

    @property
    def counts(self) -> pd.DataFrame:
        """Cell counts, rows = instrument value, columns = treatment value."""
        return self._counts.copy()

    @property
    def total(self) -> int:
        """Number of units in the table."""
        return int(self._counts.to_numpy().sum())

    @property
    def percentages(self) -> pd.DataFrame:
        """Cell counts as a percentage of all units."""
        return self._counts / self.total * 100

    @property
    def row_percentages(self) -> pd.DataFrame:
        """Treatment take-up within each assignment arm, in percent."""
        return self._counts.div(self._counts.sum(axis=1), axis=0) * 100

    def take_up(self, assigned: int) -> float:
        """P(D=1 | Z=assigned)."""
        row = self._counts.loc[assigned]
        return float(row[1] / row.sum())

    @property
    def always_taker_share(self) -> float:
        return self.take_up(0)

    @property
    def never_taker_share(self) -> float:
        return 1.0 - self.take_up(1)

    @property
    def complier_share(self) -> float:
        """Estimated share of compliers; equals the first-stage difference in take-up."""
        return 1.0 - self.always_taker_share - self.never_taker_share

    @property
    def compliance_shares(self) -> dict[str, float]:
        return {
            COMPLIER: self.complier_share,
            ALWAYS_TAKER: self.always_taker_share,
            NEVER_TAKER: self.never_taker_share,
        }

    @staticmethod
    def possible_types(assigned: int, treated: int) -> tuple[str, ...]:
        """Compliance types consistent with an observed (Z, D) cell."""
        return POSSIBLE_TYPES[(int(assigned), int(treated))]

    def summary(self) -> str:
        Z, D = self._instrument, self._treatment
        pct = self.percentages
        lines = [
            "",
            f"Compliance table: {Z} (rows) × {D} (columns)",
            "─" * 50,
            f"  {'':<10}{D + ' = 0':>16}{D + ' = 1':>16}",
        ]
        for z in (0, 1):
            cells = [
                f"{self._counts.loc[z, d]:>6d} ({pct.loc[z, d]:>5.1f}%)" for d in (0, 1)
            ]
            lines.append(f"  {Z + ' = ' + str(z):<10}" + "".join(f"{c:>16}" for c in cells))
        lines += [
            f"  Total units          : {self.total:>10d}",
            "",
            "  Compliance shares (assuming no defiers)",
            "  " + "┄" * 48,
            f"  Compliers            : {self.complier_share:>10.1%}",
            f"  Always-takers        : {self.always_taker_share:>10.1%}",
            f"  Never-takers         : {self.never_taker_share:>10.1%}",
            "",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()
