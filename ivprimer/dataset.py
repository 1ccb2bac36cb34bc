"""
The malaria / mosquito-net encouragement dataset.

Every row is one surveyed individual:

- ``sms``      assigned to receive SMS reminders to use a net (instrument Z)
- ``net_use``  actually slept under a mosquito net (treatment D)
- ``malaria``  diagnosed with malaria at follow-up (outcome Y)

The shipped CSV was drawn from the design implemented by
``simulate_encouragement``: each person has a latent compliance type, and
that type also shifts their baseline malaria risk, which is what makes
``net_use`` endogenous.
"""
from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from ._exceptions import DatasetError
from .config import DATA_PATH, INSTRUMENT, OUTCOME, RANDOM_SEED, TREATMENT

logger = logging.getLogger(__name__)

BINARY_COLUMNS: tuple[str, ...] = (INSTRUMENT, TREATMENT, OUTCOME)

ALWAYS_TAKER = "always-taker"
NEVER_TAKER = "never-taker"
COMPLIER = "complier"
DEFIER = "defier"

# Households that would use a net anyway are the health-conscious ones, so
# they start from a lower risk; never-takers start from the highest.
DEFAULT_BASELINE_RISK: dict[str, float] = {
    ALWAYS_TAKER: 0.22,
    COMPLIER: 0.38,
    NEVER_TAKER: 0.45,
}


def validate_binary_columns(
    data: pd.DataFrame, columns: tuple[str, ...] = BINARY_COLUMNS
) -> None:
    """
    Raise ``DatasetError`` unless every column in ``columns`` is present
    and holds only 0/1 values.
    """
    for col in columns:
        if col not in data.columns:
            raise DatasetError(
                f"Column '{col}' not found in dataframe. "
                f"Available columns: {sorted(data.columns)}"
            )
        values = data[col]
        if values.isna().any() or not values.isin([0, 1]).all():
            bad = sorted(set(values[~values.isin([0, 1])].astype(str)))
            raise DatasetError(
                f"Column '{col}' must be binary (0/1); found values {bad[:5]}."
            )


def load_malaria_data(path: str | Path | None = None) -> pd.DataFrame:
    """
    Load the encouragement-design dataset.

    Parameters
    ----------
    path : str or Path, optional
        CSV file to read. Defaults to the copy shipped with the package.

    Raises
    ------
    ``FileNotFoundError``
        If ``path`` does not exist.
    ``DatasetError``
        If ``sms``, ``net_use`` or ``malaria`` is missing or not binary.
    """
    path = Path(path) if path is not None else DATA_PATH
    logger.info(f"Loading malaria dataset from {path}")
    data = pd.read_csv(path)
    validate_binary_columns(data)
    for col in BINARY_COLUMNS:
        data[col] = data[col].astype(int)
    logger.info(f"Loaded {len(data)} rows with columns {list(data.columns)}")
    return data


def simulate_encouragement(
    n: int = 1_000,
    seed: int | None = RANDOM_SEED,
    always_taker_share: float = 0.2,
    never_taker_share: float = 0.3,
    sms_share: float = 0.5,
    net_effect: float = -0.16,
    baseline_risk: dict[str, float] | None = None,
) -> pd.DataFrame:
    """
    Draw a fresh dataset from the encouragement design.

    Data generating process::

        type     ~ Categorical(always-taker, never-taker, complier)   [latent]
        sms      ~ Bernoulli(sms_share)                               [instrument]
        net_use  = 1 for always-takers, 0 for never-takers, sms for compliers
        malaria  ~ Bernoulli(baseline_risk[type] + net_effect * net_use)

    There are no defiers, so monotonicity holds by construction and the
    2SLS estimate targets ``net_effect`` (the effect among compliers).

    The returned frame also carries the latent ``complier_type`` column,
    which a real survey would never observe.
    """
    if always_taker_share < 0 or never_taker_share < 0:
        raise ValueError("Compliance-type shares must be non-negative.")
    if always_taker_share + never_taker_share >= 1:
        raise ValueError(
            "always_taker_share + never_taker_share must be below 1 "
            "so that some units comply with the encouragement."
        )
    if not 0 < sms_share < 1:
        raise ValueError(f"sms_share must lie strictly between 0 and 1, got {sms_share}.")

    risk = dict(DEFAULT_BASELINE_RISK if baseline_risk is None else baseline_risk)
    rng = np.random.default_rng(seed)

    complier_share = 1.0 - always_taker_share - never_taker_share
    types = rng.choice(
        [ALWAYS_TAKER, NEVER_TAKER, COMPLIER],
        size=n,
        p=[always_taker_share, never_taker_share, complier_share],
    )
    sms = (rng.random(n) < sms_share).astype(int)
    net_use = np.where(
        types == ALWAYS_TAKER, 1, np.where(types == NEVER_TAKER, 0, sms)
    )
    base = np.array([risk[t] for t in types])
    p_malaria = np.clip(base + net_effect * net_use, 0.0, 1.0)
    malaria = (rng.random(n) < p_malaria).astype(int)

    logger.debug(
        f"Simulated {n} units: {complier_share:.0%} compliers, net effect {net_effect}"
    )
    return pd.DataFrame({
        "id": np.arange(1, n + 1),
        INSTRUMENT: sms,
        TREATMENT: net_use.astype(int),
        OUTCOME: malaria,
        "complier_type": types,
    })
