"""
Weak instruments: same latent draws, instrument contribution scaled by 0.08.

The first-stage F collapses, and across repeated samples the 2SLS estimate
spreads out and drifts toward the (biased) OLS estimate.
"""

from ivprimer import compare_instrument_strength, monte_carlo
from ivprimer.simulation import summarise_monte_carlo

comparison = compare_instrument_strength(n=1_000, attenuation=0.08, seed=0)
print(comparison.summary())

draws = monte_carlo(n_sims=300, n=1_000, attenuation=0.08, seed=0)
print(summarise_monte_carlo(draws, beta=comparison.beta).round(3))
