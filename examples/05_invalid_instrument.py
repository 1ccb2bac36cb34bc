"""
Exercise: break the exclusion restriction.

If the SMS also changed malaria through some other channel, the instrument
would have a direct effect on the outcome. The first stage stays strong, so
no diagnostic notices, but 2SLS is off by direct_effect / strength.
"""

from ivprimer import simulate_invalid_instrument

for direct_effect in [0.0, 0.1, 0.3, 0.5]:
    exercise = simulate_invalid_instrument(n=5_000, direct_effect=direct_effect, seed=0)
    print(exercise.summary())
