"""
Diagnostics for the SMS instrument: first-stage F, a random common cause
and the sign of the complier share.
"""

from ivprimer import IV2SLS, load_malaria_data

df = load_malaria_data()

result = IV2SLS(treatment="net_use", outcome="malaria", instrument="sms").fit(df)
report = result.refute(df)
print(report.summary())
