"""
Three answers to "do nets prevent malaria?".

    naive : malaria ~ net_use           biased, net users are lower-risk anyway
    ITT   : malaria ~ sms               effect of sending the SMS
    LATE  : malaria ~ net_use | sms     effect of the net among compliers

The LATE equals the Wald ratio Cov(Y, Z) / Cov(D, Z) = ITT / first stage.
"""

from ivprimer import IV2SLS, FirstStage, load_malaria_data, wald_ratio

df = load_malaria_data()

fs = FirstStage(instrument="sms", treatment="net_use").fit(df)
print(fs.summary())

result = IV2SLS(treatment="net_use", outcome="malaria", instrument="sms").fit(df)
print(result.naive.summary())
print(result.itt.summary())
print(result.summary())

print(f"Wald ratio by hand: {wald_ratio(df, 'malaria', 'net_use', 'sms'):.4f}")
print()
print(result.executive_summary())
