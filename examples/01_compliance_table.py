"""
Who complied with the SMS encouragement?

Cross-tabulates assignment (sms) against take-up (net_use) and backs out
the share of compliers, always-takers and never-takers, assuming nobody
was put off using a net by the message (no defiers).
"""

from ivprimer import ComplianceTable, load_malaria_data

df = load_malaria_data()

table = ComplianceTable.from_data(df, instrument="sms", treatment="net_use")
print(table.counts)
print()
print(table.row_percentages.round(1))
print(table.summary())
