"""School attendance package.

Feature modules (attendance, users, settings, scoring, reports) each keep a
thin Flask controller over service/repository layers. The attendance engine
and the score aggregator are pure and take their configuration explicitly.
"""
