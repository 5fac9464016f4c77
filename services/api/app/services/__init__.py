"""Business logic services.

Services contain the mention pipeline (sources, dedup, scoring,
persistence) and the reviews/widget feeds. Routes stay thin.
"""
