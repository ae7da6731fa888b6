"""Baltic BESS Signal Engine.

Collects Baltic electricity-market signals, serves them through a
freshness-aware cache, and projects per-MW battery storage revenue.
"""

__version__ = "0.1.0"
