"""Domain models and rate resolution for the fx rates engine.

Everything in this package works on already-materialised, in-memory rate and
peg tables. Fetching and loading published rates lives in ``services``.
"""

__all__ = [
    "currency",
    "fx_calculator",
    "fx_rates",
    "pegs",
    "providers",
]
