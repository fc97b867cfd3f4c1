"""repcount: streaming exercise repetition counting.

This package smooths a 1D joint-position signal, confirms local extrema as
samples arrive, matches the extremum sequence against a per-action pattern and
gates matches on time windows reported by an external action classifier.
"""

__all__ = [
    "config",
]

__version__ = "0.1.0"
