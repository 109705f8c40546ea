"""Tolerant floating point comparisons.

Costs are sums of many products of (single precision) energy constants and
communication volumes, so two mappings of equal quality rarely produce exactly
equal costs. These comparisons, after Knuth (The Art of Computer Programming,
Vol. 2, 4.2.2), treat values within a relative epsilon of each other as equal.

All functions accept Python numbers or numpy arrays (in which case the
comparison is made element-wise).
"""

import numpy as np

EPSILON = float(np.finfo(np.float32).eps)
"""The relative tolerance used by all comparisons in this module."""


def _scale(a, b):
    return np.maximum(np.abs(a), np.abs(b)) * EPSILON


def approximately_equal(a, b):
    """True iff a and b are within a relative epsilon of each other."""
    return np.abs(a - b) <= _scale(a, b)


def definitely_greater_than(a, b):
    """True iff a exceeds b by more than a relative epsilon."""
    return (a - b) > _scale(a, b)


def definitely_less_than(a, b):
    """True iff a falls below b by more than a relative epsilon."""
    return (b - a) > _scale(a, b)
