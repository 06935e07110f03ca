"""
=================
``griddist.util``
=================

Small numeric helpers shared by the distribution implementations.

.. autofunction:: griddist.util.trapezoid_integral
.. autofunction:: griddist.util.cumulative_trapezoid
.. autofunction:: griddist.util.dedup_sorted
"""
from typing import Sequence, Union

import numpy as np

ArrayLike = Union[Sequence[float], np.ndarray]


def trapezoid_integral(x: ArrayLike, y: ArrayLike) -> float:
    """
    Integrates `y` over the (not necessarily equally spaced) points `x` with
    the trapezoidal rule.

    .. doctest::

        >>> trapezoid_integral([0.0, 1.0, 2.0], [0.0, 1.0, 2.0])
        2.0
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.size < 2:
        return 0.0
    return float(np.sum(0.5 * np.diff(x) * (y[:-1] + y[1:])))


def cumulative_trapezoid(x: ArrayLike, y: ArrayLike) -> np.ndarray:
    """Running trapezoidal integral of `y` over `x`, starting at 0."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    result = np.zeros(x.size)
    if x.size > 1:
        result[1:] = np.cumsum(0.5 * np.diff(x) * (y[:-1] + y[1:]))
    return result


def dedup_sorted(values: ArrayLike) -> np.ndarray:
    """
    Sorts `values` and removes adjacent duplicates.

    .. doctest::

        >>> dedup_sorted([3.0, 1.0, 2.0, 2.0]).tolist()
        [1.0, 2.0, 3.0]
    """
    data = np.sort(np.asarray(values, dtype=float))
    if data.size < 2:
        return data
    keep = np.concatenate(([True], data[1:] != data[:-1]))
    return data[keep]
