from typing import Union

import numpy as np

from griddist.util import ArrayLike


class LinearInterpolator:
    """
    Piecewise-linear interpolation over an ordered table. Queries outside the
    table are clamped to the value at the nearest edge.
    """

    def __init__(self, x: ArrayLike, y: ArrayLike):
        self._x = np.asarray(x, dtype=float)
        self._y = np.asarray(y, dtype=float)

    @property
    def x(self) -> np.ndarray:
        return self._x

    @property
    def y(self) -> np.ndarray:
        return self._y

    def define_xy(self, x: ArrayLike, y: ArrayLike) -> None:
        """Re-binds the interpolator to a new table."""
        self._x = np.asarray(x, dtype=float)
        self._y = np.asarray(y, dtype=float)

    def interpolate(self, query: Union[float, ArrayLike]) -> Union[float, np.ndarray]:
        # x may contain runs of equal values (flat CDF regions); np.interp
        # resolves those to one of the run's entries.
        result = np.interp(query, self._x, self._y)
        if np.ndim(result) == 0:
            return float(result)
        return result
