from __future__ import annotations

import math
from typing import Optional, Sequence

from griddist.config import DEFAULT_CONFIG, DistributionConfig
from griddist.distribution.distribution import Distribution, DistributionType
from griddist.util.random_source import RandomSource


class LinearDistribution(Distribution):
    """
    Triangular distribution whose density grows linearly from zero at the lower
    bound to its peak at the upper bound, or falls from the lower to the upper
    bound when not ascending.
    """

    _type = DistributionType.LINEAR

    def __init__(self,
                 lower_bound: float = 0.0,
                 upper_bound: float = 1.0,
                 ascending: bool = True,
                 config: Optional[DistributionConfig] = None,
                 random_source: Optional[RandomSource] = None):
        super().__init__(config, random_source)
        self._ascending = bool(ascending)
        self._closed_form = True
        self.define_boundaries(lower_bound, upper_bound)
        self.define_resolution((self._ub - self._lb) / (self._config.n_samples - 1))

    @classmethod
    def from_parameters(cls, parameters: Sequence[float], **kwargs) -> LinearDistribution:
        """
        Builds the distribution from ``[lower_bound, upper_bound, ascend]``. A
        missing or non-increasing upper bound is replaced by a minimal interval
        above the lower one; ``ascend <= 0`` selects a falling density.
        """
        config = kwargs.get("config") or DEFAULT_CONFIG
        lb, ub, ascending = 0.0, 1.0, True
        if len(parameters) > 0:
            lb = float(parameters[0])
            if len(parameters) > 1 and parameters[1] > lb:
                ub = float(parameters[1])
                if len(parameters) > 2 and parameters[2] <= 0.0:
                    ascending = False
            else:
                ub = lb + config.min_interval
        return cls(lb, ub, ascending, **kwargs)

    @property
    def ascending(self) -> bool:
        return self._ascending

    @ascending.setter
    def ascending(self, value: bool) -> None:
        value = bool(value)
        if value == self._ascending:
            return
        self._ascending = value
        if self._pdf.size > 0:
            self.generate_pdf()
            self._closed_form = True
            self.calculate_cdf()

    def parameters(self):
        return [self._lb, self._ub, 1.0 if self._ascending else 0.0]

    def generate_z(self) -> None:
        self.generate_equally_spaced_z()

    def generate_pdf(self) -> None:
        z = self._ensure_z()
        span = self._ub - self._lb
        peak = 2.0 / span
        if self._ascending:
            self._pdf = peak * (z - self._lb) / span
        else:
            self._pdf = peak * (self._ub - z) / span

    def sample(self) -> float:
        """ Inverts the closed-form CDF instead of interpolating the quantile table. """
        if not self._closed_form:
            return super().sample()
        r = self._random_source.draw_uniform()
        span = self._ub - self._lb
        if self._ascending:
            return self._lb + math.sqrt(r) * span
        return self._ub - math.sqrt(1.0 - r) * span

    def negate(self) -> LinearDistribution:
        super().negate()
        self._ascending = not self._ascending
        return self

    def _reshaped(self) -> None:
        self._closed_form = False
