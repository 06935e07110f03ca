from __future__ import annotations

import copy
import logging
import math
from abc import ABC, abstractmethod
from enum import Enum, auto
from numbers import Real
from typing import (TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple,
                    Union)

import numpy as np

from griddist.config import DEFAULT_CONFIG, DistributionConfig
from griddist.util import (ArrayLike, cumulative_trapezoid, dedup_sorted,
                           trapezoid_integral)
from griddist.util import random_source as _random
from griddist.util.interpolator import LinearInterpolator
from griddist.util.logger import log_setup

if TYPE_CHECKING:
    from griddist.distribution.linear_distribution import LinearDistribution
    from griddist.distribution.merged_distribution import MergedDistribution

logger = log_setup(__name__, logging.DEBUG)


class DistributionType(Enum):
    """ Identifies the concrete variant of a distribution. """
    GENERIC = auto()
    LINEAR = auto()
    MERGED = auto()


Operand = Union[float, "Distribution"]


def _empty() -> np.ndarray:
    return np.empty(0)


class Distribution:
    """
    A one-dimensional probability distribution represented by its density on a
    discrete grid of `z` samples spanning the support `[lower_bound, upper_bound]`.

    The grid, the PDF table and the CDF table are built lazily on first use and
    cached until an operation replaces them. The generic distribution is uniform;
    variants override :meth:`generate_z`, :meth:`generate_pdf` and :meth:`sample`.

    The arithmetic methods (:meth:`add`, :meth:`subtract`, :meth:`multiply`,
    :meth:`divide`, :meth:`reciprocal`, :meth:`negate`) mutate the receiver and
    return it. The operators ``+ - * /`` and unary ``-`` work on copies instead.
    None of them raise for degenerate input: a division by a support touching
    zero is replaced by a uniform distribution over the matching part of the
    real line.
    """

    _type = DistributionType.GENERIC

    def __init__(self,
                 config: Optional[DistributionConfig] = None,
                 random_source: Optional[_random.RandomSource] = None):
        self._config = config if config is not None else DEFAULT_CONFIG
        self._random_source = random_source if random_source is not None else _random.DEFAULT_SOURCE
        self._lb = 0.0
        self._ub = 1.0
        self._dz = (self._ub - self._lb) / (self._config.min_n_samples - 1)
        self._n_samples = 0
        self._z = _empty()
        self._pdf = _empty()
        self._cdf = _empty()
        self._interpolators: Dict[str, LinearInterpolator] = {}

    @property
    def type(self) -> DistributionType:
        return self._type

    @property
    def config(self) -> DistributionConfig:
        return self._config

    @property
    def random_source(self):
        return self._random_source

    @random_source.setter
    def random_source(self, source) -> None:
        self._random_source = source

    @property
    def lower_bound(self) -> float:
        return self._lb

    @property
    def upper_bound(self) -> float:
        return self._ub

    @property
    def resolution(self) -> float:
        """ The target spacing between adjacent grid samples. """
        return self._dz

    @property
    def sample_count(self) -> int:
        return self._ensure_z().size

    def parameters(self) -> List[float]:
        """ The parameters that define this variant. The generic distribution has none. """
        return []

    def copy(self) -> Distribution:
        """ Returns an independent copy. Interpolator caches are rebuilt on demand. """
        clone = copy.copy(self)
        clone._z = self._z.copy()
        clone._pdf = self._pdf.copy()
        clone._cdf = self._cdf.copy()
        clone._interpolators = {}
        return clone

    # ---------------------------------------------------------------- grid

    def define_boundaries(self, lb: float, ub: float) -> None:
        """
        Sets the support to `[lb, ub]`. An empty or inverted range is widened by
        the configured minimum interval. An existing grid is stretched onto the
        new support (not resampled) and an existing PDF is renormalised.
        """
        lb, ub = float(lb), float(ub)
        if lb >= ub:
            min_interval = self._config.min_interval
            if lb == 0.0:
                ub = min_interval
            elif lb > 0.0:
                ub = lb * (1.0 + min_interval)
            else:
                lb = ub * (1.0 + min_interval)
            logger.debug("Degenerate support, widened to [%s, %s]", lb, ub)

        old_lb = self._lb
        ratio = (ub - lb) / (self._ub - self._lb)
        self._lb = lb
        self._ub = ub
        self._snap_resolution(self._dz * ratio)

        if self._z.size > 0:
            z = lb + ratio * (self._z - old_lb)
            z[0] = lb
            z[-1] = ub
            self._z = z

        if self._pdf.size > 0:
            self.normalize()

    def define_resolution(self, dz: float) -> None:
        """
        Sets the target spacing of the grid. The stored value is shrunk so that the
        support is an integer multiple of it. Non-positive values are ignored.

        An existing PDF is resampled onto an equally spaced grid of the new
        resolution; an existing grid without a PDF is dropped and rebuilt lazily.
        """
        if not dz > 0:
            logger.debug("Ignoring non-positive resolution %s", dz)
            return
        old_dz = self._dz
        self._snap_resolution(dz)
        if self._dz == old_dz or self._z.size == 0:
            return
        if self._pdf.size != self._z.size:
            self._clear_tables()
            return
        previous = LinearInterpolator(self._z, self._pdf)
        self.generate_equally_spaced_z()
        self._pdf = np.asarray(previous.interpolate(self._z))
        self._cdf = _empty()
        self.normalize()

    def _snap_resolution(self, dz: float) -> None:
        span = self._ub - self._lb
        count = span / dz
        # rounds the number of intervals up, never down; the epsilon only
        # absorbs the rounding noise of the division itself
        steps = max(1, math.ceil(count - 1e-9))
        self._dz = span / steps

    def define_z(self, z: ArrayLike) -> None:
        """
        Adopts the given points (sorted, duplicates removed) as the grid and takes
        the support from its ends. A PDF of matching length is kept and
        renormalised, any other is dropped. With fewer than two distinct points the
        grid is dropped and the support collapses onto the single value instead.
        """
        values = dedup_sorted(z)
        if values.size == 0:
            logger.debug("Ignoring an empty grid")
            return
        if values.size < 2:
            logger.debug("Grid with a single point %s, defining boundaries instead", values[0])
            self._clear_tables()
            self.define_boundaries(values[0], values[0])
            return

        if values.size != self._pdf.size:
            self._pdf = _empty()
        self._cdf = _empty()
        self._z = values
        self._lb = float(values[0])
        self._ub = float(values[-1])
        self._n_samples = values.size
        if self._pdf.size > 0:
            self.normalize()

    def z_samples(self) -> np.ndarray:
        """ The grid points, generated on first use. """
        return self._ensure_z().copy()

    def generate_z(self) -> None:
        """ Builds the grid. The default is equally spaced at the stored resolution. """
        self.generate_equally_spaced_z()

    def generate_equally_spaced_z(self) -> None:
        n_samples = max(2, int(round((self._ub - self._lb) / self._dz)) + 1)
        z = self._lb + self._dz * np.arange(n_samples)
        # the last point is set exactly to avoid accumulated rounding
        z[-1] = self._ub
        self._z = z
        self._n_samples = n_samples

    def _clear_tables(self) -> None:
        self._z = _empty()
        self._pdf = _empty()
        self._cdf = _empty()
        self._n_samples = 0

    def _ensure_z(self) -> np.ndarray:
        if self._z.size == 0:
            self.generate_z()
        return self._z

    def _ensure_pdf(self) -> np.ndarray:
        if self._pdf.size == 0 or self._pdf.size != self._n_samples:
            self.generate_pdf()
            self._cdf = _empty()
        return self._pdf

    def _ensure_cdf(self) -> np.ndarray:
        if self._cdf.size == 0 or self._cdf.size != self._n_samples:
            self.calculate_cdf()
        return self._cdf

    def _interpolator(self, name: str, x: np.ndarray, y: np.ndarray) -> LinearInterpolator:
        # Tables are only ever replaced, never written in place, so identity
        # tells whether a cached interpolator is still bound to the current ones.
        interpolator = self._interpolators.get(name)
        if interpolator is None:
            interpolator = LinearInterpolator(x, y)
            self._interpolators[name] = interpolator
        elif interpolator.x is not x or interpolator.y is not y:
            interpolator.define_xy(x, y)
        return interpolator

    # ----------------------------------------------------- density / cdf

    def generate_pdf(self) -> None:
        """ Fills the PDF table. The default is the uniform density. """
        z = self._ensure_z()
        self._pdf = np.full(z.size, 1.0 / (self._ub - self._lb))

    def calculate_cdf(self) -> None:
        """
        Integrates the PDF with the trapezoidal rule and divides both tables by the
        total, so that the PDF integrates to one and the CDF ends at one. A PDF
        without any mass is replaced by the uniform density.
        """
        pdf = self._ensure_pdf()
        cdf = cumulative_trapezoid(self._z, pdf)
        factor = cdf[-1]
        if factor == 1.0:
            self._cdf = cdf
        elif factor == 0.0 or not np.isfinite(factor):
            logger.debug("PDF without finite mass (%s), falling back to uniform", factor)
            self._pdf = np.full(self._n_samples, 1.0 / (self._ub - self._lb))
            self.calculate_cdf()
        else:
            self._pdf = pdf / factor
            self._cdf = cdf / factor

    def normalize(self) -> None:
        """ Restores a unit probability mass. Does nothing while there is no PDF. """
        if self._pdf.size == 0:
            return
        self.calculate_cdf()

    def pdf(self, z: Union[None, float, ArrayLike] = None) -> Union[float, np.ndarray]:
        """
        Without an argument, returns a copy of the PDF table aligned with
        :meth:`z_samples`. Otherwise interpolates the density at `z`, which is
        zero outside the support.
        """
        table = self._ensure_pdf()
        if z is None:
            return table.copy()
        interpolator = self._interpolator("pdf", self._z, table)
        if np.ndim(z) == 0:
            z = float(z)
            if z < self._lb or z > self._ub:
                return 0.0
            return interpolator.interpolate(z)
        z = np.asarray(z, dtype=float)
        inside = (z >= self._lb) & (z <= self._ub)
        return np.where(inside, interpolator.interpolate(z), 0.0)

    def cdf(self, z: Union[None, float, ArrayLike] = None) -> Union[float, np.ndarray]:
        """
        Without an argument, returns a copy of the CDF table. Otherwise the
        cumulative probability at `z`: 0 at or below the lower bound, 1 at or above
        the upper bound, interpolated in between.
        """
        table = self._ensure_cdf()
        if z is None:
            return table.copy()
        interpolator = self._interpolator("cdf", self._z, table)
        if np.ndim(z) == 0:
            z = float(z)
            if z <= self._lb:
                return 0.0
            if z >= self._ub:
                return 1.0
            return interpolator.interpolate(z)
        z = np.asarray(z, dtype=float)
        return np.where(z <= self._lb, 0.0,
                        np.where(z >= self._ub, 1.0, interpolator.interpolate(z)))

    # -------------------------------------------------------- statistics

    def mean(self) -> float:
        self._ensure_cdf()
        return trapezoid_integral(self._z, self._z * self._pdf)

    def variance(self) -> float:
        m = self.mean()
        return trapezoid_integral(self._z, self._z * self._z * self._pdf) - m * m

    def std(self) -> float:
        # rounding can leave a vanishing variance slightly negative
        return math.sqrt(max(self.variance(), 0.0))

    def median(self) -> float:
        return self.percentile(0.5)

    def percentile(self, p: float) -> float:
        """ The position below which a fraction `p` of the probability mass lies. """
        cdf = self._ensure_cdf()
        if p >= 1.0:
            return self._ub
        if p <= 0.0:
            return self._lb
        return self._interpolator("quantile", cdf, self._z).interpolate(p)

    def sample(self) -> float:
        """ Draws a value by inverting the CDF at a uniform random number. """
        cdf = self._ensure_cdf()
        r = self._random_source.draw_uniform()
        return self._interpolator("quantile", cdf, self._z).interpolate(r)

    # -------------------------------------------------------- arithmetic

    def negate(self) -> Distribution:
        """ Mirrors the distribution around zero. """
        self._lb, self._ub = -self._ub, -self._lb
        if self._z.size == 0:
            return self
        self._z = -self._z[::-1]
        if self._pdf.size == 0:
            self._cdf = _empty()
            return self
        self._pdf = self._pdf[::-1].copy()
        self.calculate_cdf()
        return self

    def add(self, other: Operand) -> Distribution:
        """ Shifts by a number, or becomes the distribution of the sum with `other`. """
        if isinstance(other, Distribution):
            self._add_distribution(other)
        else:
            self._shift(float(other))
        return self

    def subtract(self, other: Operand) -> Distribution:
        if isinstance(other, Distribution):
            self._add_distribution(other.copy().negate())
        else:
            self._shift(-float(other))
        return self

    def multiply(self, other: Operand) -> Distribution:
        """ Scales by a number, or becomes the distribution of the product with `other`. """
        if isinstance(other, Distribution):
            self._multiply_distribution(other)
        else:
            self._scale(float(other))
        return self

    def divide(self, other: Operand) -> Distribution:
        """
        Scales by the inverse of a number (a zero divisor is ignored), or becomes the
        distribution of the quotient by `other`.
        """
        if isinstance(other, Distribution):
            self._divide_distribution(other)
        elif other == 0:
            logger.debug("Ignoring division by zero")
        else:
            self._scale(1.0 / float(other))
        return self

    def reciprocal(self) -> Distribution:
        """ Becomes the distribution of ``1 / self``. """
        if self._lb <= 0.0 <= self._ub:
            if self._lb < 0.0 < self._ub:
                support = (self._config.lowest, self._config.highest)
            elif self._lb == 0.0:
                support = (0.0, self._config.highest)
            else:
                support = (self._config.lowest, 0.0)
            self._substitute(*support)
            return self

        lb, ub = 1.0 / self._ub, 1.0 / self._lb
        z = np.linspace(lb, ub, self._config.mult_n_samples)
        inverse = np.clip(1.0 / z, self._lb, self._ub)
        density = self.pdf(inverse) * inverse * inverse
        self._replace(lb, ub, z, density)
        return self

    def _shift(self, num: float) -> None:
        self._lb += num
        self._ub += num
        if self._z.size == 0:
            return
        self._z = self._z + num
        if self._pdf.size > 0:
            self.calculate_cdf()

    def _scale(self, num: float) -> None:
        if num == 0.0:
            min_interval = self._config.min_interval
            logger.debug("Multiplication by zero, collapsing onto [0, %s]", min_interval)
            self._replace(0.0, min_interval,
                          np.array([0.0, min_interval / 2.0, min_interval]),
                          np.ones(3))
            return
        if num < 0.0:
            self.negate()
            num = -num
        self._lb *= num
        self._ub *= num
        self._dz *= num
        if self._z.size == 0:
            return
        self._z = self._z * num
        if self._pdf.size > 0:
            self.calculate_cdf()

    def _add_distribution(self, other: Distribution) -> None:
        lb_o, ub_o = other.lower_bound, other.upper_bound
        span_t, span_o = self._ub - self._lb, ub_o - lb_o
        dz = max(span_t, span_o) / self._config.conv_n_samples
        n_t = max(2, int(round(span_t / dz)) + 1)
        n_o = max(2, int(round(span_o / dz)) + 1)

        pdf_t = self.pdf(np.linspace(self._lb, self._ub, n_t))
        pdf_o = other.pdf(np.linspace(lb_o, ub_o, n_o))

        lb, ub = self._lb + lb_o, self._ub + ub_o
        z = np.linspace(lb, ub, n_t + n_o - 1)
        self._replace(lb, ub, z, np.convolve(pdf_t, pdf_o))

    def _multiply_distribution(self, other: Distribution) -> None:
        lb_o, ub_o = other.lower_bound, other.upper_bound
        corners = (self._lb * lb_o, self._lb * ub_o, self._ub * lb_o, self._ub * ub_o)
        lb, ub = min(corners), max(corners)

        n_samples = self._config.mult_n_samples
        z = np.linspace(lb, ub, n_samples)
        z_t = np.linspace(self._lb, self._ub, n_samples)
        dz_t = (self._ub - self._lb) / (n_samples - 1)
        half = dz_t / 2.0

        pdf_t = self.pdf(z_t)
        regular = np.abs(z_t) >= half
        density = np.zeros(n_samples)
        if regular.any():
            zt = z_t[regular]
            weights = pdf_t[regular] / np.abs(zt)
            density += (other.pdf(z[:, None] / zt[None, :]) * weights[None, :]).sum(axis=1)
        # a sample closer to zero than half a step is split between -half and +half
        n_near_zero = np.count_nonzero(~regular)
        if n_near_zero:
            for zt in (-half, half):
                density += n_near_zero * self.pdf(zt) * other.pdf(z / zt) / half / 2.0

        self._replace(lb, ub, z, density * dz_t)

    def _divide_distribution(self, other: Distribution) -> None:
        lb_o, ub_o = other.lower_bound, other.upper_bound
        if lb_o <= 0.0 <= ub_o:
            self._substitute(*self._unbounded_quotient_support(lb_o, ub_o))
            return

        corners = (self._lb / lb_o, self._lb / ub_o, self._ub / lb_o, self._ub / ub_o)
        lb, ub = min(corners), max(corners)

        n_samples = self._config.mult_n_samples
        z = np.linspace(lb, ub, n_samples)
        z_o = np.linspace(lb_o, ub_o, n_samples)
        dz_o = (ub_o - lb_o) / (n_samples - 1)

        weights = other.pdf(z_o) * np.abs(z_o)
        density = (self.pdf(z[:, None] * z_o[None, :]) * weights[None, :]).sum(axis=1)

        self._replace(lb, ub, z, density * dz_o)

    def _unbounded_quotient_support(self, lb_o: float, ub_o: float) -> Tuple[float, float]:
        lowest, highest = self._config.lowest, self._config.highest
        if self._lb < 0.0 < self._ub or lb_o < 0.0 < ub_o:
            return lowest, highest
        non_negative = self._lb >= 0.0
        if lb_o == 0.0:
            return (0.0, highest) if non_negative else (lowest, 0.0)
        return (lowest, 0.0) if non_negative else (0.0, highest)

    def _substitute(self, lb: float, ub: float) -> None:
        """ Replaces the distribution by the generic uniform one on `[lb, ub]`. """
        logger.debug("Singular operation, substituting a uniform distribution on [%s, %s]", lb, ub)
        self._clear_tables()
        self.define_boundaries(lb, ub)
        self.generate_equally_spaced_z()
        Distribution.generate_pdf(self)
        self._reshaped()
        self.normalize()

    def _replace(self, lb: float, ub: float, z: np.ndarray, pdf: np.ndarray) -> None:
        self._lb = float(lb)
        self._ub = float(ub)
        self._z = z
        self._n_samples = z.size
        self._dz = (self._ub - self._lb) / (z.size - 1)
        self._pdf = np.asarray(pdf, dtype=float)
        self._cdf = _empty()
        self._reshaped()
        self.normalize()

    def _reshaped(self) -> None:
        """
        Called once the tables no longer have the variant's own shape, i.e. after a
        sum, product, quotient, reciprocal or a substitution.
        """

    # ---------------------------------------------------------- operators

    def __add__(self, other):
        if not isinstance(other, (Distribution, Real)):
            return NotImplemented
        return self.copy().add(other)

    __radd__ = __add__

    def __sub__(self, other):
        if not isinstance(other, (Distribution, Real)):
            return NotImplemented
        return self.copy().subtract(other)

    def __rsub__(self, other):
        if not isinstance(other, Real):
            return NotImplemented
        return self.copy().negate().add(other)

    def __mul__(self, other):
        if not isinstance(other, (Distribution, Real)):
            return NotImplemented
        return self.copy().multiply(other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if not isinstance(other, (Distribution, Real)):
            return NotImplemented
        return self.copy().divide(other)

    def __rtruediv__(self, other):
        if not isinstance(other, Real):
            return NotImplemented
        return self.copy().reciprocal().multiply(other)

    def __neg__(self):
        return self.copy().negate()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Distribution) or self.type != other.type:
            return False
        return (self.parameters() == other.parameters()
                and self.lower_bound == other.lower_bound
                and self.upper_bound == other.upper_bound
                and np.array_equal(self.z_samples(), other.z_samples())
                and np.array_equal(self.pdf(), other.pdf()))

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(lower_bound={self._lb}, upper_bound={self._ub}, "
                f"resolution={self._dz}, samples={self._n_samples})")


class CommonDistributionsFactory(ABC):
    """ Abstract Factory Class implementing a Factory for common distributions."""
    @staticmethod
    @abstractmethod
    def uniform(lower: float, upper: float, **kwargs) -> Distribution:
        """ A uniform distribution on [`lower`, `upper`]."""

    @staticmethod
    @abstractmethod
    def linear(lower: float, upper: float, ascending: bool = True, **kwargs) -> LinearDistribution:
        """ A triangular distribution whose density rises (or falls) linearly from `lower` to `upper`."""

    @staticmethod
    @abstractmethod
    def constant(value: float, **kwargs) -> Distribution:
        """ A distribution concentrated on a minimal interval at `value`."""

    @staticmethod
    @abstractmethod
    def merged(*members: Distribution, ratios: Optional[Sequence[float]] = None,
               **kwargs) -> MergedDistribution:
        """ A weighted mixture of `members`."""

    @staticmethod
    @abstractmethod
    def from_parameters(dist_type: Union[DistributionType, str], parameters: Sequence[float],
                        **kwargs) -> Distribution:
        """ A distribution of the given type built from its :meth:`Distribution.parameters`."""
