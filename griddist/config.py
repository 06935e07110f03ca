"""
--------------------
Discretisation Config
--------------------
"""
import attr

from griddist.exceptions import ConfigurationError


def _at_least(minimum: int):
    def check(_instance, attribute, value):
        if not isinstance(value, int) or value < minimum:
            raise ConfigurationError(
                f"{attribute.name} must be an integer >= {minimum}, was {value}")

    return check


def _positive(_instance, attribute, value):
    if not value > 0:
        raise ConfigurationError(f"{attribute.name} must be positive, was {value}")


@attr.s(frozen=True)
class DistributionConfig:
    """Constants that steer how distributions are discretised."""

    n_samples: int = attr.ib(default=501, validator=_at_least(2))
    """Number of grid points of a freshly constructed concrete distribution."""

    min_n_samples: int = attr.ib(default=11, validator=_at_least(2))
    """Number of grid points of a freshly constructed generic distribution."""

    conv_n_samples: int = attr.ib(default=500, validator=_at_least(1))
    """Number of intervals over the wider operand when adding two distributions."""

    mult_n_samples: int = attr.ib(default=301, validator=_at_least(2))
    """Grid size used by multiplication, division and the reciprocal."""

    min_interval: float = attr.ib(default=1e-8, converter=float, validator=_positive)
    """Width used to widen a degenerate support."""

    lowest: float = attr.ib(default=-1e12, converter=float)
    """Stands in for minus infinity when a result is unbounded below."""

    highest: float = attr.ib(default=1e12, converter=float)
    """Stands in for plus infinity when a result is unbounded above."""

    def __attrs_post_init__(self):
        if not self.lowest < 0.0 < self.highest:
            raise ConfigurationError(
                f"Expected lowest < 0 < highest, got [{self.lowest}, {self.highest}]")


DEFAULT_CONFIG = DistributionConfig()
