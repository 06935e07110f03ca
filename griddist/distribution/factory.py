from typing import Optional, Sequence, Union

from griddist.distribution.distribution import (CommonDistributionsFactory,
                                                Distribution, DistributionType)
from griddist.distribution.linear_distribution import LinearDistribution
from griddist.distribution.merged_distribution import MergedDistribution
from griddist.exceptions import DistributionParameterError


class GridDistributions(CommonDistributionsFactory):
    """Builds the common distributions on discretised grids."""

    @staticmethod
    def uniform(lower: float, upper: float, **kwargs) -> Distribution:
        dist = Distribution(**kwargs)
        dist.define_boundaries(lower, upper)
        dist.define_resolution(
            (dist.upper_bound - dist.lower_bound) / (dist.config.n_samples - 1))
        return dist

    @staticmethod
    def linear(lower: float, upper: float, ascending: bool = True, **kwargs) -> LinearDistribution:
        return LinearDistribution(lower, upper, ascending, **kwargs)

    @staticmethod
    def constant(value: float, **kwargs) -> Distribution:
        dist = Distribution(**kwargs)
        dist.define_boundaries(value, value)
        return dist

    @staticmethod
    def merged(*members: Distribution, ratios: Optional[Sequence[float]] = None,
               **kwargs) -> MergedDistribution:
        if ratios is None:
            ratios = [1.0] * len(members)
        if len(ratios) != len(members):
            raise DistributionParameterError(
                f"Got {len(ratios)} weights for {len(members)} distributions")
        dist = MergedDistribution(**kwargs)
        for member, ratio in zip(members, ratios):
            dist.append_distribution(member, ratio)
        return dist

    @staticmethod
    def from_parameters(dist_type: Union[DistributionType, str], parameters: Sequence[float],
                        **kwargs) -> Distribution:
        if isinstance(dist_type, str):
            try:
                dist_type = DistributionType[dist_type.upper()]
            except KeyError as exc:
                raise DistributionParameterError(f"Unknown distribution type {dist_type}") from exc
        if dist_type == DistributionType.LINEAR:
            return LinearDistribution.from_parameters(parameters, **kwargs)
        if dist_type == DistributionType.GENERIC:
            if len(parameters) == 0:
                return Distribution(**kwargs)
            if len(parameters) == 1:
                return GridDistributions.constant(parameters[0], **kwargs)
            return GridDistributions.uniform(parameters[0], parameters[1], **kwargs)
        raise DistributionParameterError(
            f"A {dist_type.name.lower()} distribution cannot be built from parameters alone")
