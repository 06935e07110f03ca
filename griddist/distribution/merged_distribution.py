from __future__ import annotations

from typing import List, Optional, Tuple, Union

import numpy as np

from griddist.config import DistributionConfig
from griddist.distribution.distribution import Distribution, DistributionType
from griddist.exceptions import DistributionParameterError
from griddist.util.random_source import RandomSource

Member = Union[Distribution, int]


class MergedDistribution(Distribution):
    """
    Weighted mixture of other distributions. Its grid is the union of the member
    grids and its density the weighted sum of the member densities on that grid.

    Members are only read. The tables are built from the members on first use,
    at the latest when the mixture itself is shifted, scaled, negated or
    re-gridded; from then on they evolve like those of any other distribution.
    Changing the membership or a weight discards them, and they are rebuilt
    from the members again.
    """

    _type = DistributionType.MERGED

    def __init__(self,
                 config: Optional[DistributionConfig] = None,
                 random_source: Optional[RandomSource] = None):
        super().__init__(config, random_source)
        self._members: List[Distribution] = []
        self._ratios: List[float] = []
        self._from_members = True

    @property
    def members(self) -> Tuple[Distribution, ...]:
        return tuple(self._members)

    @property
    def ratios(self) -> Tuple[float, ...]:
        return tuple(self._ratios)

    def parameters(self):
        return list(self._ratios)

    def copy(self) -> MergedDistribution:
        clone = super().copy()
        clone._members = list(self._members)
        clone._ratios = list(self._ratios)
        return clone

    def append_distribution(self, distribution: Distribution, ratio: float = 1.0) -> None:
        if not isinstance(distribution, Distribution):
            raise DistributionParameterError(
                f"Only distributions can be merged, got {type(distribution).__name__}")
        ratio = self._checked_ratio(ratio)
        self._members.append(distribution)
        self._ratios.append(ratio)
        self._membership_changed()

    def remove_distribution(self, member: Member) -> None:
        idx = self._index_of(member)
        del self._members[idx]
        del self._ratios[idx]
        self._membership_changed()

    def change_ratio(self, member: Member, ratio: float) -> None:
        idx = self._index_of(member)
        self._ratios[idx] = self._checked_ratio(ratio)
        self._membership_changed()

    @staticmethod
    def _checked_ratio(ratio: float) -> float:
        ratio = float(ratio)
        if not ratio >= 0.0:
            raise DistributionParameterError(f"Mixture weights must be >= 0, was {ratio}")
        return ratio

    def _index_of(self, member: Member) -> int:
        if isinstance(member, Distribution):
            for idx, candidate in enumerate(self._members):
                if candidate is member:
                    return idx
            raise DistributionParameterError(f"{member!r} is not part of this mixture")
        if isinstance(member, bool) or not isinstance(member, int):
            raise DistributionParameterError(f"Expected a distribution or an index, got {member!r}")
        if not -len(self._members) <= member < len(self._members):
            raise DistributionParameterError(
                f"Index {member} out of range for {len(self._members)} members")
        return member % len(self._members)

    def _membership_changed(self) -> None:
        self._clear_tables()
        self._from_members = True
        if self._members:
            self._lb = min(m.lower_bound for m in self._members)
            self._ub = max(m.upper_bound for m in self._members)
        else:
            self._lb, self._ub = 0.0, 1.0
            self._dz = 1.0 / (self._config.min_n_samples - 1)

    def _detach(self) -> None:
        # builds the tables from the members before the mixture's own state
        # starts to diverge from them
        if self._from_members:
            if self._members:
                self._ensure_cdf()
            self._from_members = False

    def define_boundaries(self, lb: float, ub: float) -> None:
        self._detach()
        super().define_boundaries(lb, ub)

    def define_resolution(self, dz: float) -> None:
        self._detach()
        super().define_resolution(dz)

    def define_z(self, z) -> None:
        self._detach()
        super().define_z(z)

    def negate(self) -> MergedDistribution:
        self._detach()
        super().negate()
        return self

    def _shift(self, num: float) -> None:
        self._detach()
        super()._shift(num)

    def _scale(self, num: float) -> None:
        self._detach()
        super()._scale(num)

    def _substitute(self, lb: float, ub: float) -> None:
        self._from_members = False
        super()._substitute(lb, ub)

    def _reshaped(self) -> None:
        self._from_members = False

    def generate_z(self) -> None:
        if not (self._from_members and self._members):
            super().generate_z()
            return
        grids = [m.z_samples() for m in self._members]
        # points just outside each member keep its density from being
        # interpolated across gaps between members
        closing = [np.nextafter([m.lower_bound, m.upper_bound], [-np.inf, np.inf])
                   for m in self._members]
        lb = min(m.lower_bound for m in self._members)
        ub = max(m.upper_bound for m in self._members)
        super().define_z(np.clip(np.concatenate(grids + closing), lb, ub))

    def generate_pdf(self) -> None:
        z = self._ensure_z()
        if not (self._from_members and self._members):
            super().generate_pdf()
            return
        density = np.zeros(z.size)
        for member, ratio in zip(self._members, self._ratios):
            density += ratio * member.pdf(z)
        self._pdf = density
