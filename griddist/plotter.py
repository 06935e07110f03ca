import logging

import matplotlib.pyplot as plt
import numpy as np

from griddist.distribution.distribution import Distribution
from griddist.util.logger import log_setup

logger = log_setup(__name__, logging.DEBUG)


class Plotter:
    """ Plotter that draws discretised densities using matplotlib."""
    @staticmethod
    def plot(distribution: Distribution, show_cdf: bool = False, axis=None, show: bool = False):
        """ Draws the PDF table of `distribution`, and its CDF on a second y-axis if asked to. """
        if axis is None:
            axis = plt.subplot()
        z = distribution.z_samples()
        pdf = distribution.pdf()
        logger.debug("Plotting %s", distribution)

        axis.plot(z, pdf, color="tab:blue", label="pdf")
        axis.fill_between(z, pdf, alpha=.3, color="tab:blue")
        axis.set_xlim(distribution.lower_bound, distribution.upper_bound)
        axis.set_xlabel("z")
        axis.set_ylabel("Probability density p(z)")
        if show_cdf:
            cdf_axis = axis.twinx()
            cdf_axis.plot(z, distribution.cdf(), color="tab:orange", label="cdf")
            cdf_axis.set_ylim(0, 1.05)
            cdf_axis.set_ylabel("P(Z <= z)")
        if show:
            plt.show()
        return axis

    @staticmethod
    def histogram(distribution: Distribution, n: int = 1000, bins: int = 50, axis=None,
                  show: bool = False):
        """ Draws a histogram of `n` samples of `distribution` over its density. """
        if n < 1:
            raise ValueError(f"Need at least one sample for a histogram, got {n}")
        if axis is None:
            axis = plt.subplot()
        draws = np.fromiter((distribution.sample() for _ in range(n)), dtype=float, count=n)
        axis.hist(draws, bins=bins, density=True, linewidth=.5, ec=(0, 0, 0), color="lightsteelblue")
        axis.plot(distribution.z_samples(), distribution.pdf(), color="tab:blue")
        axis.set_xlabel("z")
        axis.set_ylabel("Density")
        plt.gcf().suptitle("Histogram")
        if show:
            plt.show()
        return axis
