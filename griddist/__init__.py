"""
========
griddist
========

Probability distributions represented by their densities on discrete grids,
combined arithmetically by convolution and change of variables.

.. automodule:: griddist.distribution
.. automodule:: griddist.config
.. automodule:: griddist.plotter
"""

from griddist.config import DEFAULT_CONFIG, DistributionConfig
from griddist.distribution import (Distribution, DistributionType,
                                   GridDistributions, LinearDistribution,
                                   MergedDistribution)
from griddist.exceptions import (ConfigurationError,
                                 DistributionParameterError, GriddistError)
