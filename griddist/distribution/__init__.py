"""
General Classes
###############

.. automodule:: griddist.distribution.distribution
   :members:

Linear Distribution
###################

.. automodule:: griddist.distribution.linear_distribution

Mixtures
########

.. automodule:: griddist.distribution.merged_distribution

Factory
#######

.. automodule:: griddist.distribution.factory
"""

from .distribution import (CommonDistributionsFactory, Distribution,
                           DistributionType)
from .factory import GridDistributions
from .linear_distribution import LinearDistribution
from .merged_distribution import MergedDistribution
