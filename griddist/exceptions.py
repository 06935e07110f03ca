class GriddistError(Exception):
    """Base class for griddist-related exceptions."""


class ConfigurationError(GriddistError):
    """A discretisation constant is out of its valid range."""


class DistributionParameterError(GriddistError):
    """The parameters of a distribution or a mixture do not typematch."""
