"""Exceptions raised by the package."""


class NumericalError(Exception):
    """Base class for all errors raised by kfilter."""


class InvalidParameterError(NumericalError, ValueError):
    """Invalid dimensions, shapes or values of a parameter.

    Raised before any state is modified, so the object which raised it is left
    unchanged.
    """


class SignalProcessingError(NumericalError):
    """Numerical failure during filtering, e.g. a singular innovation covariance."""
