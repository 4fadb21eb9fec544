import numpy as np
from .errors import InvalidParameterError


def as_integer(value, name):
    try:
        integer = int(value)
        if integer != value:
            raise ValueError
    except (TypeError, ValueError, OverflowError):
        raise InvalidParameterError(f"`{name}` must be an integer, got {value!r}")
    return integer


def check_dimension(value, name, minimum=1):
    value = as_integer(value, name)
    if value < minimum:
        raise InvalidParameterError(f"`{name}` must be an integer >= {minimum}, "
                                    f"got {value}")
    return value


def check_variance(value, name):
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"`{name}` must be a number, got {value!r}")
    if not np.isfinite(value) or value < 0:
        raise InvalidParameterError(f"`{name}` must be finite and non-negative, "
                                    f"got {value}")
    return value


def as_float_array(x, name):
    """Copy `x` into a new float array with finite elements only."""
    try:
        x = np.array(x, dtype=float)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"`{name}` must be a numeric array")
    if not np.all(np.isfinite(x)):
        raise InvalidParameterError(f"`{name}` must contain only finite values")
    return x


def check_vector(x, size, name):
    x = as_float_array(x, name)
    if x.shape != (size,):
        raise InvalidParameterError(f"`{name}` must have shape ({size},), "
                                    f"got {x.shape}")
    return x


def check_matrix(A, shape, name, symmetric=False):
    """Copy `A` into a new float array and verify its shape.

    Symmetry is checked with exact equality against the transpose, tolerance is
    not applied.
    """
    A = as_float_array(A, name)
    if A.shape != shape:
        raise InvalidParameterError(f"`{name}` must have shape {shape}, "
                                    f"got {A.shape}")
    if symmetric and not np.array_equal(A, A.T):
        raise InvalidParameterError(f"`{name}` must be symmetric")
    return A


def read_only(A):
    view = A.view()
    view.flags.writeable = False
    return view
