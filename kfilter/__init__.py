"""kfilter: Linear Kalman filtering of discrete-time systems.

The package contains a discrete-time linear Kalman filter for systems of the
form::

    x_{k + 1} = A x_k + B u_k + w_k
    z_k = H x_k + v_k

Where

    - k   - integer epoch index
    - x_k - state vector
    - u_k - known control vector (optional)
    - w_k - process noise vector with covariance Q
    - z_k - measurement vector
    - v_k - measurement noise vector with covariance R

`KalmanFilter` keeps the filter state and exposes the predict/correct cycle,
`run_kalman_filter` drives it over a sequence of measurements.
`MeasurementNoiseCovarianceEstimator` estimates R from samples recorded while
the measured quantity is constant. Refer to `kfilter.examples` for examples of
correctly defined problems.

Used references on estimation theory are [1] and [2].

References
----------
.. [1] J. L. Crassidis, J. L. Junkins, "Optimal Estimation of Dynamic Systems",
   2nd edition
.. [2] G. Welch, G. Bishop, "An Introduction to the Kalman Filter",
   UNC-Chapel Hill, TR 95-041
"""
from . import examples, util
from .errors import InvalidParameterError, NumericalError, SignalProcessingError
from .linear import KalmanFilter, run_kalman_filter
from .noise import MeasurementNoiseCovarianceEstimator, estimate_measurement_noise
