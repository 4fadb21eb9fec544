"""Linear Kalman filter."""
import logging
import warnings
import numpy as np
from scipy import linalg
from .errors import InvalidParameterError, SignalProcessingError
from .util import Bunch
from ._common import (as_float_array, as_integer, check_dimension, check_matrix,
                      check_variance, check_vector, read_only)

logger = logging.getLogger(__name__)

DEFAULT_PROCESS_NOISE_VARIANCE = 0.0
DEFAULT_MEASUREMENT_NOISE_VARIANCE = 1e-1


class KalmanFilter:
    """Discrete-time linear Kalman filter.

    The filter estimates the state of a system of the form::

        x_{k + 1} = A x_k + B u_k + w_k
        z_k = H x_k + v_k

    Where

        - x_k - state vector with ``n`` components
        - u_k - control vector with ``c`` components
        - z_k - measurement vector with ``m`` components
        - w_k - process noise with covariance Q
        - v_k - measurement noise with covariance R

    The estimation cycle consists of `predict`, which computes the a-priori
    estimate ``state_pre`` and ``error_cov_pre`` from ``state_post`` and
    ``error_cov_post``, and `correct`, which folds a measurement into the
    a-priori estimate and produces the a-posteriori estimate. The two calls may
    be issued in any order. Calling `correct` repeatedly without `predict`
    corrects the same a-priori estimate each time.

    All matrices are exposed as properties. Getters return read-only views,
    setters copy the passed array after verifying its shape. The covariance
    setters additionally require an exactly symmetric matrix (checked with
    strict equality against the transpose), so a matrix which is symmetric
    only up to rounding errors is rejected.

    Parameters
    ----------
    dynamic_parameters : int
        Number of states ``n``, must be at least 1.
    measure_parameters : int
        Number of measurement components ``m``, must be at least 1.
    control_parameters : int, optional
        Number of control components ``c``. 0 (default) means that the filter
        has no control input and ``control_matrix`` is None. A negative value
        means that the control vector has the same dimension as the state.
    process_noise_variance : float, optional
        Scale of the initial identity process noise covariance.
        Default is `DEFAULT_PROCESS_NOISE_VARIANCE`.
    measurement_noise_variance : float, optional
        Scale of the initial identity measurement noise covariance, also used
        when the number of measurement parameters is changed.
        Default is `DEFAULT_MEASUREMENT_NOISE_VARIANCE`.

    Notes
    -----
    Initially the transition matrix and the a-posteriori error covariance are
    identity, the control matrix is ``identity(n, c)``, the measurement matrix
    and the gain are zero, the states are zero and the a-priori error
    covariance is identity.
    """
    def __init__(self, dynamic_parameters, measure_parameters, control_parameters=0,
                 *, process_noise_variance=DEFAULT_PROCESS_NOISE_VARIANCE,
                 measurement_noise_variance=DEFAULT_MEASUREMENT_NOISE_VARIANCE):
        n = check_dimension(dynamic_parameters, 'dynamic_parameters')
        m = check_dimension(measure_parameters, 'measure_parameters')
        c = as_integer(control_parameters, 'control_parameters')
        if c < 0:
            c = n
        process_noise_variance = check_variance(process_noise_variance,
                                                'process_noise_variance')
        measurement_noise_variance = check_variance(measurement_noise_variance,
                                                    'measurement_noise_variance')

        self._n = n
        self._m = m
        self._c = c
        self._measurement_noise_variance = float(measurement_noise_variance)

        self._state_pre = np.zeros(n)
        self._state_post = np.zeros(n)
        self._transition_matrix = np.identity(n)
        self._control_matrix = np.eye(n, c) if c > 0 else None
        self._process_noise_cov = float(process_noise_variance) * np.identity(n)
        self._error_cov_pre = np.identity(n)
        self._error_cov_post = np.identity(n)
        self._reset_measurement_model()

        logger.debug("Created Kalman filter with n=%d, m=%d, c=%d", n, m, c)

    def _reset_measurement_model(self):
        self._measurement_matrix = np.zeros((self._m, self._n))
        self._measurement_noise_cov = (self._measurement_noise_variance
                                       * np.identity(self._m))
        self._gain = np.zeros((self._n, self._m))

    def predict(self, control=None):
        """Compute the a-priori state estimate.

        Parameters
        ----------
        control : array_like, shape (control_parameters,) or None, optional
            Control vector. None (default) means no control input is applied.

        Returns
        -------
        ndarray, shape (dynamic_parameters,)
            Copy of the a-priori state estimate.

        Raises
        ------
        InvalidParameterError
            If `control` is given but the filter has no control matrix or
            `control` has a wrong length.
        """
        A = self._transition_matrix
        x = A @ self._state_post
        if control is not None:
            if self._control_matrix is None:
                raise InvalidParameterError(
                    "Control vector passed to a filter without control matrix")
            u = check_vector(control, self._c, 'control')
            x = x + self._control_matrix @ u

        self._error_cov_pre = A @ self._error_cov_post @ A.T + self._process_noise_cov
        self._state_pre = x
        return x.copy()

    def correct(self, measurement):
        """Update the a-priori state estimate with a measurement.

        Parameters
        ----------
        measurement : array_like, shape (measure_parameters,)
            Measurement vector.

        Returns
        -------
        ndarray, shape (dynamic_parameters,)
            Copy of the a-posteriori state estimate.

        Raises
        ------
        InvalidParameterError
            If `measurement` has a wrong length.
        SignalProcessingError
            If the innovation covariance is singular or ill-conditioned. The
            filter is left unchanged, the a-priori estimate remains the best
            available one.
        """
        z = check_vector(measurement, self._m, 'measurement')
        H = self._measurement_matrix
        P = self._error_cov_pre

        HP = H @ P
        S = HP @ H.T + self._measurement_noise_cov
        try:
            with warnings.catch_warnings():
                warnings.simplefilter('error', linalg.LinAlgWarning)
                K = linalg.solve(S, HP).T
        except (linalg.LinAlgError, linalg.LinAlgWarning) as e:
            logger.warning("Innovation covariance is singular, correction skipped")
            raise SignalProcessingError("Singular innovation covariance") from e
        if not np.all(np.isfinite(K)):
            logger.warning("Kalman gain is not finite, correction skipped")
            raise SignalProcessingError("Non-finite Kalman gain")

        x = self._state_pre + K @ (z - H @ self._state_pre)
        self._error_cov_post = (np.identity(self._n) - K @ H) @ P
        self._gain = K
        self._state_post = x
        return x.copy()

    def _skip_correction(self):
        # Epoch without a measurement, the a-priori estimate becomes final.
        self._state_post = self._state_pre
        self._error_cov_post = self._error_cov_pre

    @property
    def dynamic_parameters(self):
        """Number of states."""
        return self._n

    @property
    def control_parameters(self):
        """Number of control components, 0 when there is no control input."""
        return self._c

    @property
    def measure_parameters(self):
        """Number of measurement components.

        Setting a new value changes the shape of the measurement model:
        ``measurement_matrix`` and ``gain`` are replaced by zero matrices and
        ``measurement_noise_cov`` by the default scaled identity matrix, even if
        the value doesn't change.
        """
        return self._m

    @measure_parameters.setter
    def measure_parameters(self, value):
        self._m = check_dimension(value, 'measure_parameters')
        self._reset_measurement_model()
        logger.debug("Measurement model resized to m=%d", self._m)

    @property
    def state_pre(self):
        """A-priori state estimate, shape (n,)."""
        return read_only(self._state_pre)

    @state_pre.setter
    def state_pre(self, value):
        self._state_pre = check_vector(value, self._n, 'state_pre')

    @property
    def state_post(self):
        """A-posteriori state estimate, shape (n,)."""
        return read_only(self._state_post)

    @state_post.setter
    def state_post(self, value):
        self._state_post = check_vector(value, self._n, 'state_post')

    @property
    def transition_matrix(self):
        """State transition matrix A, shape (n, n)."""
        return read_only(self._transition_matrix)

    @transition_matrix.setter
    def transition_matrix(self, value):
        self._transition_matrix = check_matrix(value, (self._n, self._n),
                                               'transition_matrix')

    @property
    def control_matrix(self):
        """Control matrix B, shape (n, c), or None if there is no control input.

        It can't be set for a filter created without control parameters.
        """
        if self._control_matrix is None:
            return None
        return read_only(self._control_matrix)

    @control_matrix.setter
    def control_matrix(self, value):
        if self._c == 0:
            raise InvalidParameterError(
                "Filter was created without control parameters")
        if value is None:
            raise InvalidParameterError("`control_matrix` can't be None")
        self._control_matrix = check_matrix(value, (self._n, self._c),
                                            'control_matrix')

    @property
    def measurement_matrix(self):
        """Measurement matrix H, shape (m, n)."""
        return read_only(self._measurement_matrix)

    @measurement_matrix.setter
    def measurement_matrix(self, value):
        self._measurement_matrix = check_matrix(value, (self._m, self._n),
                                                'measurement_matrix')

    @property
    def process_noise_cov(self):
        """Process noise covariance Q, symmetric with shape (n, n)."""
        return read_only(self._process_noise_cov)

    @process_noise_cov.setter
    def process_noise_cov(self, value):
        self._process_noise_cov = check_matrix(value, (self._n, self._n),
                                               'process_noise_cov', symmetric=True)

    @property
    def measurement_noise_cov(self):
        """Measurement noise covariance R, symmetric with shape (m, m)."""
        return read_only(self._measurement_noise_cov)

    @measurement_noise_cov.setter
    def measurement_noise_cov(self, value):
        self._measurement_noise_cov = check_matrix(
            value, (self._m, self._m), 'measurement_noise_cov', symmetric=True)

    @property
    def error_cov_pre(self):
        """A-priori error covariance, shape (n, n)."""
        return read_only(self._error_cov_pre)

    @error_cov_pre.setter
    def error_cov_pre(self, value):
        self._error_cov_pre = check_matrix(value, (self._n, self._n),
                                           'error_cov_pre', symmetric=True)

    @property
    def error_cov_post(self):
        """A-posteriori error covariance, shape (n, n)."""
        return read_only(self._error_cov_post)

    @error_cov_post.setter
    def error_cov_post(self, value):
        self._error_cov_post = check_matrix(value, (self._n, self._n),
                                            'error_cov_post', symmetric=True)

    @property
    def gain(self):
        """Kalman gain K computed by the last `correct`, shape (n, m)."""
        return read_only(self._gain)

    @gain.setter
    def gain(self, value):
        self._gain = check_matrix(value, (self._n, self._m), 'gain')


def run_kalman_filter(kf, measurements, controls=None):
    """Run a Kalman filter over a sequence of epochs.

    The a-priori estimate stored in `kf` (``state_pre`` and ``error_cov_pre``)
    is used as the prior for the first epoch. At each following epoch the
    filter is propagated with `KalmanFilter.predict` and then corrected with the
    measurement available at this epoch.

    Parameters
    ----------
    kf : KalmanFilter
        Configured filter. It is modified in place and holds the estimate of the
        last epoch on return.
    measurements : sequence, length n_epochs
        Measurement vector for each epoch with shape (m,) or None when there is
        no measurement at the epoch. In the latter case the a-priori estimate
        becomes the a-posteriori estimate.
    controls : array_like, shape (n_epochs - 1, c) or None, optional
        Control vectors applied at each transition. None (default) corresponds
        to no control input.

    Returns
    -------
    Bunch object with the following fields:

        - x_pre : ndarray, shape (n_epochs, n_states)
            A-priori state estimates.
        - P_pre : ndarray, shape (n_epochs, n_states, n_states)
            A-priori error covariance matrices.
        - x : ndarray, shape (n_epochs, n_states)
            A-posteriori state estimates.
        - P : ndarray, shape (n_epochs, n_states, n_states)
            A-posteriori error covariance matrices.
    """
    n_epochs = len(measurements)
    n_states = kf.dynamic_parameters
    if controls is not None:
        controls = as_float_array(controls, 'controls')
        if controls.shape != (max(n_epochs - 1, 0), kf.control_parameters):
            raise InvalidParameterError("Inconsistent shape of controls")

    x_pre = np.empty((n_epochs, n_states))
    P_pre = np.empty((n_epochs, n_states, n_states))
    x = np.empty((n_epochs, n_states))
    P = np.empty((n_epochs, n_states, n_states))

    logger.debug("Running Kalman filter for %d epochs", n_epochs)
    for k in range(n_epochs):
        if k > 0:
            kf.predict(None if controls is None else controls[k - 1])
        x_pre[k] = kf.state_pre
        P_pre[k] = kf.error_cov_pre

        if measurements[k] is None:
            kf._skip_correction()
        else:
            kf.correct(measurements[k])
        x[k] = kf.state_post
        P[k] = kf.error_cov_post

    return Bunch(x_pre=x_pre, P_pre=P_pre, x=x, P=P)
