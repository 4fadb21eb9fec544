"""Estimation of measurement noise covariance from raw samples."""
import numpy as np
from .errors import InvalidParameterError
from .util import Bunch
from ._common import as_float_array, check_dimension, check_vector, read_only


class MeasurementNoiseCovarianceEstimator:
    """Online estimator of the measurement noise mean and covariance.

    The samples must be taken while the measured quantity is held constant, so
    that their spread is caused by the noise only. The sample average estimates
    the measurement bias and the covariance (normalized by the number of
    samples, not by the number of samples minus one) can be installed as
    `KalmanFilter.measurement_noise_cov`.

    Both estimates are updated incrementally with Welford's recurrence::

        d = z - mean_{N - 1}
        mean_N = mean_{N - 1} + d / N
        cov_N = (N - 1) / N * (cov_{N - 1} + d d^T / N)

    The covariance is symmetric by construction.

    Parameters
    ----------
    measure_params : int
        Number of components of each sample, must be at least 1.
    """
    def __init__(self, measure_params):
        self._m = check_dimension(measure_params, 'measure_params')
        self._sample_average = np.zeros(self._m)
        self._measurement_noise_cov = np.zeros((self._m, self._m))
        self._sample_count = 0

    def update(self, sample):
        """Add a sample to the estimates.

        Parameters
        ----------
        sample : array_like, shape (measure_params,)
            New sample.

        Returns
        -------
        ndarray, shape (measure_params, measure_params)
            Copy of the updated covariance estimate.
        """
        z = check_vector(sample, self._m, 'sample')
        n = self._sample_count + 1
        d = z - self._sample_average
        self._sample_average = self._sample_average + d / n
        self._measurement_noise_cov = (n - 1) / n * (self._measurement_noise_cov
                                                     + np.outer(d, d) / n)
        self._sample_count = n
        return self._measurement_noise_cov.copy()

    @property
    def measure_params(self):
        """Number of components of each sample."""
        return self._m

    @property
    def sample_average(self):
        """Mean of the samples, shape (m,)."""
        return read_only(self._sample_average)

    @property
    def measurement_noise_cov(self):
        """Covariance of the samples, shape (m, m)."""
        return read_only(self._measurement_noise_cov)

    @property
    def sample_count(self):
        """Number of samples added so far."""
        return self._sample_count


def estimate_measurement_noise(samples):
    """Estimate measurement noise mean and covariance from a batch of samples.

    Parameters
    ----------
    samples : array_like, shape (n_samples, m)
        Samples taken while the measured quantity is constant.

    Returns
    -------
    Bunch object with the following fields:

        - mean : ndarray, shape (m,)
            Sample average.
        - cov : ndarray, shape (m, m)
            Sample covariance normalized by ``n_samples``.
        - n_samples : int
            Number of processed samples.
    """
    samples = as_float_array(samples, 'samples')
    if samples.ndim != 2:
        raise InvalidParameterError("`samples` must be 2-dimensional")

    estimator = MeasurementNoiseCovarianceEstimator(samples.shape[1])
    for sample in samples:
        estimator.update(sample)
    return Bunch(mean=np.array(estimator.sample_average),
                 cov=np.array(estimator.measurement_noise_cov),
                 n_samples=estimator.sample_count)
