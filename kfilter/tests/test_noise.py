import numpy as np
from numpy.testing import assert_allclose, assert_array_equal
import pytest
import kfilter
from kfilter import MeasurementNoiseCovarianceEstimator, InvalidParameterError


def test_constructor():
    estimator = MeasurementNoiseCovarianceEstimator(3)
    assert estimator.measure_params == 3
    assert estimator.sample_count == 0
    assert_array_equal(estimator.sample_average, np.zeros(3))
    assert_array_equal(estimator.measurement_noise_cov, np.zeros((3, 3)))

    with pytest.raises(InvalidParameterError):
        MeasurementNoiseCovarianceEstimator(0)


def test_update():
    samples = np.array([
        [1.0, 2.0, -0.5],
        [1.5, 1.0, 0.0],
        [0.2, 2.5, 0.3],
        [0.9, 1.7, -0.1],
        [1.1, 2.2, 0.4],
    ])
    estimator = MeasurementNoiseCovarianceEstimator(3)
    for k, sample in enumerate(samples, start=1):
        cov = estimator.update(sample)
        assert estimator.sample_count == k
        assert_allclose(estimator.sample_average, np.mean(samples[:k], axis=0),
                        rtol=0, atol=1e-12)
        assert_allclose(cov, np.cov(samples[:k], rowvar=False, bias=True),
                        rtol=0, atol=1e-12)
        assert_array_equal(cov, cov.T)

    cov[0, 0] = 100
    assert estimator.measurement_noise_cov[0, 0] != 100


def test_update_wrong_sample():
    estimator = MeasurementNoiseCovarianceEstimator(2)
    estimator.update([1.0, 2.0])
    with pytest.raises(InvalidParameterError):
        estimator.update([1.0, 2.0, 3.0])
    assert estimator.sample_count == 1
    assert_array_equal(estimator.sample_average, [1.0, 2.0])
    for bad in [[np.nan, 1.0], [1.0, np.inf], ["a", "b"], None]:
        with pytest.raises(InvalidParameterError):
            estimator.update(bad)
    assert estimator.sample_count == 1
    assert_array_equal(estimator.measurement_noise_cov, np.zeros((2, 2)))

    with pytest.raises(InvalidParameterError):
        kfilter.estimate_measurement_noise([[1.0, np.nan], [2.0, 3.0]])
    with pytest.raises(InvalidParameterError):
        MeasurementNoiseCovarianceEstimator(None)


def test_large_offset():
    rng = np.random.RandomState(0)
    cov_true = np.array([[0.04, 0.01], [0.01, 0.09]])
    samples = 1e4 + rng.multivariate_normal(np.zeros(2), cov_true, size=10000)

    result = kfilter.estimate_measurement_noise(samples)
    assert result.n_samples == 10000
    assert_allclose(result.mean, np.mean(samples, axis=0), rtol=1e-12)
    assert_allclose(result.cov, np.cov(samples, rowvar=False, bias=True),
                    rtol=0, atol=1e-9)
    assert_allclose(result.cov, cov_true, rtol=0, atol=5e-3)


def test_calibrate_filter(tmp_path):
    rng = np.random.RandomState(1)
    n_samples = 2000
    acceleration = ([0.0, 0.0, 9.81]
                    + rng.multivariate_normal(np.zeros(3), np.diag([1e-3, 2e-3, 4e-3]),
                                              size=n_samples))
    path = tmp_path / "no_motion.dat"
    kfilter.util.save_acceleration_records(path, np.arange(n_samples),
                                           1000 * np.arange(n_samples), acceleration)

    data = kfilter.util.load_acceleration_records(path)
    estimator = MeasurementNoiseCovarianceEstimator(3)
    for sample in data.acceleration:
        estimator.update(sample)

    assert_allclose(estimator.sample_average, np.mean(data.acceleration, axis=0),
                    rtol=0, atol=1e-12)
    assert_allclose(estimator.measurement_noise_cov,
                    np.cov(data.acceleration, rowvar=False, bias=True),
                    rtol=0, atol=1e-9)

    kf = kfilter.KalmanFilter(3, 3)
    kf.measurement_noise_cov = estimator.measurement_noise_cov
    assert_array_equal(kf.measurement_noise_cov, estimator.measurement_noise_cov)
