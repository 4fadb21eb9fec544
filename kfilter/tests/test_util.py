import numpy as np
from numpy.testing import assert_allclose, assert_array_equal
import pytest
import kfilter
from kfilter import util


def test_bunch():
    b = util.Bunch(x=1, P=np.eye(2))
    assert b.x == 1
    b.y = 2
    assert b['y'] == 2
    with pytest.raises(AttributeError):
        b.z


def test_compute_rms():
    data = np.array([[3.0, 1.0], [-4.0, 1.0]])
    assert_allclose(util.compute_rms(data), [12.5 ** 0.5, 1.0])


def test_acceleration_records(tmp_path):
    assert util.ACCELERATION_RECORD.itemsize == 28
    path = tmp_path / "samples.dat"
    acceleration = np.array([[0.5, -0.25, 9.75], [0.125, 0.0, 9.5]])
    util.save_acceleration_records(path, [1, 2], [1000, 2000], acceleration)

    raw = path.read_bytes()
    assert len(raw) == 56
    assert raw[:8] == (1).to_bytes(8, 'big')

    with open(path, 'ab') as f:
        f.write(b'\x00' * 10)

    data = util.load_acceleration_records(path)
    assert_array_equal(data.count, [1, 2])
    assert_array_equal(data.timestamp, [1000, 2000])
    assert_array_equal(data.acceleration, acceleration)
    assert data.acceleration.dtype == np.float64

    with pytest.raises(ValueError):
        util.save_acceleration_records(path, [1], [1000], acceleration)


def test_empty_acceleration_file(tmp_path):
    path = tmp_path / "empty.dat"
    path.write_bytes(b'')
    data = util.load_acceleration_records(path)
    assert data.acceleration.shape == (0, 3)
    assert len(data.count) == 0


def test_example_filters():
    p = kfilter.examples.generate_controlled_cart(n_epochs=10)
    kf = p.create_filter()
    assert kf.control_parameters == 1
    assert_array_equal(kf.control_matrix, p.B)
    assert_array_equal(kf.state_pre, p.x0)
    assert_array_equal(kf.error_cov_post, p.P0)
    assert p.controls.shape == (9, 1)

    p = kfilter.examples.generate_constant_acceleration(n_epochs=10)
    kf = p.create_filter()
    assert kf.control_matrix is None
    assert kf.measure_parameters == 1
