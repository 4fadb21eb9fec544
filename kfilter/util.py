"""Utility functions."""
import numpy as np


class Bunch(dict):
    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__

    def __repr__(self):
        if self.keys():
            m = max(map(len, list(self.keys()))) + 1
            return '\n'.join(['{}: {}'.format(k.rjust(m), type(v))
                              for k, v in self.items()])
        else:
            return self.__class__.__name__ + "()"

    def __dir__(self):
        return list(self.keys())


def compute_rms(data):
    """Compute root-mean-square of data along 0 axis."""
    return np.mean(np.square(data), axis=0) ** 0.5


# count, timestamp, acceleration along x, y, z; all big-endian.
ACCELERATION_RECORD = np.dtype([
    ('count', '>i8'),
    ('timestamp', '>i8'),
    ('acceleration', '>f4', (3,)),
])


def load_acceleration_records(path):
    """Load raw accelerometer samples from a binary file.

    The file consists of fixed-size records described by `ACCELERATION_RECORD`.
    Such recordings taken with a device at rest are suitable for
    `kfilter.MeasurementNoiseCovarianceEstimator`. Incomplete trailing bytes
    are ignored.

    Parameters
    ----------
    path : str or path-like
        File to read.

    Returns
    -------
    Bunch object with the following fields:

        - count : ndarray of int, shape (n_samples,)
            Sample counters.
        - timestamp : ndarray of int, shape (n_samples,)
            Sample timestamps.
        - acceleration : ndarray, shape (n_samples, 3)
            Acceleration samples.
    """
    with open(path, 'rb') as f:
        data = f.read()
    n_samples = len(data) // ACCELERATION_RECORD.itemsize
    if n_samples == 0:
        records = np.empty(0, dtype=ACCELERATION_RECORD)
    else:
        records = np.frombuffer(data, dtype=ACCELERATION_RECORD, count=n_samples)
    return Bunch(count=records['count'].astype(np.int64),
                 timestamp=records['timestamp'].astype(np.int64),
                 acceleration=records['acceleration'].astype(float))


def save_acceleration_records(path, count, timestamp, acceleration):
    """Save accelerometer samples in the format read by `load_acceleration_records`.

    Parameters
    ----------
    path : str or path-like
        File to write.
    count : array_like, shape (n_samples,)
        Sample counters.
    timestamp : array_like, shape (n_samples,)
        Sample timestamps.
    acceleration : array_like, shape (n_samples, 3)
        Acceleration samples, stored with single precision.
    """
    acceleration = np.asarray(acceleration)
    n_samples = len(acceleration)
    if (acceleration.shape != (n_samples, 3) or np.shape(count) != (n_samples,)
            or np.shape(timestamp) != (n_samples,)):
        raise ValueError("Inconsistent input shapes")

    records = np.empty(n_samples, dtype=ACCELERATION_RECORD)
    records['count'] = count
    records['timestamp'] = timestamp
    records['acceleration'] = acceleration
    with open(path, 'wb') as f:
        f.write(records.tobytes())
