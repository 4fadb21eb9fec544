"""Example of estimation problems."""
from dataclasses import dataclass
import numpy as np
from scipy._lib._util import check_random_state
from .linear import KalmanFilter


@dataclass
class LinearProblemExample:
    """Example of a linear estimation problem.

    Parameters
    ----------
    x0 : ndarray, shape (n_states,)
        Prior state mean at the first epoch.
    P0 : ndarray, shape (n_states, n_states)
        Prior state covariance at the first epoch.
    F : ndarray, shape (n_states, n_states)
        Transition matrix.
    B : ndarray, shape (n_states, n_controls) or None
        Control matrix, None if the system has no control input.
    Q : ndarray, shape (n_states, n_states)
        Process noise covariance matrix.
    H : ndarray, shape (n_meas, n_states)
        Measurement matrix.
    R : ndarray, shape (n_meas, n_meas)
        Measurement noise covariance matrix.
    measurements : list
        Measurement vector for each epoch or None if the measurement is missing.
    controls : ndarray, shape (n_epochs - 1, n_controls) or None
        Control vectors applied at each transition.
    n_epochs : int
        Number of epochs.
    xt : ndarray, shape (n_epochs, n_states)
        True state for each epoch.
    """
    x0 : np.ndarray
    P0 : np.ndarray
    F : np.ndarray
    B : np.ndarray
    Q : np.ndarray
    H : np.ndarray
    R : np.ndarray
    measurements : list
    controls : np.ndarray
    n_epochs : int
    xt : np.ndarray

    def create_filter(self):
        """Create `KalmanFilter` set up for the problem.

        The prior is installed both as the a-priori and a-posteriori estimate,
        so the filter is ready for `kfilter.run_kalman_filter` as well as for a
        manual predict/correct loop.
        """
        n_states = len(self.x0)
        n_controls = 0 if self.B is None else self.B.shape[1]
        kf = KalmanFilter(n_states, len(self.H), n_controls)
        kf.transition_matrix = self.F
        if self.B is not None:
            kf.control_matrix = self.B
        kf.process_noise_cov = self.Q
        kf.measurement_matrix = self.H
        kf.measurement_noise_cov = self.R
        kf.state_pre = self.x0
        kf.state_post = self.x0
        kf.error_cov_pre = self.P0
        kf.error_cov_post = self.P0
        return kf


def generate_linear_pendulum(
    n_epochs=1000,
    x0=np.array([1.0, 0.0]),
    P0=np.diag([0.1**2, 0.05**2]),
    tau=0.1,
    T=10.0,
    eta=0.1,
    qf=0.03,
    sigma_angle=0.2,
    sigma_rate=0.1,
    rng=0,
):
    """Generate data for an example of a linear pendulum with friction.

    The continuous system model is::

        dx1 / dt = x2
        dx2 / dt = -omega**2 * x1 - 2 * eta * omega * x2 + f

    with ``f`` being an external force. It is discretized with a time step `tau`,
    the external force is modeled as a random white sequence.

    The measurements consist of both x1 and x2 (angle and angular rate).

    Parameters
    ----------
    n_epochs : int
        Number of epochs for simulation.
    x0 : array_like, shape (2,)
        Initial state mean.
    P0 : array_like, shape (2, 2)
        Initial state covariance.
    tau : float
        Time step in seconds.
    T : float
        Pendulum period in seconds.
    eta : float
        Dimensionless friction coefficient.
    qf : float
        Intensity of force process in rad/s/sqrt(s)
    sigma_angle : float
        Accuracy of angle measurements in rad.
    sigma_rate : float
        Accuracy of angular rate measurements in rad/s.
    rng : None, int or `numpy.random.RandomState`
        Seed to create or already created RandomState. None corresponds to
        nondeterministic seeding.

    Returns
    -------
    LinearProblemExample
    """
    rng = check_random_state(rng)
    n_states = 2
    n_obs = 2

    x0 = np.asarray(x0)
    P0 = np.asarray(P0)
    xt = np.empty((n_epochs, n_states))
    xt[0] = rng.multivariate_normal(x0, P0)

    omega = 2 * np.pi / T
    F = np.array([[1, tau], [-(omega ** 2) * tau, 1 - 2 * eta * omega * tau]])
    G = np.array([[0], [1]])
    q = np.array([[tau * qf**2]])

    R = np.diag([sigma_angle**2, sigma_rate**2])
    H = np.identity(n_obs)
    z = []

    for i in range(n_epochs):
        z.append(H @ xt[i] + rng.multivariate_normal(np.zeros(n_obs), R))
        if i + 1 < n_epochs:
            w = rng.multivariate_normal(np.zeros(len(q)), q)
            xt[i + 1] = F @ xt[i] + G @ w

    return LinearProblemExample(x0, P0, F, None, G @ q @ G.T, H, R, z, None,
                                n_epochs, xt)


def generate_constant_acceleration(
    n_epochs=1000,
    acceleration=0.5,
    tau=1.0,
    q=1e-6,
    sigma_acceleration=0.1**0.5,
    p_skip=0.0,
    rng=0,
):
    """Generate data for an example of 1-D motion with almost constant acceleration.

    The state consists of position, speed and acceleration. The acceleration
    performs a random walk with the variance `q` per step and is directly
    measured, position and speed must be inferred from the dynamics.

    Parameters
    ----------
    n_epochs : int
        Number of epochs for simulation.
    acceleration : float
        Prior mean of the acceleration in m/s^2.
    tau : float
        Time step in seconds.
    q : float
        Variance of the acceleration increment per step in (m/s^2)^2.
    sigma_acceleration : float
        Accuracy of acceleration measurements in m/s^2.
    p_skip : float
        Probability that a measurement is missing at an epoch.
    rng : None, int or `numpy.random.RandomState`
        Seed to create or already created RandomState. None corresponds to
        nondeterministic seeding.

    Returns
    -------
    LinearProblemExample
    """
    rng = check_random_state(rng)
    x0 = np.array([0.0, 0.0, acceleration])
    P0 = np.diag([1e-4, 1e-4, 1.0])

    F = np.array([[1, tau, 0.5 * tau**2],
                  [0, 1, tau],
                  [0, 0, 1]])
    g = np.array([0.5 * tau**2, tau, 1])
    Q = q * np.outer(g, g)
    H = np.array([[0.0, 0.0, 1.0]])
    R = np.array([[sigma_acceleration**2]])

    xt = np.empty((n_epochs, 3))
    xt[0] = rng.multivariate_normal(x0, P0)
    z = []
    for i in range(n_epochs):
        zi = H @ xt[i] + sigma_acceleration * rng.randn(1)
        z.append(None if rng.uniform() < p_skip else zi)
        if i + 1 < n_epochs:
            xt[i + 1] = F @ xt[i] + g * q**0.5 * rng.randn()

    return LinearProblemExample(x0, P0, F, None, Q, H, R, z, None, n_epochs, xt)


def generate_controlled_cart(
    n_epochs=1000,
    tau=0.1,
    amplitude=5.0,
    period=20.0,
    q=0.01,
    sigma_position=0.5,
    rng=0,
):
    """Generate data for an example of a cart driven by a known acceleration.

    The state consists of position and speed. The commanded acceleration
    ``amplitude * sin(2 * pi * t / period)`` enters through the control matrix,
    an unknown white acceleration with the variance `q` acts as process noise.
    The position is measured.

    Parameters
    ----------
    n_epochs : int
        Number of epochs for simulation.
    tau : float
        Time step in seconds.
    amplitude : float
        Amplitude of the commanded acceleration in m/s^2.
    period : float
        Period of the commanded acceleration in seconds.
    q : float
        Variance of the unknown acceleration in (m/s^2)^2.
    sigma_position : float
        Accuracy of position measurements in m.
    rng : None, int or `numpy.random.RandomState`
        Seed to create or already created RandomState. None corresponds to
        nondeterministic seeding.

    Returns
    -------
    LinearProblemExample
    """
    rng = check_random_state(rng)
    x0 = np.array([0.0, 1.0])
    P0 = np.diag([1.0, 0.5**2])

    F = np.array([[1, tau], [0, 1]])
    g = np.array([0.5 * tau**2, tau])
    B = g[:, None]
    Q = q * np.outer(g, g)
    H = np.array([[1.0, 0.0]])
    R = np.array([[sigma_position**2]])

    t = tau * np.arange(n_epochs - 1)
    u = amplitude * np.sin(2 * np.pi * t / period)[:, None]

    xt = np.empty((n_epochs, 2))
    xt[0] = rng.multivariate_normal(x0, P0)
    z = []
    for i in range(n_epochs):
        z.append(H @ xt[i] + sigma_position * rng.randn(1))
        if i + 1 < n_epochs:
            xt[i + 1] = F @ xt[i] + B @ u[i] + g * q**0.5 * rng.randn()

    return LinearProblemExample(x0, P0, F, B, Q, H, R, z, u, n_epochs, xt)
