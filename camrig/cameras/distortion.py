"""
Lens distortion models.

Distortion is applied to normalized image coordinates (x = X/Z, y = Y/Z)
between the perspective division and the intrinsic scaling of a camera:

    (X, Y, Z)  ->  (x, y)  ->  distort  ->  (x_d, y_d)  ->  (u, v)

Every model can evaluate the distortion with its own parameters or with a
caller supplied parameter vector (used by optimizers probing perturbed
parameters), and can return the analytic Jacobians of the distorted point
with respect to the input point and to the parameters.

Models:
    RadTanDistortion: Radial-tangential (plumb bob) model, parameters
        [k1, k2, p1, p2].
    EquidistantDistortion: Equidistant fisheye model, parameters
        [k1, k2, k3, k4].
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

import numpy as np

from ..utils.checks import check


MAX_UNDISTORT_ITERATIONS = 20
UNDISTORT_TOLERANCE = 1e-12


class Distortion(ABC):
    """
    Base class for distortion models.

    Subclasses define ``NUM_PARAMETERS`` and ``TYPE`` and implement
    :meth:`distort_with_jacobians` and :meth:`undistort`.
    """

    NUM_PARAMETERS: int = 0
    TYPE: str = "none"

    def __init__(self, parameters: Sequence[float]):
        self._parameters = self._check_parameters(parameters, "distortion parameters")
        self._parameters.flags.writeable = False

    @property
    def parameters(self) -> np.ndarray:
        """Read-only distortion parameter vector."""
        return self._parameters

    @property
    def num_parameters(self) -> int:
        return self.NUM_PARAMETERS

    def _check_parameters(self, parameters: Sequence[float], name: str) -> np.ndarray:
        parameters = np.asarray(parameters, dtype=np.float64).reshape(-1)
        check(
            parameters.shape == (self.NUM_PARAMETERS,),
            f"{type(self).__name__} expects {self.NUM_PARAMETERS} {name}, "
            f"got {parameters.size}",
        )
        return parameters

    def resolve_parameters(self, parameters: Optional[Sequence[float]]) -> np.ndarray:
        """Own parameters, or the validated external override."""
        if parameters is None:
            return self._parameters
        return self._check_parameters(parameters, "external distortion parameters")

    def distort(
        self,
        point: np.ndarray,
        parameters: Optional[Sequence[float]] = None,
    ) -> np.ndarray:
        """
        Apply distortion to a normalized 2D point.

        Args:
            point: Normalized image point (2,).
            parameters: Optional parameter vector used instead of the model's
                own parameters for this call only.

        Returns:
            np.ndarray: Distorted normalized point (2,).
        """
        distorted, _, _ = self.distort_with_jacobians(
            point, parameters, jacobian_point=False, jacobian_parameters=False
        )
        return distorted

    @abstractmethod
    def distort_with_jacobians(
        self,
        point: np.ndarray,
        parameters: Optional[Sequence[float]] = None,
        jacobian_point: bool = True,
        jacobian_parameters: bool = False,
    ) -> Tuple[np.ndarray, Optional[np.ndarray], Optional[np.ndarray]]:
        """
        Apply distortion and optionally compute Jacobians.

        Args:
            point: Normalized image point (2,).
            parameters: Optional external parameter vector.
            jacobian_point: Whether to compute d(distorted)/d(point), 2x2.
            jacobian_parameters: Whether to compute d(distorted)/d(parameters),
                2 x NUM_PARAMETERS.

        Returns:
            Tuple of (distorted point, point Jacobian or None,
            parameter Jacobian or None).
        """

    @abstractmethod
    def undistort(
        self,
        point: np.ndarray,
        parameters: Optional[Sequence[float]] = None,
    ) -> Tuple[np.ndarray, bool]:
        """
        Invert the distortion for a normalized 2D point.

        Returns:
            Tuple of (undistorted point, success). Success is False when the
            inversion does not converge or leaves the model's valid domain.
        """

    def __eq__(self, other) -> bool:
        if not isinstance(other, Distortion):
            return NotImplemented
        return type(self) is type(other) and np.array_equal(self._parameters, other._parameters)

    __hash__ = None

    def __repr__(self) -> str:
        params = ", ".join(f"{p:.6g}" for p in self._parameters)
        return f"{type(self).__name__}([{params}])"


class RadTanDistortion(Distortion):
    """
    Radial-tangential distortion with parameters [k1, k2, p1, p2].

        r^2 = x^2 + y^2
        x_d = x (1 + k1 r^2 + k2 r^4) + 2 p1 x y + p2 (r^2 + 2 x^2)
        y_d = y (1 + k1 r^2 + k2 r^4) + p1 (r^2 + 2 y^2) + 2 p2 x y
    """

    NUM_PARAMETERS = 4
    TYPE = "radial-tangential"

    def distort_with_jacobians(
        self,
        point: np.ndarray,
        parameters: Optional[Sequence[float]] = None,
        jacobian_point: bool = True,
        jacobian_parameters: bool = False,
    ) -> Tuple[np.ndarray, Optional[np.ndarray], Optional[np.ndarray]]:
        k1, k2, p1, p2 = self.resolve_parameters(parameters)
        x, y = np.asarray(point, dtype=np.float64).reshape(2)

        x2 = x * x
        y2 = y * y
        xy = x * y
        r2 = x2 + y2
        radial = 1.0 + k1 * r2 + k2 * r2 * r2

        distorted = np.array([
            x * radial + 2.0 * p1 * xy + p2 * (r2 + 2.0 * x2),
            y * radial + p1 * (r2 + 2.0 * y2) + 2.0 * p2 * xy,
        ])

        J_point = None
        if jacobian_point:
            d_radial = k1 + 2.0 * k2 * r2
            cross = 2.0 * xy * d_radial + 2.0 * p1 * x + 2.0 * p2 * y
            J_point = np.array([
                [radial + 2.0 * x2 * d_radial + 2.0 * p1 * y + 6.0 * p2 * x, cross],
                [cross, radial + 2.0 * y2 * d_radial + 6.0 * p1 * y + 2.0 * p2 * x],
            ])

        J_params = None
        if jacobian_parameters:
            J_params = np.array([
                [x * r2, x * r2 * r2, 2.0 * xy, r2 + 2.0 * x2],
                [y * r2, y * r2 * r2, r2 + 2.0 * y2, 2.0 * xy],
            ])

        return distorted, J_point, J_params

    def undistort(
        self,
        point: np.ndarray,
        parameters: Optional[Sequence[float]] = None,
    ) -> Tuple[np.ndarray, bool]:
        parameters = self.resolve_parameters(parameters)
        target = np.asarray(point, dtype=np.float64).reshape(2)

        # Gauss-Newton on distort(x) - target, starting from the distorted point.
        estimate = target.copy()
        for _ in range(MAX_UNDISTORT_ITERATIONS):
            distorted, J, _ = self.distort_with_jacobians(estimate, parameters)
            residual = distorted - target
            if residual @ residual < UNDISTORT_TOLERANCE ** 2:
                return estimate, bool(np.all(np.isfinite(estimate)))
            try:
                estimate = estimate - np.linalg.solve(J, residual)
            except np.linalg.LinAlgError:
                return estimate, False
            if not np.all(np.isfinite(estimate)):
                return estimate, False

        distorted = self.distort(estimate, parameters)
        residual = distorted - target
        return estimate, bool(residual @ residual < UNDISTORT_TOLERANCE ** 2)


class EquidistantDistortion(Distortion):
    """
    Equidistant fisheye distortion with parameters [k1, k2, k3, k4].

        r = sqrt(x^2 + y^2),  theta = atan(r)
        theta_d = theta (1 + k1 theta^2 + k2 theta^4 + k3 theta^6 + k4 theta^8)
        (x_d, y_d) = (theta_d / r) (x, y)
    """

    NUM_PARAMETERS = 4
    TYPE = "equidistant"

    # Below this radius the mapping is the identity to first order.
    SMALL_RADIUS = 1e-10

    @staticmethod
    def _theta_d(theta: float, k: np.ndarray) -> Tuple[float, float]:
        """theta_d and d(theta_d)/d(theta)."""
        t2 = theta * theta
        t4 = t2 * t2
        t6 = t4 * t2
        t8 = t4 * t4
        theta_d = theta * (1.0 + k[0] * t2 + k[1] * t4 + k[2] * t6 + k[3] * t8)
        d_theta_d = 1.0 + 3.0 * k[0] * t2 + 5.0 * k[1] * t4 + 7.0 * k[2] * t6 + 9.0 * k[3] * t8
        return theta_d, d_theta_d

    def distort_with_jacobians(
        self,
        point: np.ndarray,
        parameters: Optional[Sequence[float]] = None,
        jacobian_point: bool = True,
        jacobian_parameters: bool = False,
    ) -> Tuple[np.ndarray, Optional[np.ndarray], Optional[np.ndarray]]:
        k = self.resolve_parameters(parameters)
        p = np.asarray(point, dtype=np.float64).reshape(2)
        r = float(np.hypot(p[0], p[1]))

        if r < self.SMALL_RADIUS:
            J_point = np.eye(2) if jacobian_point else None
            J_params = np.zeros((2, self.NUM_PARAMETERS)) if jacobian_parameters else None
            return p.copy(), J_point, J_params

        theta = np.arctan(r)
        theta_d, d_theta_d = self._theta_d(theta, k)
        scale = theta_d / r
        distorted = scale * p

        J_point = None
        if jacobian_point:
            d_theta_dr = 1.0 / (1.0 + r * r)
            d_scale_dr = (d_theta_d * d_theta_dr * r - theta_d) / (r * r)
            J_point = scale * np.eye(2) + d_scale_dr * np.outer(p, p / r)

        J_params = None
        if jacobian_parameters:
            powers = np.array([theta ** 3, theta ** 5, theta ** 7, theta ** 9])
            J_params = np.outer(p / r, powers)

        return distorted, J_point, J_params

    def undistort(
        self,
        point: np.ndarray,
        parameters: Optional[Sequence[float]] = None,
    ) -> Tuple[np.ndarray, bool]:
        k = self.resolve_parameters(parameters)
        p = np.asarray(point, dtype=np.float64).reshape(2)
        theta_d = float(np.hypot(p[0], p[1]))

        if theta_d < self.SMALL_RADIUS:
            return p.copy(), True

        # Newton iteration on theta_d(theta) = |p|.
        theta = theta_d
        converged = False
        for _ in range(MAX_UNDISTORT_ITERATIONS):
            value, derivative = self._theta_d(theta, k)
            if derivative == 0.0 or not np.isfinite(derivative):
                break
            step = (value - theta_d) / derivative
            theta -= step
            if abs(step) < UNDISTORT_TOLERANCE:
                converged = True
                break

        if not converged or not np.isfinite(theta) or theta < 0.0 or theta >= np.pi / 2:
            return p.copy(), False

        return p * (np.tan(theta) / theta_d), True
