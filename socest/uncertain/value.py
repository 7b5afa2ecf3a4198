"""Uncertain values represented as Monte Carlo particle ensembles.

An :class:`UncertainValue` wraps a one-dimensional array of equally weighted
particles. Particles sharing an index in two ensembles are joint draws, so all
arithmetic is element-wise. Plain floats are the point-value case: every
function in this module accepts either and only returns an ``UncertainValue``
when at least one argument is uncertain.
"""

import math
import numbers

import numpy as np

from socest.errors import InvalidArgumentError

DEFAULT_PARTICLES = 1000
GATE_MAX_SCALE = 50.0


class UncertainValue:
    __slots__ = ("_particles",)

    # let numpy scalars defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, particles) -> None:
        particles = np.array(particles, dtype=float).reshape(-1)
        if particles.size == 0:
            raise InvalidArgumentError("an uncertain value needs at least one particle")
        particles.setflags(write=False)
        self._particles = particles

    @classmethod
    def from_samples(cls, samples) -> "UncertainValue":
        """Build an ensemble from concrete samples, rejecting NaN and inf."""
        samples = np.asarray(samples, dtype=float)
        if samples.size == 0 or not np.all(np.isfinite(samples)):
            raise InvalidArgumentError("samples must be a non-empty sequence of finite numbers")
        return cls(samples)

    @classmethod
    def gaussian(cls, mean: float, std: float, size: int = DEFAULT_PARTICLES, rng=None):
        """Gaussian(mean, std) ensemble, or the plain float ``mean`` when std is 0."""
        _check_finite(mean=mean, std=std)
        if std < 0:
            raise InvalidArgumentError(f"standard deviation must be non-negative, got {std}")
        if std == 0:
            return float(mean)
        _check_size(size)
        return cls(np.random.default_rng(rng).normal(mean, std, size))

    @classmethod
    def uniform(cls, low: float, high: float, size: int = DEFAULT_PARTICLES, rng=None):
        """Uniform[low, high] ensemble, or the plain float ``low`` when the range is empty."""
        _check_finite(low=low, high=high)
        if low > high:
            raise InvalidArgumentError(f"uniform range is inverted: [{low}, {high}]")
        if low == high:
            return float(low)
        _check_size(size)
        return cls(np.random.default_rng(rng).uniform(low, high, size))

    @property
    def particles(self) -> np.ndarray:
        return self._particles

    @property
    def size(self) -> int:
        return self._particles.size

    def __len__(self) -> int:
        return self._particles.size

    def __repr__(self) -> str:
        return f"UncertainValue(mean={point(self):.6g}, std={std(self):.3g}, particles={self.size})"

    ## arithmetic
    def _apply(self, op, other, reflected=False):
        if not isinstance(other, (UncertainValue, numbers.Real)):
            return NotImplemented
        if reflected:
            return _combine(op, other, self)
        return _combine(op, self, other)

    def __add__(self, other):
        return self._apply(np.add, other)

    def __radd__(self, other):
        return self._apply(np.add, other, reflected=True)

    def __sub__(self, other):
        return self._apply(np.subtract, other)

    def __rsub__(self, other):
        return self._apply(np.subtract, other, reflected=True)

    def __mul__(self, other):
        return self._apply(np.multiply, other)

    def __rmul__(self, other):
        return self._apply(np.multiply, other, reflected=True)

    def __truediv__(self, other):
        return self._apply(np.divide, other)

    def __rtruediv__(self, other):
        return self._apply(np.divide, other, reflected=True)

    def __pow__(self, exponent):
        if not isinstance(exponent, numbers.Real):
            return NotImplemented
        return UncertainValue(np.power(self._particles, float(exponent)))

    def __neg__(self):
        return UncertainValue(-self._particles)

    def __pos__(self):
        return self

    def __abs__(self):
        return UncertainValue(np.abs(self._particles))


def _check_finite(**values) -> None:
    for name, value in values.items():
        if isinstance(value, UncertainValue) or not isinstance(value, numbers.Real):
            raise InvalidArgumentError(f"{name} must be a real number, got {value!r}")
        if not math.isfinite(value):
            raise InvalidArgumentError(f"{name} must be finite, got {value}")


def _check_size(size) -> None:
    if not isinstance(size, numbers.Integral) or size < 1:
        raise InvalidArgumentError(f"particle count must be a positive integer, got {size!r}")


def as_particles(x) -> np.ndarray:
    """Particles of ``x`` as a 1-d array (a float becomes a single particle)."""
    if isinstance(x, UncertainValue):
        return x.particles
    return np.atleast_1d(np.asarray(x, dtype=float))


def is_uncertain(x) -> bool:
    return isinstance(x, UncertainValue)


def _combine(op, *args):
    arrays = [a.particles if isinstance(a, UncertainValue) else np.asarray(a, dtype=float) for a in args]
    sizes = {a.size for a in arrays if a.ndim > 0 and a.size != 1}
    if len(sizes) > 1:
        raise InvalidArgumentError(f"cannot combine ensembles of different sizes: {sorted(sizes)}")
    return UncertainValue(op(*arrays))


def _lift(op, *args):
    if any(isinstance(a, UncertainValue) for a in args):
        return _combine(op, *args)
    return float(op(*args))


def sqrt(x):
    return _lift(np.sqrt, x)


def exp(x):
    return _lift(np.exp, x)


def maximum(x, floor):
    """Element-wise ``max(x, floor)``."""
    return _lift(np.maximum, x, floor)


def support_min(x) -> float:
    return float(np.min(as_particles(x)))


def support_max(x) -> float:
    return float(np.max(as_particles(x)))


def point(x) -> float:
    """Representative point estimate: the ensemble mean."""
    return float(np.mean(as_particles(x)))


def nth_moment(x, n: int) -> float:
    """n-th central moment of ``x`` (the variance for n == 2)."""
    if n < 1:
        raise InvalidArgumentError(f"moment order must be at least 1, got {n}")
    if not isinstance(x, UncertainValue):
        return 0.0
    p = x.particles
    return float(np.mean((p - p.mean()) ** n))


def std(x) -> float:
    return math.sqrt(max(nth_moment(x, 2), 0.0))


def sample(x, rng=None) -> float:
    """Draw one concrete value from ``x``."""
    if not isinstance(x, UncertainValue):
        return float(x)
    return float(np.random.default_rng(rng).choice(x.particles))


def gate(x, start: float, max_scale: float = GATE_MAX_SCALE):
    """Smooth step from 0 to 1 around ``start``, used in place of a branch.

    The logistic steepness is ``max_scale`` divided by the largest magnitude
    ``x - start`` can take, so the transition is always sharp relative to the
    support of ``x``. For a point value this is a sigmoid evaluated at +/-50.
    """
    shifted = x - start
    width = max(abs(support_max(shifted)), abs(support_min(shifted)))
    if width == 0.0:
        # x sits exactly on the threshold
        return shifted * 0.0 + 0.5
    scale = max_scale / width
    return 1.0 / (1.0 + exp(-scale * shifted))
