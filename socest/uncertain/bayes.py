import logging
import numbers

import numpy as np

from socest.errors import DegenerateDistributionError, InvalidArgumentError
from socest.uncertain.value import UncertainValue, as_particles

logger = logging.getLogger(__name__)


def bayes_update(prior, likelihood, observation: float, rng=None):
    """Condition ``prior`` on one observation.

    The posterior density is proportional to ``prior(x) * likelihood(observation | x)``.
    Prior particles are weighted by the likelihood density and resampled back into
    an equally weighted ensemble of the same size. A point prior stays a point.

    Args:
        prior: Prior distribution (float or UncertainValue).
        likelihood: Noise model exposing ``likelihood(observation, x) -> ndarray``,
            e.g. a :class:`~socest.sensor.sensor.GaussianSensor`.
        observation: One concrete measurement.
        rng: Seed or numpy Generator used for resampling.

    Returns:
        Posterior distribution of the same kind as ``prior``.

    Raises:
        DegenerateDistributionError: The likelihood is zero wherever the prior has mass.
    """
    if likelihood is None or not callable(getattr(likelihood, "likelihood", None)):
        raise InvalidArgumentError("likelihood model must provide likelihood(observation, x)")
    if isinstance(observation, UncertainValue) or not isinstance(observation, numbers.Real):
        raise InvalidArgumentError(f"observation must be a concrete number, got {observation!r}")

    particles = as_particles(prior)
    weights = np.asarray(likelihood.likelihood(float(observation), particles), dtype=float)
    total = weights.sum()
    if not np.isfinite(total) or total <= 0.0:
        raise DegenerateDistributionError(
            f"likelihood of observation {observation} vanishes over the prior support "
            f"[{particles.min()}, {particles.max()}]"
        )

    if not isinstance(prior, UncertainValue):
        return float(prior)

    weights = weights / total
    ess = 1.0 / np.sum(weights**2)
    logger.debug("bayes update: observation=%.6g, effective sample size %.1f of %d", observation, ess, prior.size)

    index = systematic_resample(weights, rng)
    return UncertainValue(particles[index])


def systematic_resample(weights: np.ndarray, rng=None) -> np.ndarray:
    """Indices of a systematic resample of normalised ``weights``."""
    n = len(weights)
    positions = (np.random.default_rng(rng).random() + np.arange(n)) / n
    cumulative = np.cumsum(weights)
    cumulative[-1] = 1.0  # guard against round-off
    return np.searchsorted(cumulative, positions, side="right")
