import logging
from dataclasses import dataclass

from socest.battery.battery import Battery
from socest.estimation.estimator import DischargeEstimator
from socest.uncertain.bayes import bayes_update
from socest.uncertain.value import UncertainValue, point, sample, std

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BayesianFusionRecord:
    """
    All soc values in %.

    Attributes:
        time: Simulation time in s.
        current_measured: Noisy load current reading in A.
        true_soc: State of charge of the ground-truth battery.
        measured_soc: Soc mapped from the single noisy voltage observation.
        prior_soc: Coulomb-counted soc, the prior of the update.
        posterior_soc: Fused soc written back into the estimate.
        posterior_std: Standard deviation of posterior_soc.
    """

    time: float
    current_measured: float | UncertainValue
    true_soc: float
    measured_soc: float
    prior_soc: float | UncertainValue
    posterior_soc: float | UncertainValue
    posterior_std: float


class BayesianFusion(DischargeEstimator):
    """One-step Bayesian filter over the terminal voltage.

    Every step the coulomb-counted estimate supplies the prior voltage, a noisy
    reading of the ground-truth voltage is the observation, and the posterior
    soc overwrites the estimate so counting errors do not accumulate.
    """

    name = "bayesian_fusion"

    def run(self) -> list[BayesianFusionRecord]:
        cell = self.cell
        estimate = Battery(cell, self.capacity_mah)
        ground_truth = Battery(cell, self.capacity_mah)
        records = []
        time = 0.0

        while not estimate.dead and not ground_truth.dead:
            self.check_steps(len(records))
            time += self.time_step

            current_true = self.draw_current()
            current_measured = self.sensors.measure_current(current_true)

            ground_truth.update(time, current_true, self.voltage_load)
            estimate.update(time, current_measured, self.voltage_load)

            voltage_true = cell.soc_to_voltage(ground_truth.soc)
            voltage_prior = cell.soc_to_voltage(estimate.soc)
            voltage_measured = sample(self.sensors.measure_voltage(voltage_true), self.rng)

            voltage_posterior = bayes_update(voltage_prior, self.sensors.voltage, voltage_measured, self.rng)

            soc_posterior = cell.voltage_to_soc(voltage_posterior)
            estimate.set_soc(soc_posterior / 100)

            record = BayesianFusionRecord(
                time=time,
                current_measured=current_measured,
                true_soc=point(ground_truth.soc) * 100,
                measured_soc=cell.voltage_to_soc(voltage_measured),
                prior_soc=cell.voltage_to_soc(voltage_prior),
                posterior_soc=soc_posterior,
                posterior_std=std(soc_posterior),
            )
            records.append(record)
            logger.debug(
                "t=%.0f s: true %.2f %%, prior %.2f %%, posterior %.2f %%",
                time,
                record.true_soc,
                point(record.prior_soc),
                point(record.posterior_soc),
            )

        return records
