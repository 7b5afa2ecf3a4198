from socest.estimation.bayesian_fusion import BayesianFusion, BayesianFusionRecord
from socest.estimation.coulomb_counting import CoulombCounting, CoulombCountingRecord
from socest.estimation.direct_mapping import DirectMapping, DirectMappingRecord
from socest.estimation.estimator import DischargeEstimator, Estimator

__all__ = [
    "BayesianFusion",
    "BayesianFusionRecord",
    "CoulombCounting",
    "CoulombCountingRecord",
    "DirectMapping",
    "DirectMappingRecord",
    "DischargeEstimator",
    "Estimator",
]
