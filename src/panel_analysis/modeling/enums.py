from enum import Enum


class ConvergenceStatus(str, Enum):
    CONVERGED = "converged"
    NOT_CONVERGED = "not_converged"


class EstimationMethod(str, Enum):
    REML = "reml"
    ML = "ml"


class BayesFitMethod(str, Enum):
    VARIATIONAL = "vb"
    MAP = "map"
