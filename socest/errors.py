class SocEstError(Exception):
    """Base class for all errors raised by socest."""


class InvalidArgumentError(SocEstError, ValueError):
    """A required input is missing or malformed."""


class DegenerateDistributionError(SocEstError, ArithmeticError):
    """A Bayesian update produced a posterior without support."""


class OutputWriteError(SocEstError, OSError):
    """Writing results to disk failed.

    Attributes:
        path: The output path that could not be written.
    """

    def __init__(self, path, message: str = "could not write output") -> None:
        super().__init__(f"{message}: {path}")
        self.path = path
