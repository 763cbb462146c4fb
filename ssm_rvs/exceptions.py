"""Exception hierarchy for request validation and kernel failures.

Parameter errors are raised while a request is being built, before any
random stream state is consumed. They subclass ``ValueError`` so callers
that already guard against bad arguments keep working.
"""


class ParameterError(ValueError):
    """Base class for caller errors detected during request construction."""

    def __init__(self, param: str, message: str):
        self.param = param
        super().__init__(f"{param}: {message}")


class ArityError(ParameterError):
    """A parameter has the wrong number of values (e.g. a vector for a scalar)."""


class DomainError(ParameterError):
    """A parameter value lies outside its admissible domain."""


class LengthMismatchError(ParameterError):
    """Paired vector parameters differ in length after broadcasting."""


class SamplingError(RuntimeError):
    """One or more draws exhausted their bounded retry budget inside a kernel."""

    def __init__(self, sampler: str, n_failed: int, n: int):
        self.sampler = sampler
        self.n_failed = n_failed
        self.n = n
        super().__init__(
            f"{sampler}: {n_failed} of {n} draws exceeded the retry budget; "
            "the parameter set is too extreme for the rejection samplers."
        )


class DeviceError(RuntimeError):
    """The requested device is not available on the selected backend."""
