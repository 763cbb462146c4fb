__version__ = "0.1.0"

from . import config
from .basic_samplers import (
    Sampler,
    rlba,
    rlba_n1,
    rnorm,
    rplba0,
    rplba1,
    rplba2,
    rplba3,
    rtnorm,
    runif,
    sample,
)
from .engines import get_engine
from .exceptions import (
    ArityError,
    DeviceError,
    DomainError,
    LengthMismatchError,
    ParameterError,
    SamplingError,
)
from .request.builder import SampleRequest, build_request

__all__ = [
    "config",
    "Sampler",
    "sample",
    "runif",
    "rnorm",
    "rtnorm",
    "rlba",
    "rlba_n1",
    "rplba0",
    "rplba1",
    "rplba2",
    "rplba3",
    "get_engine",
    "build_request",
    "SampleRequest",
    "ParameterError",
    "ArityError",
    "DomainError",
    "LengthMismatchError",
    "SamplingError",
    "DeviceError",
]
