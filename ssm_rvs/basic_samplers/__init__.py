from .sampler import (
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
from .sampler_class import Sampler

__all__ = [
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
]
