"""Numba engine: JIT-compiled ``prange`` kernels on the host CPU."""

import logging

import numpy as np

from ssm_rvs.engines.base import SamplingEngine
from ssm_rvs.engines.numba_parallel.kernels import (
    lba_kernel,
    plba_kernel,
    rnorm_kernel,
    rtnorm_kernel,
    runif_kernel,
)
from ssm_rvs.request.precision import Precision

logger = logging.getLogger(__name__)


def _as_kernel_array(value) -> np.ndarray:
    return np.ascontiguousarray(value, dtype=np.float64)


class NumbaEngine(SamplingEngine):
    """Parallel CPU engine. Only device 0 (the host) exists."""

    backend = "numba"

    def devices(self) -> list[str]:
        return ["cpu:0"]

    def _runif(self, request):
        p = request.params
        out = np.empty(request.n, dtype=self.dtype)
        runif_kernel(
            p["min"], p["max"], request.seed, request.nthread, self.single, out
        )
        return out

    def _rnorm(self, request):
        p = request.params
        out = np.empty(request.n, dtype=self.dtype)
        rnorm_kernel(
            p["mean"], p["sd"], request.seed, request.nthread, self.single, out
        )
        return out

    def _rtnorm(self, request):
        out = np.empty(request.n, dtype=self.dtype)
        rtnorm_kernel(
            request["plan"], request.seed, request.nthread, self.single, out
        )
        return out

    def _race(self, request):
        p = request.params
        rts = np.empty(request.n, dtype=self.dtype)
        rt1s = np.empty(request.n, dtype=self.dtype)
        choices = np.empty(request.n, dtype=np.int32)
        lba_kernel(
            p["b"],
            p["A"],
            p["plan_v"],
            p["t0"],
            request.seed,
            request.nthread,
            self.single,
            rts,
            rt1s,
            choices,
        )
        return rts, rt1s, choices

    def _piecewise_race(self, request):
        p = request.params
        timing = p["timing"]
        e1, e2 = timing.edges
        rts = np.empty(request.n, dtype=self.dtype)
        choices = np.empty(request.n, dtype=np.int32)
        plba_kernel(
            _as_kernel_array(p["A"]),
            _as_kernel_array(p["b"]),
            _as_kernel_array(p["c"]),
            p["plan_v"],
            p["plan_w"],
            e1,
            e2,
            timing.drift_segment,
            timing.threshold_segment,
            p["t0"],
            request.seed,
            request.nthread,
            self.single,
            rts,
            choices,
        )
        return rts, choices


class NumbaSingleEngine(NumbaEngine):
    precision = Precision.SINGLE


class NumbaDoubleEngine(NumbaEngine):
    precision = Precision.DOUBLE
