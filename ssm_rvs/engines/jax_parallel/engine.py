"""JAX engine: XLA-compiled kernels on any device JAX can see."""

import logging
from typing import Any

import jax
import jax.numpy as jnp
import numpy as np

from ssm_rvs.config.config import get_default_engine_config
from ssm_rvs.engines.base import SamplingEngine
from ssm_rvs.engines.jax_parallel.kernels import (
    lba_kernel,
    plba_kernel,
    rnorm_kernel,
    rtnorm_kernel,
    runif_kernel,
    stream_keys,
)
from ssm_rvs.request.precision import Precision

logger = logging.getLogger(__name__)


def get_jax_device_info() -> dict[str, Any]:
    """Get information about available JAX devices."""
    devices = jax.devices()
    return {
        "available": True,
        "devices": [str(d) for d in devices],
        "default_backend": jax.default_backend(),
        "device_count": len(devices),
    }


class JaxEngine(SamplingEngine):
    """Engine running on ``jax.devices()[gpuid]``.

    ``nthread`` has no meaning here: XLA decides how the batch is spread
    over the device.
    """

    backend = "jax"

    def devices(self) -> list[str]:
        return [str(d) for d in jax.devices()]

    def run(self, request):
        if request.nthread != get_default_engine_config()["nthread"]:
            logger.warning(
                "nthread=%d is ignored by the jax backend", request.nthread
            )
        return super().run(request)

    def _scalar(self, value):
        return jnp.asarray(value, dtype=self.dtype)

    def _array(self, value):
        return jnp.asarray(np.asarray(value, dtype=np.float64), dtype=self.dtype)

    def _execute(self, request, kernel, *args, **kwargs):
        device = jax.devices()[request.gpuid]
        with jax.default_device(device):
            keys = stream_keys(request.seed, request.n)
            result = kernel(keys, *args, dtype=self.dtype, **kwargs)
        return jax.device_get(result)

    def _runif(self, request):
        p = request.params
        lo_eff = p["min"]
        if self.single:
            lo32 = np.float32(lo_eff)
            if lo32 < lo_eff:
                lo32 = np.nextafter(lo32, np.float32(np.inf))
            lo_eff = float(lo32)
        out = self._execute(
            request,
            runif_kernel,
            self._scalar(p["min"]),
            self._scalar(p["max"]),
            self._scalar(lo_eff),
        )
        return np.asarray(out)

    def _rnorm(self, request):
        p = request.params
        out = self._execute(
            request, rnorm_kernel, self._scalar(p["mean"]), self._scalar(p["sd"])
        )
        return np.asarray(out)

    def _rtnorm(self, request):
        out = self._execute(request, rtnorm_kernel, self._array(request["plan"]))
        return np.asarray(out)

    def _race(self, request):
        p = request.params
        rts, rt1s, choices = self._execute(
            request,
            lba_kernel,
            self._scalar(p["b"]),
            self._scalar(p["A"]),
            self._array(p["plan_v"]),
            self._scalar(p["t0"]),
        )
        return np.asarray(rts), np.asarray(rt1s), np.asarray(choices, dtype=np.int32)

    def _piecewise_race(self, request):
        p = request.params
        timing = p["timing"]
        e1, e2 = timing.edges
        rts, choices = self._execute(
            request,
            plba_kernel,
            self._array(p["A"]),
            self._array(p["b"]),
            self._array(p["c"]),
            self._array(p["plan_v"]),
            self._array(p["plan_w"]),
            self._scalar(e1),
            self._scalar(e2),
            self._scalar(p["t0"]),
            drift_segment=timing.drift_segment,
            threshold_segment=timing.threshold_segment,
        )
        return np.asarray(rts), np.asarray(choices, dtype=np.int32)


class JaxSingleEngine(JaxEngine):
    precision = Precision.SINGLE


class JaxDoubleEngine(JaxEngine):
    precision = Precision.DOUBLE

    def __init__(self):
        if not jax.config.jax_enable_x64:
            logger.info(
                "Enabling jax_enable_x64 process-wide for double precision sampling"
            )
            jax.config.update("jax_enable_x64", True)
