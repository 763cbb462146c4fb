"""
Sampling engines.

Two backends implement every sampler family in both precisions:

1. **Numba** (``numba_parallel``, default): ``@njit(parallel=True)`` kernels
   on the host CPU, work split into blocks of ``nthread`` draws.
2. **JAX** (``jax_parallel``): ``vmap`` + XLA on any device JAX exposes,
   selected by ``gpuid``. Requires the ``jax`` extra.

Use :func:`get_engine` rather than instantiating engines directly; engines
are stateless and cached per ``(backend, precision)``.
"""

import logging
from functools import lru_cache

from ssm_rvs.config.config import BACKENDS
from ssm_rvs.engines.base import SamplingEngine
from ssm_rvs.engines.numba_parallel import NumbaDoubleEngine, NumbaSingleEngine
from ssm_rvs.request.precision import Precision

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _engine_for(backend: str, precision: Precision) -> SamplingEngine:
    if backend == "numba":
        cls = NumbaDoubleEngine if precision.is_double else NumbaSingleEngine
    else:
        from ssm_rvs.engines import jax_parallel

        jax_parallel.require_jax()
        cls = (
            jax_parallel.JaxDoubleEngine
            if precision.is_double
            else jax_parallel.JaxSingleEngine
        )
    logger.debug("Creating %s engine", cls.__name__)
    return cls()


def get_engine(dp: bool = False, backend: str = "numba") -> SamplingEngine:
    """Return the engine for a backend at the precision selected by ``dp``.

    Raises
    ------
    ValueError
        If ``backend`` is unknown.
    ImportError
        If the JAX backend is requested but JAX is not installed.
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend '{backend}'; expected one of {BACKENDS}")
    return _engine_for(backend, Precision.from_flag(dp))


def get_device_info() -> dict[str, list[str]]:
    """Devices visible to each installed backend."""
    from ssm_rvs.engines import jax_parallel

    info = {"numba": get_engine(backend="numba").devices()}
    if jax_parallel.JAX_AVAILABLE:
        info["jax"] = jax_parallel.get_jax_device_info()["devices"]
    return info


__all__ = [
    "SamplingEngine",
    "NumbaSingleEngine",
    "NumbaDoubleEngine",
    "get_engine",
    "get_device_info",
]
