"""
Numba Parallel Backend

Random-variate kernels compiled with Numba's ``@njit(parallel=True)``. Work
is split into blocks of ``nthread`` draws that ``prange`` distributes over
the available threads; every draw owns its own counter-based stream.

Example:
    from ssm_rvs.engines.numba_parallel import NumbaSingleEngine
    from ssm_rvs.request.builder import build_request

    engine = NumbaSingleEngine()
    out = engine.run(build_request("rlba", 1000, random_state=1))
"""

from ssm_rvs.engines.numba_parallel.engine import (
    NumbaDoubleEngine,
    NumbaEngine,
    NumbaSingleEngine,
)

__all__ = [
    "NumbaEngine",
    "NumbaSingleEngine",
    "NumbaDoubleEngine",
]
