"""
JAX Parallel Backend

Random-variate kernels vectorized with ``vmap`` and compiled with XLA, for
CPU, GPU and TPU devices. ``gpuid`` indexes ``jax.devices()``.

Example:
    from ssm_rvs.engines.jax_parallel import JaxSingleEngine
    from ssm_rvs.request.builder import build_request

    engine = JaxSingleEngine()
    out = engine.run(build_request("rplba1", 1000, random_state=1))
"""

try:
    from ssm_rvs.engines.jax_parallel.engine import (
        JaxDoubleEngine,
        JaxEngine,
        JaxSingleEngine,
        get_jax_device_info,
    )

    JAX_AVAILABLE = True
    _import_error = None
except ImportError as e:
    JAX_AVAILABLE = False
    _import_error = str(e)


def require_jax() -> None:
    """Raise an informative ImportError when JAX is not installed."""
    if not JAX_AVAILABLE:
        raise ImportError(
            f"JAX backend not available. "
            f"Please install JAX: pip install 'ssm-rvs[jax]'. "
            f"For GPU support: pip install 'jax[cuda12]'. "
            f"Original error: {_import_error}"
        )


__all__ = [
    "JaxEngine",
    "JaxSingleEngine",
    "JaxDoubleEngine",
    "get_jax_device_info",
    "require_jax",
    "JAX_AVAILABLE",
]
