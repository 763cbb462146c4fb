"""Built-in sampler configurations, one module per family."""

from .distributions import get_rnorm_config, get_rtnorm_config, get_runif_config
from .lba import get_rlba_config, get_rlba_n1_config
from .plba import (
    get_rplba0_config,
    get_rplba1_config,
    get_rplba2_config,
    get_rplba3_config,
)


def get_sampler_config():
    """Collect the configurations of every built-in sampler."""
    return {
        "runif": get_runif_config(),
        "rnorm": get_rnorm_config(),
        "rtnorm": get_rtnorm_config(),
        "rlba": get_rlba_config(),
        "rlba_n1": get_rlba_n1_config(),
        "rplba0": get_rplba0_config(),
        "rplba1": get_rplba1_config(),
        "rplba2": get_rplba2_config(),
        "rplba3": get_rplba3_config(),
    }


__all__ = [
    "get_sampler_config",
    "get_runif_config",
    "get_rnorm_config",
    "get_rtnorm_config",
    "get_rlba_config",
    "get_rlba_n1_config",
    "get_rplba0_config",
    "get_rplba1_config",
    "get_rplba2_config",
    "get_rplba3_config",
]
