from .config import (
    BACKENDS,
    get_default_engine_config,
    load_engine_config,
    sampler_config,
)
from .registry import (
    SamplerConfigRegistry,
    get_sampler_registry,
    register_sampler_config,
    register_sampler_config_factory,
)

__all__ = [
    "BACKENDS",
    "sampler_config",
    "get_default_engine_config",
    "load_engine_config",
    "SamplerConfigRegistry",
    "get_sampler_registry",
    "register_sampler_config",
    "register_sampler_config_factory",
]
