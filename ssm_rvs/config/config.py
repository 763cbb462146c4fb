"""Configuration dictionaries for samplers and engines.

Variables:
---------
sampler_config: dict
    Dictionary containing all the information about the built-in samplers
"""

import yaml

from ._samplerconfig import get_sampler_config

BACKENDS = ("numba", "jax")


def get_default_engine_config() -> dict:
    """Default execution settings shared by every sampler.

    ``nthread`` is the number of draws handed to one parallel work block,
    ``gpuid`` the device index, ``dp`` selects double precision and
    ``backend`` the engine family.
    """
    return {
        "nthread": 32,
        "gpuid": 0,
        "dp": False,
        "backend": "numba",
    }


def load_engine_config(path) -> dict:
    """Read engine settings from a YAML file, filling in defaults.

    Unknown keys are rejected so that typos do not silently fall back to
    the defaults.
    """
    with open(path) as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Engine config in {path} must be a mapping")

    config = get_default_engine_config()
    unknown = sorted(set(loaded) - set(config))
    if unknown:
        raise ValueError(f"Unknown engine config keys in {path}: {unknown}")
    config.update(loaded)
    if config["backend"] not in BACKENDS:
        raise ValueError(
            f"Unknown backend '{config['backend']}'; expected one of {BACKENDS}"
        )
    return config


sampler_config = get_sampler_config()
