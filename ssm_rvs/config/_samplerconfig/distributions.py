"""Configurations for the plain distribution samplers (uniform, normal, truncated normal)."""

import numpy as np

from ssm_rvs.request.validation import scalar
from ssm_rvs.transforms import PlanTruncation, RequireMeanInWindow, RequireOrdered


def get_runif_config():
    """Get configuration for the uniform sampler."""
    return {
        "name": "runif",
        "family": "distribution",
        "params": ["min", "max"],
        "param_specs": [scalar("min"), scalar("max")],
        "default_params": {"min": 0.0, "max": 1.0},
        "transforms": [RequireOrdered("min", "max")],
        "output": ["values"],
        "engine_method": "runif",
    }


def get_rnorm_config():
    """Get configuration for the Gaussian sampler."""
    return {
        "name": "rnorm",
        "family": "distribution",
        "params": ["mean", "sd"],
        "param_specs": [scalar("mean"), scalar("sd", nonnegative=True)],
        "default_params": {"mean": 0.0, "sd": 1.0},
        "transforms": [],
        "output": ["values"],
        "engine_method": "rnorm",
    }


def get_rtnorm_config():
    """Get configuration for the truncated Gaussian sampler.

    ``lower`` and ``upper`` may be infinite; every other value must be finite.
    """
    return {
        "name": "rtnorm",
        "family": "distribution",
        "params": ["mean", "sd", "lower", "upper"],
        "param_specs": [
            scalar("mean"),
            scalar("sd", nonnegative=True),
            scalar("lower", finite=False),
            scalar("upper", finite=False),
        ],
        "default_params": {"mean": 0.0, "sd": 1.0, "lower": -np.inf, "upper": np.inf},
        "transforms": [
            RequireOrdered("lower", "upper"),
            RequireMeanInWindow("mean", "sd", "lower", "upper"),
            PlanTruncation("mean", "sd", "lower", "upper", "plan"),
        ],
        "output": ["values"],
        "engine_method": "rtnorm",
    }
