"""LBA (Linear Ballistic Accumulator) sampler configurations."""

from ssm_rvs.request.validation import scalar, vector
from ssm_rvs.transforms import PlanDrift, RequireOrdered, RequirePositiveDrift

# ============================================================================
# Shared request transforms for the two-accumulator LBA samplers
# ============================================================================

_LBA_PARAM_SPECS = [
    scalar("b"),
    scalar("A", nonnegative=True),
    vector("mean_v"),
    vector("sd_v", nonnegative=True, broadcast_to="mean_v"),
    scalar("t0", nonnegative=True),
]

_LBA_DEFAULT_PARAMS = {
    "b": 1.0,
    "A": 0.5,
    "mean_v": [2.4, 1.6],
    "sd_v": [1.0, 1.0],
    "t0": 0.5,
}


def _lba_transforms():
    return [
        RequireOrdered("A", "b", strict=False),
        RequirePositiveDrift("mean_v", "sd_v"),
        PlanDrift("mean_v", "sd_v", "plan_v", positive=True),
    ]


# ============================================================================
# Model configuration functions
# ============================================================================


def get_rlba_config():
    """Get configuration for the canonical two-accumulator LBA sampler."""
    return {
        "name": "rlba",
        "family": "race",
        "params": ["b", "A", "mean_v", "sd_v", "t0"],
        "param_specs": list(_LBA_PARAM_SPECS),
        "default_params": dict(_LBA_DEFAULT_PARAMS),
        "transforms": _lba_transforms(),
        "output": ["RT", "R"],
        "engine_method": "rlba",
        "n_accumulators": 2,
    }


def get_rlba_n1_config():
    """Get configuration for the LBA sampler reporting accumulator 1's finishing time."""
    return {
        "name": "rlba_n1",
        "family": "race",
        "params": ["b", "A", "mean_v", "sd_v", "t0"],
        "param_specs": list(_LBA_PARAM_SPECS),
        "default_params": dict(_LBA_DEFAULT_PARAMS),
        "transforms": _lba_transforms(),
        "output": ["RT1", "R"],
        "engine_method": "rlba_n1",
        "n_accumulators": 2,
    }
