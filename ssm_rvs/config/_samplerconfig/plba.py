"""Piecewise LBA sampler configurations.

Reference: Holmes, W., Trueblood, J. S., & Heathcote, A. (2016). A new
framework for modeling decisions about changing information: The Piecewise
Linear Ballistic Accumulator model. Cognitive Psychology, 85, 1-29.
"""

from ssm_rvs.request.validation import scalar, vector
from ssm_rvs.transforms import (
    BroadcastToAccumulators,
    CopyParameter,
    PlanDrift,
    PlanStageTiming,
    RequireOrdered,
    RequirePositiveDrift,
    SumParameters,
)

_SINGLE_THRESHOLD_SPECS = [
    scalar("A", nonnegative=True),
    scalar("b"),
    scalar("t0", nonnegative=True),
    vector("mean_v"),
    vector("mean_w"),
    vector("sd_v", nonnegative=True, broadcast_to="mean_v"),
    scalar("rD", nonnegative=True),
    scalar("swt", nonnegative=True),
]

_SINGLE_THRESHOLD_DEFAULTS = {
    "A": 1.5,
    "b": 2.7,
    "t0": 0.5,
    "mean_v": [3.3, 2.2],
    "mean_w": [1.5, 1.2],
    "sd_v": [1.0, 1.0],
    "rD": 0.3,
    "swt": 0.5,
}


def get_rplba0_config():
    """Get configuration for pLBA variant 0 (untruncated stage drifts)."""
    return {
        "name": "rplba0",
        "family": "piecewise_race",
        "params": ["A", "b", "t0", "mean_v", "mean_w", "sd_v", "rD", "swt"],
        "param_specs": list(_SINGLE_THRESHOLD_SPECS),
        "default_params": dict(_SINGLE_THRESHOLD_DEFAULTS),
        "transforms": [
            RequireOrdered("A", "b", strict=False),
            CopyParameter("sd_v", "sd_w"),
            BroadcastToAccumulators(["A", "b"]),
            CopyParameter("b", "c"),
            PlanDrift("mean_v", "sd_v", "plan_v", positive=False),
            PlanDrift("mean_w", "sd_w", "plan_w", positive=False),
            PlanStageTiming("swt", "rD"),
        ],
        "output": ["RT", "R"],
        "engine_method": "rplba0",
        "n_accumulators": 2,
    }


def get_rplba1_config():
    """Get configuration for pLBA variant 1 (positive stage drifts, shared sd)."""
    return {
        "name": "rplba1",
        "family": "piecewise_race",
        "params": ["A", "b", "t0", "mean_v", "mean_w", "sd_v", "rD", "swt"],
        "param_specs": list(_SINGLE_THRESHOLD_SPECS),
        "default_params": dict(_SINGLE_THRESHOLD_DEFAULTS),
        "transforms": [
            RequireOrdered("A", "b", strict=False),
            CopyParameter("sd_v", "sd_w"),
            RequirePositiveDrift("mean_v", "sd_v"),
            RequirePositiveDrift("mean_w", "sd_w"),
            BroadcastToAccumulators(["A", "b"]),
            CopyParameter("b", "c"),
            PlanDrift("mean_v", "sd_v", "plan_v"),
            PlanDrift("mean_w", "sd_w", "plan_w"),
            PlanStageTiming("swt", "rD"),
        ],
        "output": ["RT", "R"],
        "engine_method": "rplba1",
        "n_accumulators": 2,
    }


def get_rplba2_config():
    """Get configuration for pLBA variant 2 (per-accumulator thresholds, stage-2 sd)."""
    return {
        "name": "rplba2",
        "family": "piecewise_race",
        "params": ["A", "b", "t0", "mean_v", "mean_w", "sd_v", "sd_w", "rD", "swt"],
        "param_specs": [
            vector("A", nonnegative=True),
            vector("b"),
            scalar("t0", nonnegative=True),
            vector("mean_v"),
            vector("mean_w"),
            vector("sd_v", nonnegative=True, broadcast_to="mean_v"),
            vector("sd_w", nonnegative=True, broadcast_to="mean_w"),
            scalar("rD", nonnegative=True),
            scalar("swt", nonnegative=True),
        ],
        "default_params": {
            "A": [1.5, 1.5],
            "b": [2.7, 2.7],
            "t0": 0.08,
            "mean_v": [3.3, 2.2],
            "mean_w": [1.5, 3.7],
            "sd_v": [1.0, 1.0],
            "sd_w": [1.0, 1.0],
            "rD": 0.3,
            "swt": 0.5,
        },
        "transforms": [
            RequireOrdered("A", "b", strict=False),
            RequirePositiveDrift("mean_v", "sd_v"),
            RequirePositiveDrift("mean_w", "sd_w"),
            CopyParameter("b", "c"),
            PlanDrift("mean_v", "sd_v", "plan_v"),
            PlanDrift("mean_w", "sd_w", "plan_w"),
            PlanStageTiming("swt", "rD"),
        ],
        "output": ["RT", "R"],
        "engine_method": "rplba2",
        "n_accumulators": 2,
    }


def get_rplba3_config():
    """Get configuration for pLBA variant 3 (drift and threshold both switch).

    ``B`` is the stage-1 travel distance (``b = A + B``), ``C`` the extra
    distance after the threshold update (``c = b + C``). The drift switches
    at ``swt + rD`` and the threshold at ``swt + tD``.
    """
    return {
        "name": "rplba3",
        "family": "piecewise_race",
        "params": [
            "A", "B", "C", "mean_v", "mean_w", "sd_v", "sd_w", "rD", "tD", "swt", "t0",
        ],
        "param_specs": [
            vector("A", nonnegative=True),
            vector("B", nonnegative=True),
            vector("C", nonnegative=True),
            vector("mean_v"),
            vector("mean_w"),
            vector("sd_v", nonnegative=True, broadcast_to="mean_v"),
            vector("sd_w", nonnegative=True, broadcast_to="mean_w"),
            scalar("rD", nonnegative=True),
            scalar("tD", nonnegative=True),
            scalar("swt", nonnegative=True),
            scalar("t0", nonnegative=True),
        ],
        "default_params": {
            "A": [1.5, 1.5],
            "B": [1.2, 1.2],
            "C": [0.3, 0.3],
            "mean_v": [3.3, 2.2],
            "mean_w": [1.5, 3.7],
            "sd_v": [1.0, 1.0],
            "sd_w": [1.0, 1.0],
            "rD": 0.3,
            "tD": 0.3,
            "swt": 0.5,
            "t0": 0.08,
        },
        "transforms": [
            RequirePositiveDrift("mean_v", "sd_v"),
            RequirePositiveDrift("mean_w", "sd_w"),
            SumParameters(["A", "B"], "b"),
            SumParameters(["b", "C"], "c"),
            PlanDrift("mean_v", "sd_v", "plan_v"),
            PlanDrift("mean_w", "sd_w", "plan_w"),
            PlanStageTiming("swt", "rD", "tD"),
        ],
        "output": ["RT", "R"],
        "engine_method": "rplba3",
        "n_accumulators": 2,
    }
