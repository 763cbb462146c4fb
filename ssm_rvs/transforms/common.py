"""Request transforms that derive kernel inputs from resolved parameters."""

from typing import Any

import numpy as np

from ssm_rvs.request.timing import StageTiming
from ssm_rvs.request.truncation import TruncationPlan, pack_plans
from ssm_rvs.transforms.base import RequestTransform


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


class BroadcastToAccumulators(RequestTransform):
    """Repeat scalar parameters so that every accumulator has its own value.

    Examples
    --------
    >>> theta = BroadcastToAccumulators(["A", "b"]).apply({"A": 1.5, "b": 2.7})
    >>> theta["b"]
    array([2.7, 2.7])
    """

    def __init__(self, param_names: list[str], n_accumulators: int = 2):
        self.param_names = param_names
        self.n_accumulators = n_accumulators

    def apply(
        self,
        theta: dict[str, Any],
        sampler_config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        for param in self.param_names:
            value = np.asarray(theta[param], dtype=np.float64)
            theta[param] = _readonly(
                np.broadcast_to(value, (self.n_accumulators,)).copy()
            )
        return theta


class SumParameters(RequestTransform):
    """Add parameters element-wise into a new one (``b = A + B``)."""

    def __init__(self, source_params: list[str], target_param: str):
        self.source_params = source_params
        self.target_param = target_param

    def apply(
        self,
        theta: dict[str, Any],
        sampler_config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        total = np.zeros_like(np.asarray(theta[self.source_params[0]], dtype=np.float64))
        for param in self.source_params:
            total = total + np.asarray(theta[param], dtype=np.float64)
        theta[self.target_param] = _readonly(total)
        return theta


class CopyParameter(RequestTransform):
    """Reuse one parameter under a second name (stage-2 sd of ``rplba0/1``)."""

    def __init__(self, source_param: str, target_param: str):
        self.source_param = source_param
        self.target_param = target_param

    def apply(
        self,
        theta: dict[str, Any],
        sampler_config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        theta[self.target_param] = theta[self.source_param]
        return theta


class PlanTruncation(RequestTransform):
    """Build the truncated normal plan for a scalar ``(mean, sd, lower, upper)``."""

    def __init__(
        self,
        mean: str = "mean",
        sd: str = "sd",
        lower: str = "lower",
        upper: str = "upper",
        target_param: str = "plan",
    ):
        self.mean = mean
        self.sd = sd
        self.lower = lower
        self.upper = upper
        self.target_param = target_param

    def apply(
        self,
        theta: dict[str, Any],
        sampler_config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        plan = TruncationPlan.from_bounds(
            theta[self.mean], theta[self.sd], theta[self.lower], theta[self.upper]
        )
        theta[self.target_param] = pack_plans([plan])
        return theta


class PlanDrift(RequestTransform):
    """Build one drift plan per accumulator.

    With ``positive=True`` drifts are drawn from ``Normal(mean, sd)``
    truncated to ``(0, inf)``; otherwise from the untruncated normal.
    """

    def __init__(self, mean: str, sd: str, target_param: str, positive: bool = True):
        self.mean = mean
        self.sd = sd
        self.target_param = target_param
        self.positive = positive

    def apply(
        self,
        theta: dict[str, Any],
        sampler_config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        lower = 0.0 if self.positive else -np.inf
        plans = [
            TruncationPlan.from_bounds(float(m), float(s), lower, np.inf)
            for m, s in zip(theta[self.mean], theta[self.sd])
        ]
        theta[self.target_param] = pack_plans(plans)
        return theta


class PlanStageTiming(RequestTransform):
    """Derive the segment layout of a piecewise trial.

    Without ``tD`` a single drift switch happens at ``swt + rD``. With
    ``tD`` the drift switch at ``swt + rD`` and the threshold switch at
    ``swt + tD`` are ordered once here.
    """

    def __init__(
        self,
        swt: str = "swt",
        rD: str = "rD",
        tD: str | None = None,
        target_param: str = "timing",
    ):
        self.swt = swt
        self.rD = rD
        self.tD = tD
        self.target_param = target_param

    def apply(
        self,
        theta: dict[str, Any],
        sampler_config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if self.tD is None:
            timing = StageTiming.single_switch(theta[self.swt], theta[self.rD])
        else:
            timing = StageTiming.from_delays(
                theta[self.swt], theta[self.rD], theta[self.tD]
            )
        theta[self.target_param] = timing
        return theta
