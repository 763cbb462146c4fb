"""Cross-parameter constraints checked while a request is built.

Constraints never modify ``theta``; they raise a
:class:`~ssm_rvs.exceptions.DomainError` naming the offending parameter.
"""

from typing import Any

import numpy as np

from ssm_rvs.exceptions import DomainError
from ssm_rvs.transforms.base import RequestTransform


class RequireOrdered(RequestTransform):
    """Require ``theta[upper] > theta[lower]`` (or ``>=`` when not strict).

    Works element-wise for vector parameters.
    """

    def __init__(self, lower: str, upper: str, strict: bool = True):
        self.lower = lower
        self.upper = upper
        self.strict = strict

    def apply(
        self,
        theta: dict[str, Any],
        sampler_config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        lo = np.asarray(theta[self.lower])
        hi = np.asarray(theta[self.upper])
        ok = hi > lo if self.strict else hi >= lo
        if not np.all(ok):
            relation = "greater than" if self.strict else "at least"
            raise DomainError(
                self.upper,
                f"must be {relation} {self.lower} "
                f"({self.lower}={np.round(lo, 6).tolist()}, "
                f"{self.upper}={np.round(hi, 6).tolist()})",
            )
        return theta


class RequireMeanInWindow(RequestTransform):
    """With a zero scale the truncated normal collapses onto its mean.

    That is only a distribution when the mean lies strictly inside the
    truncation window.
    """

    def __init__(self, mean: str, sd: str, lower: str, upper: str):
        self.mean = mean
        self.sd = sd
        self.lower = lower
        self.upper = upper

    def apply(
        self,
        theta: dict[str, Any],
        sampler_config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        mean, sd = theta[self.mean], theta[self.sd]
        lower, upper = theta[self.lower], theta[self.upper]
        if sd == 0 and not (lower < mean < upper):
            raise DomainError(
                self.sd,
                f"is zero and {self.mean}={mean} lies outside "
                f"({self.lower}, {self.upper}) = ({lower}, {upper})",
            )
        return theta


class RequirePositiveDrift(RequestTransform):
    """Positive-drift sampling needs either a positive mean or a non-zero sd."""

    def __init__(self, mean: str, sd: str):
        self.mean = mean
        self.sd = sd

    def apply(
        self,
        theta: dict[str, Any],
        sampler_config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        mean = np.asarray(theta[self.mean])
        sd = np.asarray(theta[self.sd])
        bad = np.flatnonzero((sd == 0) & (mean <= 0))
        if bad.size:
            k = int(bad[0])
            raise DomainError(
                self.sd,
                f"element {k} is zero while {self.mean}[{k}]={mean[k]} is not "
                "positive; the drift can never be positive",
            )
        return theta
