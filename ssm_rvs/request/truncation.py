"""Per-request planning for truncated normal draws.

The samplers follow Robert (1995), "Simulation of truncated normal
variables". Which proposal is used depends only on the standardized window
``(a, b)``, so the choice is made once per request on the host and handed to
the kernels as plain numbers.
"""

import enum
import logging
import math
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

SQRT_2PI = math.sqrt(2.0 * math.pi)


class Regime(enum.IntEnum):
    """Proposal distribution used by the rejection sampler."""

    NORMAL = 0
    UNIFORM = 1
    EXPONENTIAL = 2
    DEGENERATE = 3


@dataclass(frozen=True)
class TruncationPlan:
    """Sampler configuration for ``Normal(mean, sd)`` restricted to ``(lower, upper)``.

    ``a`` and ``b`` are the standardized bounds after mirroring: when the
    whole window lies below the mean the problem is reflected so that the
    kernels only ever deal with windows where ``b > 0``.
    """

    mean: float
    sd: float
    lower: float
    upper: float
    a: float
    b: float
    mirror: bool
    regime: Regime
    rate: float

    @classmethod
    def from_bounds(
        cls, mean: float, sd: float, lower: float = -np.inf, upper: float = np.inf
    ) -> "TruncationPlan":
        if sd == 0:
            return cls(mean, sd, lower, upper, 0.0, 0.0, False, Regime.DEGENERATE, 0.0)

        a = (lower - mean) / sd
        b = (upper - mean) / sd
        mirror = b <= 0
        if mirror:
            a, b = -b, -a

        rate = 0.0
        if a <= 0:
            regime = Regime.NORMAL if (b - a) >= SQRT_2PI else Regime.UNIFORM
        else:
            root = math.sqrt(a * a + 4.0)
            rate = (a + root) / 2.0
            if math.isinf(b):
                regime = Regime.EXPONENTIAL
            else:
                cutoff = a + 2.0 / (a + root) * math.exp((a * a - a * root) / 4.0 + 0.5)
                regime = Regime.EXPONENTIAL if b > cutoff else Regime.UNIFORM

        logger.debug(
            "Truncation plan: a=%.4g b=%.4g mirror=%s regime=%s",
            a,
            b,
            mirror,
            regime.name,
        )
        return cls(mean, sd, lower, upper, float(a), float(b), bool(mirror), regime, rate)

    @property
    def admits_mean(self) -> bool:
        """Whether the mean itself lies strictly inside the window."""
        return self.lower < self.mean < self.upper


# Column layout of a packed plan table (one row per truncated draw family).
PLAN_MEAN = 0
PLAN_SD = 1
PLAN_LOWER = 2
PLAN_UPPER = 3
PLAN_A = 4
PLAN_B = 5
PLAN_MIRROR = 6
PLAN_REGIME = 7
PLAN_RATE = 8
PLAN_WIDTH = 9


def pack_plans(plans: list[TruncationPlan]) -> np.ndarray:
    """Flatten plans into a ``(len(plans), PLAN_WIDTH)`` float64 table for the kernels."""
    table = np.empty((len(plans), PLAN_WIDTH), dtype=np.float64)
    for row, plan in enumerate(plans):
        table[row, PLAN_MEAN] = plan.mean
        table[row, PLAN_SD] = plan.sd
        table[row, PLAN_LOWER] = plan.lower
        table[row, PLAN_UPPER] = plan.upper
        table[row, PLAN_A] = plan.a
        table[row, PLAN_B] = plan.b
        table[row, PLAN_MIRROR] = 1.0 if plan.mirror else 0.0
        table[row, PLAN_REGIME] = float(plan.regime)
        table[row, PLAN_RATE] = plan.rate
    table.setflags(write=False)
    return table
