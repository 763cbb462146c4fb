"""Request transforms.

Transforms run after the per-parameter validation pipeline, in the order
listed in a sampler config's ``"transforms"`` entry:

1. **Constraints** enforce cross-parameter rules (``upper > lower``,
   ``b >= A``) and raise :class:`~ssm_rvs.exceptions.DomainError`.
2. **Derivations** prepare the kernel inputs (truncation plans, summed
   thresholds, the piecewise stage timing).
"""

from ssm_rvs.transforms.base import RequestTransform
from ssm_rvs.transforms.common import (
    BroadcastToAccumulators,
    CopyParameter,
    PlanDrift,
    PlanStageTiming,
    PlanTruncation,
    SumParameters,
)
from ssm_rvs.transforms.constraints import (
    RequireMeanInWindow,
    RequireOrdered,
    RequirePositiveDrift,
)

__all__ = [
    "RequestTransform",
    "BroadcastToAccumulators",
    "CopyParameter",
    "PlanDrift",
    "PlanStageTiming",
    "PlanTruncation",
    "SumParameters",
    "RequireMeanInWindow",
    "RequireOrdered",
    "RequirePositiveDrift",
]
