"""Request construction: parameter declarations, validation and derived plans.

:func:`~ssm_rvs.request.builder.build_request` lives in its own submodule
because it needs the sampler registry, which in turn imports the modules
collected here.
"""

from .precision import Precision
from .timing import NEVER, StageTiming, SwitchOrder
from .truncation import Regime, TruncationPlan, pack_plans
from .validation import ParamSpec, resolve_params, scalar, vector

__all__ = [
    "Precision",
    "NEVER",
    "StageTiming",
    "SwitchOrder",
    "Regime",
    "TruncationPlan",
    "pack_plans",
    "ParamSpec",
    "resolve_params",
    "scalar",
    "vector",
]
