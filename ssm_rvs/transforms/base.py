"""Base class for request transforms.

This module defines the abstract base class that all request transforms
(both constraint checks and kernel-input derivations) must inherit from.
"""

from abc import ABC, abstractmethod
from typing import Any


class RequestTransform(ABC):
    """Abstract base class for all request transforms.

    A request transform is a single, focused operation on the resolved
    parameter dictionary of a sample request. Transforms run after the
    generic validation pipeline and are used for two purposes:

    1. **Constraints**: cross-parameter domain rules that the per-parameter
       declarations cannot express (e.g. ``upper > lower``, ``b >= A``).
       These raise a :class:`~ssm_rvs.exceptions.ParameterError` and leave
       ``theta`` untouched.

    2. **Derivations**: prepare the inputs the kernels expect (e.g. sum
       ``A + B`` into the threshold ``b``, build truncation plans, order the
       switch events of the piecewise models).

    Subclasses must implement the ``apply`` method.

    Examples
    --------
    Create a custom transform:

    >>> class ScaleParameter(RequestTransform):
    ...     def __init__(self, param_name: str, scale: float):
    ...         self.param_name = param_name
    ...         self.scale = scale
    ...
    ...     def apply(self, theta, sampler_config=None):
    ...         theta[self.param_name] = theta[self.param_name] * self.scale
    ...         return theta

    Use in a sampler config:

    >>> sampler_config = {
    ...     "name": "my_sampler",
    ...     "transforms": [RequireOrdered("lower", "upper"), ScaleParameter("sd", 2.0)],
    ... }
    """

    @abstractmethod
    def apply(
        self,
        theta: dict[str, Any],
        sampler_config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Apply transform to the resolved parameters.

        Parameters
        ----------
        theta : dict[str, Any]
            Resolved parameters (floats and read-only float64 arrays) plus
            anything added by earlier transforms.
        sampler_config : dict[str, Any] or None, optional
            Configuration of the sampler the request is built for.

        Returns
        -------
        dict[str, Any]
            The modified theta dictionary (usually the same object passed in).
        """
        pass

    def __repr__(self) -> str:
        attrs = []
        for key, value in self.__dict__.items():
            if not key.startswith("_"):
                if isinstance(value, str) and len(value) > 50:
                    value = value[:47] + "..."
                attrs.append(f"{key}={value!r}")

        attrs_str = ", ".join(attrs)
        return f"{self.__class__.__name__}({attrs_str})"

    def __str__(self) -> str:
        return self.__repr__()
