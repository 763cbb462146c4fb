"""Parameter declarations and the validation pipeline for sample requests.

Each sampler declares its parameters as a list of :class:`ParamSpec`. The
pipeline in :func:`resolve_params` runs in a fixed order so that a request
with several problems always reports the same one:

1. unknown or missing parameter names
2. arity (scalars must hold exactly one value)
3. paired broadcasting (``sd_v`` of length 1 is repeated to match ``mean_v``)
4. fixed vector lengths (race models take exactly two accumulators)
5. domains (finite values, non-negative scales, ...)
"""

import logging
import numbers
from dataclasses import dataclass

import numpy as np

from ssm_rvs.exceptions import (
    ArityError,
    DomainError,
    LengthMismatchError,
    ParameterError,
)

logger = logging.getLogger(__name__)

SCALAR = "scalar"
VECTOR = "vector"


@dataclass(frozen=True)
class ParamSpec:
    """Declaration of a single sampler parameter.

    Attributes
    ----------
    name : str
        Parameter name as used in ``theta`` and keyword arguments.
    kind : str
        ``"scalar"`` or ``"vector"``.
    length : int or None
        Required length of a vector parameter (``None`` for scalars).
    nonnegative : bool
        Reject values below zero (scales, start-point bounds, delays).
    finite : bool
        Reject infinite values. Truncation bounds are the only parameters
        allowed to be infinite.
    broadcast_to : str or None
        Name of the partner vector; a length-1 value is repeated to the
        partner's length before the lengths are compared.
    """

    name: str
    kind: str = SCALAR
    length: int | None = None
    nonnegative: bool = False
    finite: bool = True
    broadcast_to: str | None = None

    @property
    def is_scalar(self) -> bool:
        return self.kind == SCALAR


def scalar(name: str, **kwargs) -> ParamSpec:
    """Shorthand for a scalar parameter declaration."""
    return ParamSpec(name=name, kind=SCALAR, **kwargs)


def vector(name: str, length: int = 2, **kwargs) -> ParamSpec:
    """Shorthand for a fixed-length vector parameter declaration."""
    return ParamSpec(name=name, kind=VECTOR, length=length, **kwargs)


def as_param_array(name: str, value) -> np.ndarray:
    """Convert a user supplied value into a 1-D float64 array."""
    try:
        arr = np.atleast_1d(np.asarray(value, dtype=np.float64))
    except (TypeError, ValueError) as e:
        raise DomainError(name, f"must be numeric, got {value!r}") from e
    if arr.ndim != 1:
        raise ArityError(name, f"must be a scalar or a 1-D vector, got shape {arr.shape}")
    return arr


def validate_n(n) -> int:
    """Validate the requested number of draws."""
    if isinstance(n, bool):
        raise DomainError("n", "must be an integer, got a boolean")
    if isinstance(n, np.ndarray):
        if n.size != 1:
            raise ArityError("n", f"must be a scalar, got {n.size} values")
        n = n.reshape(-1)[0]
    elif isinstance(n, (list, tuple)):
        if len(n) != 1:
            raise ArityError("n", f"must be a scalar, got {len(n)} values")
        n = n[0]
    if isinstance(n, numbers.Integral):
        n = int(n)
    elif isinstance(n, numbers.Real) and float(n).is_integer():
        n = int(n)
    else:
        raise DomainError("n", f"must be an integer, got {n!r}")
    if n < 0:
        raise DomainError("n", f"must be non-negative, got {n}")
    return n


def validate_int_at_least(name: str, value, minimum: int) -> int:
    """Validate an integer knob such as ``nthread`` or ``gpuid``."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise DomainError(name, f"must be an integer, got {value!r}")
    if value < minimum:
        raise DomainError(name, f"must be >= {minimum}, got {value}")
    return int(value)


def check_arity(spec: ParamSpec, arr: np.ndarray) -> None:
    if spec.is_scalar and arr.size != 1:
        raise ArityError(spec.name, f"must be a scalar, got {arr.size} values")
    if not spec.is_scalar and arr.size == 0:
        raise ArityError(spec.name, "must not be empty")


def broadcast_pair(spec: ParamSpec, arr: np.ndarray, partner: np.ndarray) -> np.ndarray:
    """Repeat a singleton to the partner's length and compare lengths."""
    if arr.size == 1 and partner.size != 1:
        arr = np.repeat(arr, partner.size)
    if arr.size != partner.size:
        raise LengthMismatchError(
            spec.name,
            f"length {arr.size} does not match {spec.broadcast_to} "
            f"(length {partner.size})",
        )
    return arr


def check_vector_length(spec: ParamSpec, arr: np.ndarray) -> None:
    if spec.length is not None and arr.size != spec.length:
        raise ArityError(
            spec.name, f"must have exactly {spec.length} elements, got {arr.size}"
        )


def check_domain(spec: ParamSpec, arr: np.ndarray) -> None:
    if np.any(np.isnan(arr)):
        raise DomainError(spec.name, "must not be NaN")
    if spec.finite and not np.all(np.isfinite(arr)):
        raise DomainError(spec.name, "must be finite")
    if spec.nonnegative and np.any(arr < 0):
        raise DomainError(spec.name, f"cannot be negative, got {arr.tolist()}")


def resolve_params(specs: list[ParamSpec], theta: dict) -> dict:
    """Run the full validation pipeline and return resolved parameters.

    Parameters
    ----------
    specs : list[ParamSpec]
        Declarations of every parameter the sampler accepts.
    theta : dict
        Parameter values keyed by name. Every declared parameter must be
        present (defaults are merged in by the caller).

    Returns
    -------
    dict
        Scalars as Python floats, vectors as read-only float64 arrays.

    Raises
    ------
    ParameterError
        For an unknown or missing parameter name.
    ArityError, LengthMismatchError, DomainError
        On the first violated rule, in pipeline order.
    """
    by_name = {spec.name: spec for spec in specs}
    unknown = sorted(set(theta) - set(by_name))
    if unknown:
        raise ParameterError(
            unknown[0], f"unknown parameter; expected one of {list(by_name)}"
        )
    missing = [name for name in by_name if name not in theta]
    if missing:
        raise ParameterError(missing[0], "missing value")

    arrays = {name: as_param_array(name, theta[name]) for name in by_name}

    for spec in specs:
        check_arity(spec, arrays[spec.name])

    for spec in specs:
        if spec.broadcast_to is not None:
            arrays[spec.name] = broadcast_pair(
                spec, arrays[spec.name], arrays[spec.broadcast_to]
            )

    for spec in specs:
        if not spec.is_scalar:
            check_vector_length(spec, arrays[spec.name])

    for spec in specs:
        check_domain(spec, arrays[spec.name])

    resolved = {}
    for spec in specs:
        arr = arrays[spec.name]
        if spec.is_scalar:
            resolved[spec.name] = float(arr[0])
        else:
            arr = arr.copy()
            arr.setflags(write=False)
            resolved[spec.name] = arr
    logger.debug("Resolved parameters: %s", resolved)
    return resolved
