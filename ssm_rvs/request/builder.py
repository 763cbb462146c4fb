"""Assemble a validated, immutable sample request.

:func:`build_request` is the single entry point between the public API and
the engines. Everything that can be rejected is rejected here, and the
random seed is only drawn once the request is known to be valid, so a bad
call never advances a caller's ``numpy.random.Generator``.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable

import numpy as np

from ssm_rvs.config.registry import get_sampler_registry
from ssm_rvs.request.precision import Precision
from ssm_rvs.request.validation import resolve_params, validate_int_at_least, validate_n

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleRequest:
    """Everything an engine needs to fill the output buffers of one call.

    Attributes
    ----------
    name : str
        Sampler name (registry key).
    n : int
        Number of draws.
    params : Mapping[str, Any]
        Resolved parameters plus the inputs derived by the sampler's
        transforms (truncation plan tables, stage timing, ``c``, ...).
        Scalars are Python floats, vectors read-only float64 arrays.
    precision : Precision
    nthread : int
        Number of draws per parallel work block.
    gpuid : int
        Device index on the selected backend.
    seed : int
        Root seed of the counter-based streams, ``0 <= seed < 2**63``.
    config : dict
        Sampler configuration the request was built from.
    """

    name: str
    n: int
    params: MappingProxyType
    precision: Precision
    nthread: int
    gpuid: int
    seed: int
    config: dict = field(repr=False, compare=False)

    @property
    def dtype(self) -> type:
        return self.precision.dtype

    @property
    def n_blocks(self) -> int:
        """Number of ``nthread``-sized work blocks covering ``n`` draws."""
        return -(-self.n // self.nthread)

    def __getitem__(self, key: str) -> Any:
        return self.params[key]


def draw_seed(random_state=None) -> int:
    """Draw the root seed from ``random_state`` or fresh OS entropy.

    ``random_state`` accepts anything :func:`numpy.random.default_rng`
    accepts: ``None``, an integer, a ``SeedSequence`` or a ``Generator``
    (which is advanced by exactly one draw).
    """
    rng = np.random.default_rng(random_state)
    return int(rng.integers(0, 2**63))


def build_request(
    name: str,
    n,
    theta: dict | None = None,
    *,
    dp=False,
    nthread=32,
    gpuid=0,
    random_state=None,
    device_check: Callable[[int], None] | None = None,
) -> SampleRequest:
    """Validate a sampling call and freeze it into a :class:`SampleRequest`.

    Parameters
    ----------
    name : str
        Registered sampler name, e.g. ``"rlba"``.
    n : int
        Number of draws (``n == 0`` yields empty outputs).
    theta : dict, optional
        Parameter values by name. Missing entries and entries set to
        ``None`` take the sampler's defaults.
    dp : bool
        Double precision.
    nthread : int
        Draws per parallel work block, at least 1.
    gpuid : int
        Device index, at least 0.
    random_state : int, Generator or None
        Seed source; see :func:`draw_seed`.
    device_check : callable, optional
        Called with ``gpuid`` before the seed is drawn; raises
        ``DeviceError`` when the engine has no such device.

    Raises
    ------
    KeyError
        If ``name`` is not a registered sampler.
    DeviceError
        From ``device_check``.
    ParameterError
        Itself for an unknown parameter name, otherwise ``ArityError``,
        ``LengthMismatchError`` or ``DomainError`` for the first violated
        rule. Raised before any random state is consumed.
    """
    config = get_sampler_registry().get(name)

    merged = dict(config["default_params"])
    for key, value in (theta or {}).items():
        if value is not None:
            merged[key] = value

    resolved = resolve_params(config["param_specs"], merged)
    n = validate_n(n)
    nthread = validate_int_at_least("nthread", nthread, 1)
    gpuid = validate_int_at_least("gpuid", gpuid, 0)
    precision = Precision.from_flag(dp)

    for transform in config.get("transforms", []):
        resolved = transform.apply(resolved, config)

    if device_check is not None:
        device_check(gpuid)

    seed = draw_seed(random_state)
    request = SampleRequest(
        name=name,
        n=n,
        params=MappingProxyType(resolved),
        precision=precision,
        nthread=nthread,
        gpuid=gpuid,
        seed=seed,
        config=config,
    )
    logger.debug(
        "Built request %s: n=%d precision=%s nthread=%d blocks=%d gpuid=%d",
        name,
        n,
        precision.value,
        nthread,
        request.n_blocks,
        gpuid,
    )
    return request
