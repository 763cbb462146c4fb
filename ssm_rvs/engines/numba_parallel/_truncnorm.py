"""
Truncated normal draws for the Numba kernels (Robert, 1995).

The proposal regime and the exponential rate come precomputed in a plan
table (see ``ssm_rvs.request.truncation``); one row per truncated family.

Two plans can also be coupled by quantile: ``_coupled_draw`` maps a value
of one row onto the value at the same quantile of another row, which is how
the piecewise samplers tie the stage-2 drift to the stage-1 drift.
"""

import ctypes
import math

import numpy as np
from numba import njit
from numba.extending import get_cython_function_address

from ssm_rvs.engines.numba_parallel._rng import (
    FASTMATH,
    _exponential,
    _gaussian,
    _round,
    _uniform,
)
from ssm_rvs.request.truncation import (
    PLAN_A,
    PLAN_B,
    PLAN_LOWER,
    PLAN_MEAN,
    PLAN_MIRROR,
    PLAN_RATE,
    PLAN_REGIME,
    PLAN_SD,
    PLAN_UPPER,
    PLAN_WIDTH,
    Regime,
)

MAX_TRIES = 1000

_NORMAL = int(Regime.NORMAL)
_UNIFORM = int(Regime.UNIFORM)
_EXPONENTIAL = int(Regime.EXPONENTIAL)
_DEGENERATE = int(Regime.DEGENERATE)

_INV_SQRT2 = 1.0 / math.sqrt(2.0)


@njit(cache=True, fastmath=FASTMATH)
def _propose(a, b, regime, rate, s0, s1, single):
    """One proposal for ``z ~ N(0, 1)`` restricted to ``(a, b)`` with ``b > 0``.

    Returns ``(z, accepted, s0, s1)``.
    """
    if regime == _NORMAL:
        z, s0, s1 = _gaussian(s0, s1, single)
        return z, (z > a) and (z < b), s0, s1

    if regime == _UNIFORM:
        u, s0, s1 = _uniform(s0, s1, single)
        z = a + (b - a) * u
        if a <= 0.0:
            rho = np.exp(-0.5 * z * z)
        else:
            rho = np.exp(0.5 * (a * a - z * z))
        u, s0, s1 = _uniform(s0, s1, single)
        return z, (u <= rho) and (z > a), s0, s1

    e, s0, s1 = _exponential(s0, s1, single)
    z = a + e / rate
    rho = np.exp(-0.5 * (z - rate) * (z - rate))
    u, s0, s1 = _uniform(s0, s1, single)
    return z, (u <= rho) and (z < b), s0, s1


@njit(cache=True, fastmath=FASTMATH)
def _truncnorm(plans, k, s0, s1, single):
    """Draw from plan row ``k``, already rounded to the output precision.

    A draw that rounds onto or past a bound is redrawn. After ``MAX_TRIES``
    rejected proposals the draw fails and NaN is returned.

    Returns ``(x, ok, s0, s1)``.
    """
    mean = plans[k, PLAN_MEAN]
    lower = plans[k, PLAN_LOWER]
    upper = plans[k, PLAN_UPPER]
    regime = int(plans[k, PLAN_REGIME])

    if regime == _DEGENERATE:
        x = _round(mean, single)
        if x > lower and x < upper:
            return x, True, s0, s1
        return np.nan, False, s0, s1

    sd = plans[k, PLAN_SD]
    a = plans[k, PLAN_A]
    b = plans[k, PLAN_B]
    rate = plans[k, PLAN_RATE]
    mirror = plans[k, PLAN_MIRROR] != 0.0

    for _ in range(MAX_TRIES):
        z, accepted, s0, s1 = _propose(a, b, regime, rate, s0, s1, single)
        if not accepted:
            continue
        if mirror:
            z = -z
        x = _round(mean + sd * z, single)
        if x > lower and x < upper:
            return x, True, s0, s1
    return np.nan, False, s0, s1


# ============================================================================
# Quantile coupling between two plans
# ============================================================================

# scipy's inverse normal CDF, called from compiled code. Functions that
# reach it hold a raw function pointer and are compiled without caching.
_ndtri = ctypes.CFUNCTYPE(ctypes.c_double, ctypes.c_double)(
    get_cython_function_address("scipy.special.cython_special", "ndtri")
)


@njit(cache=True, fastmath=FASTMATH)
def _cdf(z):
    return 0.5 * math.erfc(-z * _INV_SQRT2)


@njit(cache=True, fastmath=FASTMATH)
def _sf(z):
    return 0.5 * math.erfc(z * _INV_SQRT2)


@njit(cache=True, fastmath=FASTMATH)
def _window_fractions(plans, k, x):
    """Mass of plan row ``k`` below and above ``x``, as fractions of the window.

    Tail windows (``a > 0``) are measured with the survival function so the
    fractions keep their precision far from the mean.
    """
    z = (x - plans[k, PLAN_MEAN]) / plans[k, PLAN_SD]
    mirror = plans[k, PLAN_MIRROR] != 0.0
    if mirror:
        z = -z
    a = plans[k, PLAN_A]
    b = plans[k, PLAN_B]
    if a > 0.0:
        qa = _sf(a)
        qb = _sf(b)
        qz = _sf(z)
        total = qa - qb
        below = (qa - qz) / total
        above = (qz - qb) / total
    else:
        pa = _cdf(a)
        pb = _cdf(b)
        pz = _cdf(z)
        total = pb - pa
        below = (pz - pa) / total
        above = (pb - pz) / total
    if mirror:
        return above, below
    return below, above


@njit(cache=False, fastmath=FASTMATH)
def _window_quantile(a, b, below, above):
    """Standardized point splitting ``(a, b)`` into ``below`` / ``above`` mass."""
    if a > 0.0:
        qa = _sf(a)
        qb = _sf(b)
        return -_ndtri(qb + above * (qa - qb))
    pa = _cdf(a)
    pb = _cdf(b)
    if below <= above:
        return _ndtri(pa + below * (pb - pa))
    return -_ndtri(_sf(b) + above * (pb - pa))


@njit(cache=True)
def _next_inside(x, toward, single):
    if single:
        return np.float64(np.nextafter(np.float32(x), np.float32(toward)))
    return np.nextafter(x, toward)


@njit(cache=True)
def _nudge_inside(x, lower, upper, single):
    """Move a value that rounded onto a bound to the first one inside."""
    if x <= lower:
        x = _round(lower, single)
        if x <= lower:
            x = _next_inside(x, np.inf, single)
    elif x >= upper:
        x = _round(upper, single)
        if x >= upper:
            x = _next_inside(x, -np.inf, single)
    return x


@njit(cache=False, fastmath=FASTMATH)
def _coupled_draw(plan_from, plan_to, k, x, s0, s1, single):
    """Draw from row ``k`` of ``plan_to`` at the quantile ``x`` holds in ``plan_from``.

    Identical rows give back ``x`` and consume no random numbers. A
    degenerate row on either side carries no quantile, and windows whose
    mass underflows leave nothing to invert; both fall back to an
    independent draw from ``plan_to``.

    Returns ``(y, ok, s0, s1)``.
    """
    same = True
    for j in range(PLAN_WIDTH):
        if plan_from[k, j] != plan_to[k, j]:
            same = False
            break
    if same:
        return x, True, s0, s1

    if (
        int(plan_from[k, PLAN_REGIME]) == _DEGENERATE
        or int(plan_to[k, PLAN_REGIME]) == _DEGENERATE
    ):
        return _truncnorm(plan_to, k, s0, s1, single)

    below, above = _window_fractions(plan_from, k, x)
    mirror = plan_to[k, PLAN_MIRROR] != 0.0
    if mirror:
        below, above = above, below
    z = _window_quantile(plan_to[k, PLAN_A], plan_to[k, PLAN_B], below, above)
    if mirror:
        z = -z

    lower = plan_to[k, PLAN_LOWER]
    upper = plan_to[k, PLAN_UPPER]
    y = _round(plan_to[k, PLAN_MEAN] + plan_to[k, PLAN_SD] * z, single)
    y = _nudge_inside(y, lower, upper, single)
    if y > lower and y < upper:
        return y, True, s0, s1
    return _truncnorm(plan_to, k, s0, s1, single)
