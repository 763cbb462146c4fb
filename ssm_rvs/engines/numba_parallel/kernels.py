"""
Numba kernels for every sampler family.

Each kernel splits the ``n`` output slots into ``ceil(n / nthread)`` blocks
and runs the blocks with ``prange``. Within a block, slot ``i`` draws from
its own stream (``_init_stream(seed, i)``), so results do not depend on
``nthread``. A slot whose rejection sampler runs out of tries is written as
NaN; the engine turns those into a ``SamplingError``.
"""

import numpy as np
from numba import njit, prange

from ssm_rvs.engines.numba_parallel._rng import (
    FASTMATH,
    _gaussian,
    _init_stream,
    _round,
    _uniform,
)
from ssm_rvs.engines.numba_parallel._truncnorm import (
    MAX_TRIES,
    _coupled_draw,
    _truncnorm,
)

# ============================================================================
# Plain distributions
# ============================================================================


@njit(parallel=True, cache=True, fastmath=FASTMATH)
def runif_kernel(lo, hi, seed, nthread, single, out):
    """Uniform on ``[lo, hi)``; draws rounding up to ``hi`` are redrawn."""
    n = out.shape[0]
    n_blocks = (n + nthread - 1) // nthread
    width = hi - lo
    for blk in prange(n_blocks):
        start = blk * nthread
        stop = min(start + nthread, n)
        for i in range(start, stop):
            s0, s1 = _init_stream(seed, i)
            y = np.nan
            for _ in range(MAX_TRIES):
                u, s0, s1 = _uniform(s0, s1, single)
                x = _round(lo + width * u, single)
                if x >= lo and x < hi:
                    y = x
                    break
            out[i] = y


@njit(parallel=True, cache=True, fastmath=FASTMATH)
def rnorm_kernel(mean, sd, seed, nthread, single, out):
    n = out.shape[0]
    n_blocks = (n + nthread - 1) // nthread
    for blk in prange(n_blocks):
        start = blk * nthread
        stop = min(start + nthread, n)
        for i in range(start, stop):
            s0, s1 = _init_stream(seed, i)
            g, s0, s1 = _gaussian(s0, s1, single)
            out[i] = _round(mean + sd * g, single)


@njit(parallel=True, cache=True, fastmath=FASTMATH)
def rtnorm_kernel(plans, seed, nthread, single, out):
    n = out.shape[0]
    n_blocks = (n + nthread - 1) // nthread
    for blk in prange(n_blocks):
        start = blk * nthread
        stop = min(start + nthread, n)
        for i in range(start, stop):
            s0, s1 = _init_stream(seed, i)
            x, ok, s0, s1 = _truncnorm(plans, 0, s0, s1, single)
            out[i] = x


# ============================================================================
# LBA
# ============================================================================


@njit(parallel=True, cache=True, fastmath=FASTMATH)
def lba_kernel(b, A, plan_v, t0, seed, nthread, single, rts, rt1s, choices):
    """
    Two-accumulator LBA race.

    Start points are ``U(0, A)``, drifts come from the positive-truncated
    plan rows. ``rts`` gets the winning time, ``rt1s`` accumulator 1's own
    finishing time, ``choices`` the 1-based winner (ties go to the lower
    index).
    """
    n = rts.shape[0]
    n_acc = plan_v.shape[0]
    n_blocks = (n + nthread - 1) // nthread
    for blk in prange(n_blocks):
        start = blk * nthread
        stop = min(start + nthread, n)
        for i in range(start, stop):
            s0, s1 = _init_stream(seed, i)
            best = np.inf
            first = np.nan
            winner = 0
            failed = False
            for k in range(n_acc):
                u, s0, s1 = _uniform(s0, s1, single)
                x0 = _round(A * u, single)
                v, ok, s0, s1 = _truncnorm(plan_v, k, s0, s1, single)
                if not ok:
                    failed = True
                    break
                t = (b - x0) / v
                if k == 0:
                    first = t
                if t < best:
                    best = t
                    winner = k + 1
            if failed:
                rts[i] = np.nan
                rt1s[i] = np.nan
                choices[i] = 0
            else:
                rts[i] = _round(t0 + best, single)
                rt1s[i] = _round(t0 + first, single)
                choices[i] = winner


# ============================================================================
# Piecewise LBA
# ============================================================================


@njit(cache=True, fastmath=FASTMATH)
def _first_passage(x0, v, w, b, c, e1, e2, drift_segment, threshold_segment):
    """
    First time an accumulator starting at ``x0`` reaches its threshold.

    The trial is cut into ``[0, e1)``, ``[e1, e2)`` and ``[e2, inf)``. The
    rate is ``v`` before segment ``drift_segment`` and ``w`` from it on;
    the threshold is ``b`` before segment ``threshold_segment`` and ``c``
    from it on. Empty segments are skipped. With a non-positive rate the
    accumulator stays put for the segment. Returns inf if it never crosses.
    """
    x = x0
    for seg in range(3):
        if seg == 0:
            seg_start = 0.0
            seg_end = e1
        elif seg == 1:
            seg_start = e1
            seg_end = e2
        else:
            seg_start = e2
            seg_end = np.inf
        if seg < 2 and seg_end <= seg_start:
            continue

        rate = w if seg >= drift_segment else v
        threshold = c if seg >= threshold_segment else b
        if x >= threshold:
            return seg_start
        if rate > 0.0:
            t_hit = seg_start + (threshold - x) / rate
            if t_hit <= seg_end:
                return t_hit
            x = x + rate * (seg_end - seg_start)
    return np.inf


# Not cached: the stage-2 drift goes through the scipy ndtri pointer.
@njit(parallel=True, cache=False, fastmath=FASTMATH)
def plba_kernel(
    A,
    b,
    c,
    plan_v,
    plan_w,
    e1,
    e2,
    drift_segment,
    threshold_segment,
    t0,
    seed,
    nthread,
    single,
    rts,
    choices,
):
    """
    Piecewise LBA race shared by every ``rplba`` variant.

    Per accumulator: start ``U(0, A[k])``, stage-1 drift ``v`` from
    ``plan_v``. The stage-2 drift ``w`` is the value at the quantile ``v``
    holds in ``plan_v``, taken from ``plan_w``; with identical rows ``w``
    equals ``v`` and the trial is an ordinary LBA trial.

    A trial in which no accumulator ever reaches its threshold (only
    possible with untruncated drifts) is redrawn up to ``MAX_TRIES`` times.
    """
    n = rts.shape[0]
    n_acc = plan_v.shape[0]
    n_blocks = (n + nthread - 1) // nthread
    for blk in prange(n_blocks):
        start = blk * nthread
        stop = min(start + nthread, n)
        for i in range(start, stop):
            s0, s1 = _init_stream(seed, i)
            rt = np.nan
            winner = 0
            for _ in range(MAX_TRIES):
                best = np.inf
                failed = False
                for k in range(n_acc):
                    u, s0, s1 = _uniform(s0, s1, single)
                    x0 = _round(A[k] * u, single)
                    v, ok_v, s0, s1 = _truncnorm(plan_v, k, s0, s1, single)
                    w, ok_w, s0, s1 = _coupled_draw(plan_v, plan_w, k, v, s0, s1, single)
                    if not (ok_v and ok_w):
                        failed = True
                        break
                    t = _first_passage(
                        x0, v, w, b[k], c[k], e1, e2, drift_segment, threshold_segment
                    )
                    if t < best:
                        best = t
                        winner = k + 1
                if failed:
                    winner = 0
                    break
                if best < np.inf:
                    rt = _round(t0 + best, single)
                    break
                winner = 0
            rts[i] = rt
            choices[i] = winner
