"""
JAX kernels for every sampler family.

Draw ``i`` uses the key ``fold_in(root, i)``, so every output slot has its
own stream and slots are independent of each other. Per-slot functions are
batched with ``vmap``; rejection loops are ``lax.while_loop`` bounded by
``MAX_TRIES`` and yield NaN when exhausted.

All proposal branches of the truncated normal are evaluated and the one of
the planned regime is selected with ``jnp.select``, which keeps the loop
body free of data-dependent control flow.

The piecewise samplers take the stage-2 drift at the quantile the stage-1
drift holds in its own distribution (``_coupled_draw``).
"""

from functools import partial

import jax.numpy as jnp
import jax.random as jrandom
from jax import jit, lax, vmap
from jax.scipy.special import ndtr, ndtri

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
    Regime,
)

MAX_TRIES = 1000


def stream_keys(seed: int, n: int):
    """One PRNG key per output slot, derived from a 63-bit root seed.

    The seed enters in 31-bit chunks so that it fits int32 when x64 is off.
    """
    root = jrandom.PRNGKey(seed & 0x7FFFFFFF)
    root = jrandom.fold_in(root, (seed >> 31) & 0x7FFFFFFF)
    root = jrandom.fold_in(root, seed >> 62)
    return vmap(lambda i: jrandom.fold_in(root, i))(jnp.arange(n, dtype=jnp.uint32))


def _bounded_loop(propose, key, init_x):
    """Call ``propose(key) -> (x, accepted)`` until accepted or out of tries."""

    def cond_fn(state):
        _, _, done, tries = state
        return (~done) & (tries < MAX_TRIES)

    def body_fn(state):
        key, _, _, tries = state
        key, subkey = jrandom.split(key)
        x, accepted = propose(subkey)
        return key, x, accepted, tries + 1

    _, x, done, _ = lax.while_loop(
        cond_fn, body_fn, (key, init_x, jnp.bool_(False), jnp.int32(0))
    )
    return jnp.where(done, x, jnp.nan)


# ============================================================================
# Truncated normal (Robert, 1995)
# ============================================================================


def _truncnorm(key, row, dtype):
    """Draw one value from a packed plan row, rounded to ``dtype``."""
    row = row.astype(dtype)
    mean, sd = row[PLAN_MEAN], row[PLAN_SD]
    lower, upper = row[PLAN_LOWER], row[PLAN_UPPER]
    a, b, rate = row[PLAN_A], row[PLAN_B], row[PLAN_RATE]
    mirror = row[PLAN_MIRROR] != 0
    regime = row[PLAN_REGIME]
    is_normal = regime == int(Regime.NORMAL)
    is_uniform = regime == int(Regime.UNIFORM)
    is_degenerate = regime == int(Regime.DEGENERATE)

    def propose(key):
        k_norm, k_unif, k_exp, k_acc = jrandom.split(key, 4)
        g = jrandom.normal(k_norm, dtype=dtype)
        u = jrandom.uniform(k_unif, dtype=dtype)
        e = jrandom.exponential(k_exp, dtype=dtype)
        u_acc = jrandom.uniform(k_acc, dtype=dtype)

        z_unif = a + (b - a) * u
        rho_unif = jnp.where(
            a <= 0, jnp.exp(-0.5 * z_unif**2), jnp.exp(0.5 * (a * a - z_unif**2))
        )
        z_exp = a + e / rate
        rho_exp = jnp.exp(-0.5 * (z_exp - rate) ** 2)

        z = jnp.select([is_normal, is_uniform], [g, z_unif], z_exp)
        accepted = jnp.select(
            [is_normal, is_uniform],
            [(g > a) & (g < b), (u_acc <= rho_unif) & (z_unif > a)],
            (u_acc <= rho_exp) & (z_exp < b),
        )
        x = jnp.where(is_degenerate, mean, mean + sd * jnp.where(mirror, -z, z))
        accepted = (accepted | is_degenerate) & (x > lower) & (x < upper)
        return x.astype(dtype), accepted

    return _bounded_loop(propose, key, jnp.zeros((), dtype)).astype(dtype)


def _window_fractions(row, x):
    """Mass of a plan row below and above ``x``, as fractions of the window."""
    mean, sd = row[PLAN_MEAN], row[PLAN_SD]
    a, b = row[PLAN_A], row[PLAN_B]
    mirror = row[PLAN_MIRROR] != 0
    z = (x - mean) / sd
    z = jnp.where(mirror, -z, z)
    tail = a > 0
    qa, qb, qz = ndtr(-a), ndtr(-b), ndtr(-z)
    pa, pb, pz = ndtr(a), ndtr(b), ndtr(z)
    below = jnp.where(tail, (qa - qz) / (qa - qb), (pz - pa) / (pb - pa))
    above = jnp.where(tail, (qz - qb) / (qa - qb), (pb - pz) / (pb - pa))
    return jnp.where(mirror, above, below), jnp.where(mirror, below, above)


def _window_quantile(a, b, below, above):
    """Standardized point splitting ``(a, b)`` into ``below`` / ``above`` mass."""
    qa, qb = ndtr(-a), ndtr(-b)
    pa, pb = ndtr(a), ndtr(b)
    body = jnp.where(
        below <= above,
        ndtri(pa + below * (pb - pa)),
        -ndtri(qb + above * (pb - pa)),
    )
    return jnp.where(a > 0, -ndtri(qb + above * (qa - qb)), body)


def _coupled_draw(key, row_from, row_to, x, dtype):
    """Value of ``row_to`` at the quantile ``x`` holds in ``row_from``.

    Identical rows return ``x``. Degenerate rows and windows whose mass
    underflows fall back to an independent draw keyed by ``key``.
    """
    row_from = row_from.astype(dtype)
    row_to = row_to.astype(dtype)
    mirror = row_to[PLAN_MIRROR] != 0
    lower, upper = row_to[PLAN_LOWER], row_to[PLAN_UPPER]

    below, above = _window_fractions(row_from, x)
    below, above = jnp.where(mirror, above, below), jnp.where(mirror, below, above)
    z = _window_quantile(row_to[PLAN_A], row_to[PLAN_B], below, above)
    z = jnp.where(mirror, -z, z)
    y = (row_to[PLAN_MEAN] + row_to[PLAN_SD] * z).astype(dtype)
    y = jnp.where(y <= lower, jnp.nextafter(lower, jnp.asarray(jnp.inf, dtype)), y)
    y = jnp.where(y >= upper, jnp.nextafter(upper, jnp.asarray(-jnp.inf, dtype)), y)

    degenerate = (row_from[PLAN_REGIME] == int(Regime.DEGENERATE)) | (
        row_to[PLAN_REGIME] == int(Regime.DEGENERATE)
    )
    coupled = ~degenerate & (y > lower) & (y < upper)
    same = jnp.all(row_from == row_to)
    fallback = _truncnorm(key, row_to, dtype)
    return jnp.where(same, x, jnp.where(coupled, y, fallback)).astype(dtype)


# ============================================================================
# Plain distributions
# ============================================================================


@partial(jit, static_argnames=("dtype",))
def runif_kernel(keys, lo, hi, lo_eff, dtype):
    """Uniform on ``[lo, hi)``; ``lo_eff`` is the smallest ``dtype`` value >= lo."""

    def one(key):
        def propose(key):
            u = jrandom.uniform(key, dtype=dtype)
            x = (lo + (hi - lo) * u).astype(dtype)
            return x, (x >= lo_eff) & (x < hi)

        return _bounded_loop(propose, key, jnp.zeros((), dtype)).astype(dtype)

    return vmap(one)(keys)


@partial(jit, static_argnames=("dtype",))
def rnorm_kernel(keys, mean, sd, dtype):
    def one(key):
        return (mean + sd * jrandom.normal(key, dtype=dtype)).astype(dtype)

    return vmap(one)(keys)


@partial(jit, static_argnames=("dtype",))
def rtnorm_kernel(keys, plans, dtype):
    row = plans[0]
    return vmap(lambda key: _truncnorm(key, row, dtype))(keys)


# ============================================================================
# LBA
# ============================================================================


@partial(jit, static_argnames=("dtype",))
def lba_kernel(keys, b, A, plan_v, t0, dtype):
    """Return ``(rt, rt1, choice)`` of the LBA race for every key."""
    n_acc = plan_v.shape[0]
    draw = vmap(lambda key, row: _truncnorm(key, row, dtype))

    def one(key):
        k_start, k_drift = jrandom.split(key)
        x0 = A * jrandom.uniform(k_start, (n_acc,), dtype=dtype)
        drifts = draw(jrandom.split(k_drift, n_acc), plan_v)
        times = (b - x0) / drifts
        winner = jnp.argmin(times)
        failed = jnp.any(jnp.isnan(drifts))
        rt = jnp.where(failed, jnp.nan, t0 + times[winner]).astype(dtype)
        rt1 = jnp.where(failed, jnp.nan, t0 + times[0]).astype(dtype)
        choice = jnp.where(failed, 0, winner + 1).astype(jnp.int32)
        return rt, rt1, choice

    return vmap(one)(keys)


# ============================================================================
# Piecewise LBA
# ============================================================================


def _first_passage(x0, v, w, b, c, e1, e2, drift_segment, threshold_segment):
    """
    Element-wise first threshold crossing over ``[0, e1)``, ``[e1, e2)``,
    ``[e2, inf)``. Segment indices are static, so the three segments are
    unrolled at trace time.
    """
    t = jnp.full_like(x0, jnp.inf)
    done = jnp.zeros(x0.shape, dtype=bool)
    x = x0
    segments = ((0.0, e1), (e1, e2), (e2, jnp.inf))
    for seg, (seg_start, seg_end) in enumerate(segments):
        rate = w if seg >= drift_segment else v
        threshold = c if seg >= threshold_segment else b
        live = (seg_end > seg_start) & ~done

        at_start = live & (x >= threshold)
        t = jnp.where(at_start, seg_start, t)
        done = done | at_start
        live = live & ~at_start

        moving = rate > 0
        t_hit = seg_start + (threshold - x) / jnp.where(moving, rate, 1.0)
        hit = live & moving & (t_hit <= seg_end)
        t = jnp.where(hit, t_hit, t)
        done = done | hit

        if seg < 2:
            x = jnp.where(live & moving & ~hit, x + rate * (seg_end - seg_start), x)
    return t


@partial(jit, static_argnames=("drift_segment", "threshold_segment", "dtype"))
def plba_kernel(
    keys, A, b, c, plan_v, plan_w, e1, e2, t0, drift_segment, threshold_segment, dtype
):
    """Return ``(rt, choice)`` of the piecewise LBA race for every key.

    The first attempt uses the slot key the way ``lba_kernel`` does, so
    with identical stage rows the trials match the LBA race. Trials in
    which no accumulator finishes are redrawn, bounded by ``MAX_TRIES``.
    """
    n_acc = plan_v.shape[0]
    draw = vmap(lambda key, row: _truncnorm(key, row, dtype))
    couple = vmap(lambda key, row_v, row_w, v: _coupled_draw(key, row_v, row_w, v, dtype))

    def trial(key):
        k_start, k_drift = jrandom.split(key)
        x0 = A * jrandom.uniform(k_start, (n_acc,), dtype=dtype)
        v = draw(jrandom.split(k_drift, n_acc), plan_v)
        k_w = jrandom.split(jrandom.fold_in(k_drift, 1), n_acc)
        w = couple(k_w, plan_v, plan_w, v)
        times = _first_passage(
            x0, v, w, b, c, e1, e2, drift_segment, threshold_segment
        )
        winner = jnp.argmin(times)
        failed = jnp.any(jnp.isnan(v)) | jnp.any(jnp.isnan(w))
        return times[winner], winner, failed

    def one(key):
        def cond_fn(state):
            _, _, _, done, tries = state
            return (~done) & (tries < MAX_TRIES)

        def body_fn(state):
            key, _, _, _, tries = state
            best, winner, failed = trial(key)
            finished = jnp.isfinite(best) & ~failed
            rt = jnp.where(finished, t0 + best, jnp.nan).astype(dtype)
            choice = jnp.where(finished, winner + 1, 0).astype(jnp.int32)
            return jrandom.fold_in(key, 1), rt, choice, finished | failed, tries + 1

        init = (
            key,
            jnp.asarray(jnp.nan, dtype=dtype),
            jnp.int32(0),
            jnp.bool_(False),
            jnp.int32(0),
        )
        _, rt, choice, _, _ = lax.while_loop(cond_fn, body_fn, init)
        return rt, choice

    return vmap(one)(keys)
