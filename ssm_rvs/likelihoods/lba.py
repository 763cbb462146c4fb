"""
Closed-form densities of the Linear Ballistic Accumulator.

Reference: Brown, S. D., & Heathcote, A. (2008). The simplest complete
model of choice response time: Linear ballistic accumulation. Cognitive
Psychology, 57(3), 153-178.

Single-accumulator functions take decision time ``t`` (response time minus
``t0``). With ``positive=True`` they describe the drift distribution
truncated to positive values, matching the samplers, and are divided by
``P(drift > 0) = Phi(v / sv)``.
"""

import numpy as np
from scipy import integrate
from scipy.stats import norm


def _positive_mass(v, sv):
    return norm.cdf(v / sv)


def lba_pdf(t, A, b, v, sv, positive=True):
    """Finishing-time density of one accumulator.

    Parameters
    ----------
    t : array_like
        Decision times; the density is zero for ``t <= 0``.
    A : float
        Upper bound of the start-point distribution (``A = 0`` is allowed).
    b : float
        Threshold, ``b >= A``.
    v, sv : float
        Mean and standard deviation of the drift rate, ``sv > 0``.
    positive : bool
        Normalise for drift rates truncated to positive values.
    """
    t = np.asarray(t, dtype=np.float64)
    shape = t.shape
    t = t.reshape(-1)
    out = np.zeros_like(t)
    ok = t > 0
    tt = t[ok]
    if A == 0:
        z = (b / tt - v) / sv
        dens = b / (tt * tt) * norm.pdf(z) / sv
    else:
        z1 = (b - A - tt * v) / (tt * sv)
        z2 = (b - tt * v) / (tt * sv)
        dens = (
            -v * norm.cdf(z1)
            + sv * norm.pdf(z1)
            + v * norm.cdf(z2)
            - sv * norm.pdf(z2)
        ) / A
    out[ok] = np.maximum(dens, 0.0)
    if positive:
        out = out / _positive_mass(v, sv)
    return out.reshape(shape)


def lba_cdf(t, A, b, v, sv, positive=True):
    """Probability that one accumulator has finished by decision time ``t``."""
    t = np.asarray(t, dtype=np.float64)
    shape = t.shape
    t = t.reshape(-1)
    out = np.zeros_like(t)
    ok = t > 0
    tt = t[ok]
    if A == 0:
        cdf = norm.sf((b / tt - v) / sv)
    else:
        bmA = b - A - tt * v
        bmt = b - tt * v
        z1 = bmA / (tt * sv)
        z2 = bmt / (tt * sv)
        cdf = (
            1.0
            + bmA / A * norm.cdf(z1)
            - bmt / A * norm.cdf(z2)
            + tt * sv / A * norm.pdf(z1)
            - tt * sv / A * norm.pdf(z2)
        )
    out[ok] = np.clip(cdf, 0.0, 1.0)
    if positive:
        out = np.minimum(out / _positive_mass(v, sv), 1.0)
    return out.reshape(shape)


def n1pdf(rt, A, b, mean_v, sd_v, t0, positive=True):
    """Defective density of accumulator 1 winning the race at ``rt``.

    ``mean_v`` and ``sd_v`` hold one entry per accumulator; ``sd_v`` may
    be a scalar shared by all of them.
    """
    mean_v = np.atleast_1d(np.asarray(mean_v, dtype=np.float64))
    sd_v = np.broadcast_to(np.asarray(sd_v, dtype=np.float64), mean_v.shape)
    t = np.asarray(rt, dtype=np.float64) - t0
    dens = lba_pdf(t, A, b, mean_v[0], sd_v[0], positive)
    for v, sv in zip(mean_v[1:], sd_v[1:]):
        dens = dens * (1.0 - lba_cdf(t, A, b, v, sv, positive))
    return dens


def choice_probability(A, b, mean_v, sd_v, accumulator=1, positive=True):
    """Probability that ``accumulator`` (1-based) wins the race.

    Integrates the defective density numerically with ``scipy.integrate.quad``.
    """
    mean_v = np.atleast_1d(np.asarray(mean_v, dtype=np.float64))
    sd_v = np.broadcast_to(np.asarray(sd_v, dtype=np.float64), mean_v.shape)
    order = [accumulator - 1] + [k for k in range(mean_v.size) if k != accumulator - 1]

    def integrand(t):
        return float(n1pdf(t, A, b, mean_v[order], sd_v[order], 0.0, positive))

    prob, _ = integrate.quad(integrand, 0.0, np.inf, limit=200)
    return prob
