"""
Functional sampling API.

Every function validates its arguments into a
:class:`~ssm_rvs.request.builder.SampleRequest`, runs it on the selected
engine and assembles the result: a 1-D array for the plain distributions,
a ``pandas.DataFrame`` for the race models.

Parameters left at ``None`` take the sampler's configured defaults, which
are listed in each docstring.
"""

import logging

import numpy as np
import pandas as pd

from ssm_rvs.engines import get_engine
from ssm_rvs.request.builder import SampleRequest, build_request

logger = logging.getLogger(__name__)


def assemble(request: SampleRequest, out: dict[str, np.ndarray]):
    """Turn engine buffers into the sampler's public result type."""
    columns = request.config["output"]
    if request.config["family"] == "distribution":
        return out[columns[0]]
    return pd.DataFrame({col: out[col] for col in columns})


def sample(
    name: str,
    theta: dict | None = None,
    n: int = 1,
    *,
    nthread: int = 32,
    dp: bool = False,
    gpuid: int = 0,
    backend: str = "numba",
    random_state=None,
):
    """Draw ``n`` samples from any registered sampler.

    Parameters
    ----------
    name : str
        Sampler name, see ``get_sampler_registry().list_samplers()``.
    theta : dict, optional
        Parameter values by name; missing entries take the defaults.
    n : int
        Number of draws.
    nthread : int
        Draws per parallel work block (Numba backend).
    dp : bool
        Double precision.
    gpuid : int
        Device index on the backend.
    backend : {"numba", "jax"}
    random_state : int, numpy.random.Generator or None
        Seed source. ``None`` draws a fresh seed from OS entropy.

    Returns
    -------
    numpy.ndarray or pandas.DataFrame
    """
    engine = get_engine(dp=dp, backend=backend)
    request = build_request(
        name,
        n,
        theta,
        dp=dp,
        nthread=nthread,
        gpuid=gpuid,
        random_state=random_state,
        device_check=engine.check_device,
    )
    return assemble(request, engine.run(request))


def runif(
    n, min=None, max=None, nthread=32, dp=False, *, gpuid=0, backend="numba",
    random_state=None,
):
    """Uniform draws on ``[min, max)`` (defaults ``0``, ``1``)."""
    return sample(
        "runif",
        {"min": min, "max": max},
        n,
        nthread=nthread,
        dp=dp,
        gpuid=gpuid,
        backend=backend,
        random_state=random_state,
    )


def rnorm(
    n, mean=None, sd=None, nthread=32, dp=False, *, gpuid=0, backend="numba",
    random_state=None,
):
    """Gaussian draws (defaults ``mean=0``, ``sd=1``)."""
    return sample(
        "rnorm",
        {"mean": mean, "sd": sd},
        n,
        nthread=nthread,
        dp=dp,
        gpuid=gpuid,
        backend=backend,
        random_state=random_state,
    )


def rtnorm(
    n,
    mean=None,
    sd=None,
    lower=None,
    upper=None,
    nthread=32,
    dp=False,
    *,
    gpuid=0,
    backend="numba",
    random_state=None,
):
    """Truncated Gaussian draws on the open window ``(lower, upper)``.

    Defaults: ``mean=0``, ``sd=1``, ``lower=-inf``, ``upper=inf``. Either
    bound may be infinite. With ``sd=0`` the result is ``mean``, which must
    then lie strictly inside the window.
    """
    return sample(
        "rtnorm",
        {"mean": mean, "sd": sd, "lower": lower, "upper": upper},
        n,
        nthread=nthread,
        dp=dp,
        gpuid=gpuid,
        backend=backend,
        random_state=random_state,
    )


def rlba(
    n,
    b=None,
    A=None,
    mean_v=None,
    sd_v=None,
    t0=None,
    nthread=32,
    dp=False,
    *,
    gpuid=0,
    backend="numba",
    random_state=None,
):
    """Two-accumulator LBA race.

    Defaults: ``b=1``, ``A=0.5``, ``mean_v=(2.4, 1.6)``, ``sd_v=(1, 1)``,
    ``t0=0.5``. Drift rates are drawn from normals truncated to positive
    values. A scalar ``sd_v`` is shared by both accumulators.

    Returns
    -------
    pandas.DataFrame
        Columns ``RT`` (float) and ``R`` (1-based winning accumulator).
    """
    return sample(
        "rlba",
        {"b": b, "A": A, "mean_v": mean_v, "sd_v": sd_v, "t0": t0},
        n,
        nthread=nthread,
        dp=dp,
        gpuid=gpuid,
        backend=backend,
        random_state=random_state,
    )


def rlba_n1(
    n,
    b=None,
    A=None,
    mean_v=None,
    sd_v=None,
    t0=None,
    nthread=32,
    dp=False,
    *,
    gpuid=0,
    backend="numba",
    random_state=None,
):
    """LBA race reporting accumulator 1's own finishing time.

    Same parameters and defaults as :func:`rlba`. ``RT1`` is ``t0`` plus
    the time accumulator 1 needs to reach ``b``, whether or not it wins;
    ``R`` is the winner of the race.

    Returns
    -------
    pandas.DataFrame
        Columns ``RT1`` and ``R``.
    """
    return sample(
        "rlba_n1",
        {"b": b, "A": A, "mean_v": mean_v, "sd_v": sd_v, "t0": t0},
        n,
        nthread=nthread,
        dp=dp,
        gpuid=gpuid,
        backend=backend,
        random_state=random_state,
    )


def rplba0(
    n,
    A=None,
    b=None,
    t0=None,
    mean_v=None,
    mean_w=None,
    sd_v=None,
    rD=None,
    swt=None,
    nthread=32,
    gpuid=0,
    *,
    dp=False,
    backend="numba",
    random_state=None,
):
    """Piecewise LBA with a single drift switch at ``swt + rD``.

    Defaults: ``A=1.5``, ``b=2.7``, ``t0=0.5``, ``mean_v=(3.3, 2.2)``,
    ``mean_w=(1.5, 1.2)``, ``sd_v=(1, 1)``, ``rD=0.3``, ``swt=0.5``.

    Stage drifts come from untruncated normals with ``sd_v`` in both
    stages; an accumulator with a non-positive drift does not move during
    that stage. Trials in which no accumulator can ever finish are redrawn.
    """
    return sample(
        "rplba0",
        {
            "A": A, "b": b, "t0": t0, "mean_v": mean_v, "mean_w": mean_w,
            "sd_v": sd_v, "rD": rD, "swt": swt,
        },
        n,
        nthread=nthread,
        dp=dp,
        gpuid=gpuid,
        backend=backend,
        random_state=random_state,
    )


def rplba1(
    n,
    A=None,
    b=None,
    t0=None,
    mean_v=None,
    mean_w=None,
    sd_v=None,
    rD=None,
    swt=None,
    nthread=32,
    gpuid=0,
    *,
    dp=False,
    backend="numba",
    random_state=None,
):
    """Piecewise LBA with a single drift switch and positive stage drifts.

    Same parameters and defaults as :func:`rplba0`; both stage drifts are
    drawn from normals truncated to positive values.
    """
    return sample(
        "rplba1",
        {
            "A": A, "b": b, "t0": t0, "mean_v": mean_v, "mean_w": mean_w,
            "sd_v": sd_v, "rD": rD, "swt": swt,
        },
        n,
        nthread=nthread,
        dp=dp,
        gpuid=gpuid,
        backend=backend,
        random_state=random_state,
    )


def rplba2(
    n,
    A=None,
    b=None,
    t0=None,
    mean_v=None,
    mean_w=None,
    sd_v=None,
    sd_w=None,
    rD=None,
    swt=None,
    nthread=32,
    gpuid=0,
    *,
    dp=False,
    backend="numba",
    random_state=None,
):
    """Piecewise LBA with per-accumulator ``A`` and ``b`` and a stage-2 sd.

    Defaults: ``A=(1.5, 1.5)``, ``b=(2.7, 2.7)``, ``t0=0.08``,
    ``mean_v=(3.3, 2.2)``, ``mean_w=(1.5, 3.7)``, ``sd_v=(1, 1)``,
    ``sd_w=(1, 1)``, ``rD=0.3``, ``swt=0.5``.
    """
    return sample(
        "rplba2",
        {
            "A": A, "b": b, "t0": t0, "mean_v": mean_v, "mean_w": mean_w,
            "sd_v": sd_v, "sd_w": sd_w, "rD": rD, "swt": swt,
        },
        n,
        nthread=nthread,
        dp=dp,
        gpuid=gpuid,
        backend=backend,
        random_state=random_state,
    )


def rplba3(
    n,
    A=None,
    B=None,
    C=None,
    mean_v=None,
    mean_w=None,
    sd_v=None,
    sd_w=None,
    rD=None,
    tD=None,
    swt=None,
    t0=None,
    nthread=32,
    gpuid=0,
    *,
    dp=False,
    backend="numba",
    random_state=None,
):
    """Piecewise LBA where both the drift and the threshold switch.

    The threshold starts at ``b = A + B`` and moves to ``c = b + C`` at
    ``swt + tD``; the drift switches at ``swt + rD``. Defaults:
    ``A=(1.5, 1.5)``, ``B=(1.2, 1.2)``, ``C=(0.3, 0.3)``,
    ``mean_v=(3.3, 2.2)``, ``mean_w=(1.5, 3.7)``, ``sd_v=(1, 1)``,
    ``sd_w=(1, 1)``, ``rD=0.3``, ``tD=0.3``, ``swt=0.5``, ``t0=0.08``.
    """
    return sample(
        "rplba3",
        {
            "A": A, "B": B, "C": C, "mean_v": mean_v, "mean_w": mean_w,
            "sd_v": sd_v, "sd_w": sd_w, "rD": rD, "tD": tD, "swt": swt, "t0": t0,
        },
        n,
        nthread=nthread,
        dp=dp,
        gpuid=gpuid,
        backend=backend,
        random_state=random_state,
    )
