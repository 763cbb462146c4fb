"""
Class-based interface to the samplers.

A :class:`Sampler` binds the execution settings (precision, backend, block
size, device) once and exposes one method per sampler family, so repeated
calls only pass model parameters.
"""

import logging
from typing import Any

import numpy as np
import pandas as pd

from ssm_rvs.basic_samplers.sampler import assemble
from ssm_rvs.config import get_default_engine_config, get_sampler_registry
from ssm_rvs.engines import get_engine
from ssm_rvs.request.builder import build_request

logger = logging.getLogger(__name__)


class Sampler:
    """Sampling facade bound to ``(dp, backend, nthread, gpuid)``.

    Examples
    --------
    >>> sampler = Sampler(dp=True, random_state=123)
    >>> df = sampler.rlba(1000, mean_v=[2.0, 1.0])
    >>> df.columns.tolist()
    ['RT', 'R']

    With a ``random_state`` the sampler owns a ``numpy.random.Generator``;
    each call draws its seed from it, so a sequence of calls is
    reproducible but no two calls share a seed.
    """

    def __init__(
        self,
        dp: bool | None = None,
        backend: str | None = None,
        nthread: int | None = None,
        gpuid: int | None = None,
        random_state=None,
    ):
        defaults = get_default_engine_config()
        self.dp = defaults["dp"] if dp is None else dp
        self.backend = defaults["backend"] if backend is None else backend
        self.nthread = defaults["nthread"] if nthread is None else nthread
        self.gpuid = defaults["gpuid"] if gpuid is None else gpuid
        self.engine = get_engine(dp=self.dp, backend=self.backend)
        self._rng = None if random_state is None else np.random.default_rng(random_state)

    @classmethod
    def from_config(cls, config: dict, random_state=None) -> "Sampler":
        """Build a sampler from an engine config dict (see ``load_engine_config``)."""
        return cls(
            dp=config.get("dp"),
            backend=config.get("backend"),
            nthread=config.get("nthread"),
            gpuid=config.get("gpuid"),
            random_state=random_state,
        )

    def sample(self, name: str, n: int, **theta: Any) -> np.ndarray | pd.DataFrame:
        """Draw ``n`` samples from the registered sampler ``name``."""
        request = build_request(
            name,
            n,
            theta,
            dp=self.dp,
            nthread=self.nthread,
            gpuid=self.gpuid,
            random_state=self._rng,
            device_check=self.engine.check_device,
        )
        return assemble(request, self.engine.run(request))

    def runif(self, n: int, **theta) -> np.ndarray:
        return self.sample("runif", n, **theta)

    def rnorm(self, n: int, **theta) -> np.ndarray:
        return self.sample("rnorm", n, **theta)

    def rtnorm(self, n: int, **theta) -> np.ndarray:
        return self.sample("rtnorm", n, **theta)

    def rlba(self, n: int, **theta) -> pd.DataFrame:
        return self.sample("rlba", n, **theta)

    def rlba_n1(self, n: int, **theta) -> pd.DataFrame:
        return self.sample("rlba_n1", n, **theta)

    def rplba0(self, n: int, **theta) -> pd.DataFrame:
        return self.sample("rplba0", n, **theta)

    def rplba1(self, n: int, **theta) -> pd.DataFrame:
        return self.sample("rplba1", n, **theta)

    def rplba2(self, n: int, **theta) -> pd.DataFrame:
        return self.sample("rplba2", n, **theta)

    def rplba3(self, n: int, **theta) -> pd.DataFrame:
        return self.sample("rplba3", n, **theta)

    @staticmethod
    def available() -> list[str]:
        """Names of every registered sampler."""
        return get_sampler_registry().list_samplers()

    def __repr__(self) -> str:
        return (
            f"Sampler(dp={self.dp}, backend={self.backend!r}, "
            f"nthread={self.nthread}, gpuid={self.gpuid})"
        )
