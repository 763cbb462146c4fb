"""Backend-independent part of the sampling engines."""

import logging
from abc import ABC, abstractmethod

import numpy as np

from ssm_rvs.exceptions import DeviceError, SamplingError
from ssm_rvs.request.builder import SampleRequest
from ssm_rvs.request.precision import Precision

logger = logging.getLogger(__name__)


class SamplingEngine(ABC):
    """Runs validated requests on one backend at one precision.

    Subclasses provide the kernel entry points (``_runif``,
    ``_rnorm``, ``_rtnorm``, ``_race``, ``_piecewise_race``) and the device
    list; the per-family methods and the output checks live here. Engines
    hold no per-call state, so one instance per ``(backend, precision)`` is
    shared by every caller.
    """

    backend: str = ""
    precision: Precision = Precision.SINGLE

    @property
    def dtype(self) -> type:
        return self.precision.dtype

    @property
    def single(self) -> bool:
        return not self.precision.is_double

    @abstractmethod
    def devices(self) -> list[str]:
        """Names of the devices ``gpuid`` can select."""

    def check_device(self, gpuid: int) -> None:
        available = self.devices()
        if gpuid >= len(available):
            raise DeviceError(
                f"gpuid={gpuid} is not available on the {self.backend} backend; "
                f"devices: {available}"
            )

    # ------------------------------------------------------------------
    # Kernel entry points
    # ------------------------------------------------------------------

    @abstractmethod
    def _runif(self, request: SampleRequest) -> np.ndarray: ...

    @abstractmethod
    def _rnorm(self, request: SampleRequest) -> np.ndarray: ...

    @abstractmethod
    def _rtnorm(self, request: SampleRequest) -> np.ndarray: ...

    @abstractmethod
    def _race(self, request: SampleRequest) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return ``(rt, rt1, choice)`` of the LBA race."""

    @abstractmethod
    def _piecewise_race(self, request: SampleRequest) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(rt, choice)`` of the piecewise LBA race."""

    # ------------------------------------------------------------------
    # One method per sampler family
    # ------------------------------------------------------------------

    def runif(self, request: SampleRequest) -> dict[str, np.ndarray]:
        return {"values": self._runif(request)}

    def rnorm(self, request: SampleRequest) -> dict[str, np.ndarray]:
        return {"values": self._rnorm(request)}

    def rtnorm(self, request: SampleRequest) -> dict[str, np.ndarray]:
        return {"values": self._rtnorm(request)}

    def rlba(self, request: SampleRequest) -> dict[str, np.ndarray]:
        rt, _, choice = self._race(request)
        return {"RT": rt, "R": choice}

    def rlba_n1(self, request: SampleRequest) -> dict[str, np.ndarray]:
        _, rt1, choice = self._race(request)
        return {"RT1": rt1, "R": choice}

    def rplba0(self, request: SampleRequest) -> dict[str, np.ndarray]:
        rt, choice = self._piecewise_race(request)
        return {"RT": rt, "R": choice}

    def rplba1(self, request: SampleRequest) -> dict[str, np.ndarray]:
        rt, choice = self._piecewise_race(request)
        return {"RT": rt, "R": choice}

    def rplba2(self, request: SampleRequest) -> dict[str, np.ndarray]:
        rt, choice = self._piecewise_race(request)
        return {"RT": rt, "R": choice}

    def rplba3(self, request: SampleRequest) -> dict[str, np.ndarray]:
        rt, choice = self._piecewise_race(request)
        return {"RT": rt, "R": choice}

    # ------------------------------------------------------------------

    def _empty(self, request: SampleRequest) -> dict[str, np.ndarray]:
        return {
            col: np.empty(0, dtype=np.int32 if col == "R" else self.dtype)
            for col in request.config["output"]
        }

    def run(self, request: SampleRequest) -> dict[str, np.ndarray]:
        """Execute a request and return its output columns.

        Raises
        ------
        ValueError
            If the request was built for the other precision.
        DeviceError
            If ``request.gpuid`` does not name a device of this backend.
        SamplingError
            If any draw exhausted its retry budget.
        """
        if request.precision is not self.precision:
            raise ValueError(
                f"{type(self).__name__} runs {self.precision.value} precision, "
                f"request is {request.precision.value}"
            )
        self.check_device(request.gpuid)

        if request.n == 0:
            return self._empty(request)

        method = getattr(self, request.config["engine_method"])
        logger.debug(
            "Running %s on %s/%s: n=%d blocks=%d",
            request.name,
            self.backend,
            self.precision.value,
            request.n,
            request.n_blocks,
        )
        out = method(request)

        primary = out[request.config["output"][0]]
        n_failed = int(np.count_nonzero(np.isnan(primary)))
        if n_failed:
            raise SamplingError(request.name, n_failed, request.n)
        return out

    def __repr__(self) -> str:
        return f"{type(self).__name__}(backend={self.backend!r}, precision={self.precision.value!r})"
