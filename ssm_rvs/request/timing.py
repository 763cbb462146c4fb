"""Stage timing for the piecewise LBA samplers.

A piecewise trial is cut into at most three segments::

    [0, e1)      [e1, e2)      [e2, inf)

The drift rate switches from the stage-1 draw ``v`` to the stage-2 draw
``w`` at the start of segment ``drift_segment``; the threshold switches
from ``b`` to ``c`` at the start of segment ``threshold_segment``. A
segment index of 3 means "never". Kernels only ever see this layout, so the
ordering of the two switch events is decided here, once per request.
"""

import enum
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

NEVER = 3


class SwitchOrder(enum.IntEnum):
    """Which of the two switch events of ``rplba3`` happens first."""

    SIMULTANEOUS = 0
    THRESHOLD_FIRST = 1
    DRIFT_FIRST = 2


@dataclass(frozen=True)
class StageTiming:
    """Ordered switch times and the segment layout derived from them.

    Attributes
    ----------
    swt1, swt2 : float
        Earlier and later switch time (``swt1 <= swt2``).
    order : SwitchOrder or None
        Ordering of the drift and threshold switches; ``None`` for the
        single-switch variants.
    drift_segment, threshold_segment : int
        Segment index (0, 1, 2) at which drift / threshold switch, or
        ``NEVER``.
    """

    swt1: float
    swt2: float
    order: SwitchOrder | None
    drift_segment: int
    threshold_segment: int

    @property
    def swt_d(self) -> float:
        """Time between the two switch events."""
        return self.swt2 - self.swt1

    @property
    def edges(self) -> tuple[float, float]:
        return self.swt1, self.swt2

    @classmethod
    def single_switch(cls, swt: float, rD: float) -> "StageTiming":
        """Layout for ``rplba0``-``rplba2``: one drift switch at ``swt + rD``."""
        t_switch = swt + rD
        return cls(
            swt1=t_switch,
            swt2=t_switch,
            order=None,
            drift_segment=1,
            threshold_segment=NEVER,
        )

    @classmethod
    def from_delays(cls, swt: float, rD: float, tD: float) -> "StageTiming":
        """Order the drift switch ``swt + rD`` and threshold switch ``swt + tD``."""
        swt_r = rD + swt
        swt_b = tD + swt
        if swt_r == swt_b:
            timing = cls(swt_r, swt_r, SwitchOrder.SIMULTANEOUS, 1, 1)
        elif swt_b < swt_r:
            timing = cls(swt_b, swt_r, SwitchOrder.THRESHOLD_FIRST, 2, 1)
        else:
            timing = cls(swt_r, swt_b, SwitchOrder.DRIFT_FIRST, 1, 2)
        logger.debug(
            "Stage timing: order=%s swt_r=%.6g swt_b=%.6g", timing.order, swt_r, swt_b
        )
        return timing
