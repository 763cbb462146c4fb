"""Floating-point precision of a sampling call."""

import enum

import numpy as np


class Precision(enum.Enum):
    """Output precision. Both precisions implement every sampler family."""

    SINGLE = "single"
    DOUBLE = "double"

    @classmethod
    def from_flag(cls, dp) -> "Precision":
        """Map the boolean ``dp`` flag of the public API onto a precision."""
        if not isinstance(dp, (bool, np.bool_)):
            raise TypeError(f"dp must be a boolean, got {dp!r}")
        return cls.DOUBLE if dp else cls.SINGLE

    @property
    def dtype(self) -> type:
        return np.float64 if self is Precision.DOUBLE else np.float32

    @property
    def is_double(self) -> bool:
        return self is Precision.DOUBLE
